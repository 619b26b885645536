"""Data Access Object for the webstore database."""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.store import entities
from app.store.models import Carrier, Category, Customer, Order, OrderItem, Product, product_categories
from app.store.snapshot import EntityStore

logger = logging.getLogger(__name__)


def _to_decimal(value) -> Optional[Decimal]:
    """Normalize a numeric column value to Decimal, keeping None."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class WebStoreDAO:
    """Loads webstore tables and materializes them into an ``EntityStore``."""

    def __init__(self, store_session: Session):
        self.db = store_session

    # ===== TABLE READS =====

    def get_all_customers(self) -> List[Customer]:
        """Get all customers"""
        stmt = select(Customer).order_by(Customer.customer_id)
        return list(self.db.execute(stmt).scalars().all())

    def get_all_orders(self) -> List[Order]:
        """Get all orders"""
        stmt = select(Order).order_by(Order.order_id)
        return list(self.db.execute(stmt).scalars().all())

    def get_all_order_items(self) -> List[OrderItem]:
        """Get all order items"""
        stmt = select(OrderItem).order_by(OrderItem.order_item_id)
        return list(self.db.execute(stmt).scalars().all())

    def get_all_products(self) -> List[Product]:
        """Get all products"""
        stmt = select(Product).order_by(Product.product_id)
        return list(self.db.execute(stmt).scalars().all())

    def get_all_categories(self) -> List[Category]:
        """Get all categories"""
        stmt = select(Category).order_by(Category.category_id)
        return list(self.db.execute(stmt).scalars().all())

    def get_all_carriers(self) -> List[Carrier]:
        """Get all carriers"""
        stmt = select(Carrier).order_by(Carrier.carrier_id)
        return list(self.db.execute(stmt).scalars().all())

    def get_product_category_links(self) -> List[tuple]:
        """Get (product_id, category_id) rows of the junction table"""
        stmt = select(product_categories.c.product_id, product_categories.c.category_id).order_by(
            product_categories.c.product_id, product_categories.c.category_id
        )
        return [tuple(row) for row in self.db.execute(stmt).all()]

    # ===== SNAPSHOT =====

    def load_snapshot(self) -> EntityStore:
        """Read every table once and build an immutable entity store."""
        store = EntityStore(
            customers=[
                entities.Customer(
                    customer_id=row.customer_id,
                    first_name=row.first_name,
                    last_name=row.last_name,
                    email=row.email,
                )
                for row in self.get_all_customers()
            ],
            orders=[
                entities.Order(
                    order_id=row.order_id,
                    customer_id=row.customer_id,
                    order_date=row.order_date,
                    status=row.order_status,
                    carrier_id=row.carrier_id,
                    tracking_number=row.tracking_number,
                    shipped_date=row.shipped_date,
                    delivered_date=row.delivered_date,
                )
                for row in self.get_all_orders()
            ],
            order_items=[
                entities.OrderItem(
                    order_item_id=row.order_item_id,
                    order_id=row.order_id,
                    product_id=row.product_id,
                    quantity=row.quantity,
                    unit_price=_to_decimal(row.unit_price),
                    discount=_to_decimal(row.discount),
                )
                for row in self.get_all_order_items()
            ],
            products=[
                entities.Product(
                    product_id=row.product_id,
                    name=row.product_name,
                    price=_to_decimal(row.price),
                )
                for row in self.get_all_products()
            ],
            categories=[
                entities.Category(category_id=row.category_id, name=row.category_name)
                for row in self.get_all_categories()
            ],
            carriers=[
                entities.Carrier(
                    carrier_id=row.carrier_id,
                    name=row.carrier_name,
                    contact_url=row.contact_url,
                    contact_phone=row.contact_phone,
                )
                for row in self.get_all_carriers()
            ],
            product_categories=[
                entities.ProductCategory(product_id=product_id, category_id=category_id)
                for product_id, category_id in self.get_product_category_links()
            ],
        )
        logger.info(
            "Loaded webstore snapshot %s at %s: %s", store.version[:8], store.loaded_at.isoformat(), store.counts()
        )
        return store
