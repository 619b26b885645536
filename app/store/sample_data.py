"""Sample data for development databases."""

import logging
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from app.store.entities import OrderStatus
from app.store.models import Carrier, Category, Customer, Order, OrderItem, Product

logger = logging.getLogger(__name__)


def create_sample_data(session: Session) -> bool:
    """Seed the webstore tables. Returns False when data already exists."""
    existing = session.query(Customer).count()
    if existing > 0:
        logger.info("Sample data already exists (%s customers). Skipping creation.", existing)
        return False

    now = datetime.now()

    try:
        carriers = [
            Carrier(carrier_id=1, carrier_name="DHL", contact_url="https://www.dhl.com", contact_phone="1-800-225-5345"),
            Carrier(carrier_id=2, carrier_name="FedEx", contact_url="https://www.fedex.com", contact_phone="1-800-463-3339"),
            Carrier(carrier_id=3, carrier_name="UPS", contact_url="https://www.ups.com", contact_phone=None),
        ]

        electronics = Category(category_id=1, category_name="Electronics")
        books = Category(category_id=2, category_name="Books")
        home = Category(category_id=3, category_name="Home")
        office = Category(category_id=4, category_name="Office")

        products = [
            Product(product_id=1, product_name="Laptop", price=Decimal("1199.99"), categories=[electronics, office]),
            Product(product_id=2, product_name="Wireless Mouse", price=Decimal("24.99"), categories=[electronics]),
            Product(product_id=3, product_name="Desk Lamp", price=Decimal("39.50"), categories=[home, office]),
            Product(product_id=4, product_name="Python Cookbook", price=Decimal("45.00"), categories=[books]),
            Product(product_id=5, product_name="Headphones", price=Decimal("89.90"), categories=[electronics]),
            Product(product_id=6, product_name="Coffee Mug", price=Decimal("9.75"), categories=[home]),
        ]

        customers = [
            Customer(customer_id=1, first_name="Alice", last_name="Johnson", email="alice.johnson@example.com"),
            Customer(customer_id=2, first_name="Bob", last_name="Smith", email="bob.smith@example.com"),
            Customer(customer_id=3, first_name="Carla", last_name="Diaz", email="carla.diaz@example.com"),
            Customer(customer_id=4, first_name="Dmitri", last_name="Ivanov", email="dmitri.ivanov@example.com"),
        ]

        orders = [
            Order(
                order_id=1, customer_id=1, order_date=now - timedelta(days=45),
                order_status=OrderStatus.DELIVERED.value, carrier_id=1,
                tracking_number="DH123456789",
                shipped_date=now - timedelta(days=43), delivered_date=now - timedelta(days=40),
            ),
            Order(
                order_id=2, customer_id=1, order_date=now - timedelta(days=5),
                order_status=OrderStatus.PENDING.value,
            ),
            Order(
                order_id=3, customer_id=2, order_date=now - timedelta(days=12),
                order_status=OrderStatus.SHIPPED.value, carrier_id=2,
                tracking_number="FX987654321", shipped_date=now - timedelta(days=10),
            ),
            Order(
                order_id=4, customer_id=3, order_date=now - timedelta(days=2),
                order_status=OrderStatus.PENDING.value,
            ),
        ]

        order_items = [
            OrderItem(order_item_id=1, order_id=1, product_id=1, quantity=1, unit_price=Decimal("1199.99"), discount=Decimal("100.00")),
            OrderItem(order_item_id=2, order_id=1, product_id=2, quantity=2, unit_price=Decimal("24.99"), discount=None),
            OrderItem(order_item_id=3, order_id=2, product_id=4, quantity=1, unit_price=Decimal("45.00"), discount=None),
            OrderItem(order_item_id=4, order_id=2, product_id=6, quantity=4, unit_price=Decimal("9.75"), discount=Decimal("2.00")),
            OrderItem(order_item_id=5, order_id=3, product_id=5, quantity=1, unit_price=Decimal("89.90"), discount=None),
            OrderItem(order_item_id=6, order_id=3, product_id=3, quantity=2, unit_price=None, discount=None),
            OrderItem(order_item_id=7, order_id=4, product_id=2, quantity=3, unit_price=Decimal("24.99"), discount=Decimal("0")),
        ]

        session.add_all(carriers)
        session.add_all(products)
        session.add_all(customers)
        session.flush()
        session.add_all(orders)
        session.flush()
        session.add_all(order_items)
        session.commit()

        logger.info(
            "Sample data created: %s customers, %s products, %s orders, %s order items",
            len(customers), len(products), len(orders), len(order_items),
        )
        return True

    except Exception:
        session.rollback()
        logger.exception("Error creating sample data")
        raise
