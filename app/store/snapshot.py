"""
Entity store: the immutable, fully materialized snapshot every report runs on.

Relationships are kept as foreign-key indexes (identity -> tuple of related
entities) built once at construction time. Entities never point back at each
other, so the store has no cyclic ownership and no lazy loading.
"""

import uuid
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple, TypeVar

from app.core.exceptions import SnapshotIntegrityError
from app.store.entities import Carrier, Category, Customer, Order, OrderItem, Product, ProductCategory

T = TypeVar("T")


def _index_by_identity(entities: Iterable[T], identity: str, kind: str) -> Dict[int, T]:
    """Index entities by identity in ascending identity order, rejecting duplicates."""
    index: Dict[int, T] = {}
    for entity in entities:
        key = getattr(entity, identity)
        if key in index:
            raise SnapshotIntegrityError(f"Duplicate {kind} identity {key}")
        index[key] = entity
    return {key: index[key] for key in sorted(index)}


def _freeze(groups: Dict[int, List[T]]) -> Dict[int, Tuple[T, ...]]:
    return {key: tuple(values) for key, values in groups.items()}


class EntityStore:
    """Read-only collections of the six entity kinds plus their relationship indexes."""

    def __init__(
        self,
        customers: Iterable[Customer] = (),
        orders: Iterable[Order] = (),
        order_items: Iterable[OrderItem] = (),
        products: Iterable[Product] = (),
        categories: Iterable[Category] = (),
        carriers: Iterable[Carrier] = (),
        product_categories: Iterable[ProductCategory] = (),
        loaded_at: Optional[datetime] = None,
    ):
        self._customers = _index_by_identity(customers, "customer_id", "customer")
        self._orders = _index_by_identity(orders, "order_id", "order")
        self._order_items = _index_by_identity(order_items, "order_item_id", "order item")
        self._products = _index_by_identity(products, "product_id", "product")
        self._categories = _index_by_identity(categories, "category_id", "category")
        self._carriers = _index_by_identity(carriers, "carrier_id", "carrier")
        links = tuple(dict.fromkeys(product_categories))

        self._validate(links)

        orders_by_customer = defaultdict(list)
        orders_by_carrier = defaultdict(list)
        for order in self._orders.values():
            orders_by_customer[order.customer_id].append(order)
            if order.carrier_id is not None:
                orders_by_carrier[order.carrier_id].append(order)

        items_by_order = defaultdict(list)
        items_by_product = defaultdict(list)
        for item in self._order_items.values():
            items_by_order[item.order_id].append(item)
            items_by_product[item.product_id].append(item)

        categories_by_product = defaultdict(list)
        products_by_category = defaultdict(list)
        for link in sorted(links, key=lambda l: (l.product_id, l.category_id)):
            categories_by_product[link.product_id].append(self._categories[link.category_id])
        for link in sorted(links, key=lambda l: (l.category_id, l.product_id)):
            products_by_category[link.category_id].append(self._products[link.product_id])

        self._orders_by_customer = _freeze(orders_by_customer)
        self._orders_by_carrier = _freeze(orders_by_carrier)
        self._items_by_order = _freeze(items_by_order)
        self._items_by_product = _freeze(items_by_product)
        self._categories_by_product = _freeze(categories_by_product)
        self._products_by_category = _freeze(products_by_category)

        self.loaded_at = loaded_at or datetime.now()
        self.version = uuid.uuid4().hex

    def _validate(self, links: Tuple[ProductCategory, ...]) -> None:
        """Fail fast on dangling references or impossible values."""
        for order in self._orders.values():
            if order.customer_id not in self._customers:
                raise SnapshotIntegrityError(
                    f"Order {order.order_id} references missing customer {order.customer_id}"
                )
            if order.carrier_id is not None and order.carrier_id not in self._carriers:
                raise SnapshotIntegrityError(
                    f"Order {order.order_id} references missing carrier {order.carrier_id}"
                )

        for item in self._order_items.values():
            if item.order_id not in self._orders:
                raise SnapshotIntegrityError(
                    f"Order item {item.order_item_id} references missing order {item.order_id}"
                )
            if item.product_id not in self._products:
                raise SnapshotIntegrityError(
                    f"Order item {item.order_item_id} references missing product {item.product_id}"
                )
            if item.quantity is None or item.quantity < 1:
                raise SnapshotIntegrityError(
                    f"Order item {item.order_item_id} has invalid quantity {item.quantity!r}"
                )

        for link in links:
            if link.product_id not in self._products or link.category_id not in self._categories:
                raise SnapshotIntegrityError(
                    f"Product/category link ({link.product_id}, {link.category_id}) is dangling"
                )

    # ===== COLLECTIONS (ascending identity order) =====

    @property
    def customers(self) -> Tuple[Customer, ...]:
        return tuple(self._customers.values())

    @property
    def orders(self) -> Tuple[Order, ...]:
        return tuple(self._orders.values())

    @property
    def order_items(self) -> Tuple[OrderItem, ...]:
        return tuple(self._order_items.values())

    @property
    def products(self) -> Tuple[Product, ...]:
        return tuple(self._products.values())

    @property
    def categories(self) -> Tuple[Category, ...]:
        return tuple(self._categories.values())

    @property
    def carriers(self) -> Tuple[Carrier, ...]:
        return tuple(self._carriers.values())

    # ===== LOOKUPS =====

    def get_customer(self, customer_id: int) -> Optional[Customer]:
        return self._customers.get(customer_id)

    def get_order(self, order_id: int) -> Optional[Order]:
        return self._orders.get(order_id)

    def get_order_item(self, order_item_id: int) -> Optional[OrderItem]:
        return self._order_items.get(order_item_id)

    def get_product(self, product_id: int) -> Optional[Product]:
        return self._products.get(product_id)

    def get_category(self, category_id: int) -> Optional[Category]:
        return self._categories.get(category_id)

    def get_carrier(self, carrier_id: Optional[int]) -> Optional[Carrier]:
        if carrier_id is None:
            return None
        return self._carriers.get(carrier_id)

    def category_by_name(self, name: str) -> Optional[Category]:
        """First category (by identity) with exactly this name."""
        for category in self._categories.values():
            if category.name == name:
                return category
        return None

    # ===== RELATIONSHIP INDEXES =====

    def orders_of_customer(self, customer_id: int) -> Tuple[Order, ...]:
        return self._orders_by_customer.get(customer_id, ())

    def orders_of_carrier(self, carrier_id: int) -> Tuple[Order, ...]:
        return self._orders_by_carrier.get(carrier_id, ())

    def items_of_order(self, order_id: int) -> Tuple[OrderItem, ...]:
        return self._items_by_order.get(order_id, ())

    def items_of_product(self, product_id: int) -> Tuple[OrderItem, ...]:
        return self._items_by_product.get(product_id, ())

    def categories_of_product(self, product_id: int) -> Tuple[Category, ...]:
        return self._categories_by_product.get(product_id, ())

    def products_of_category(self, category_id: int) -> Tuple[Product, ...]:
        return self._products_by_category.get(category_id, ())

    def counts(self) -> Dict[str, int]:
        """Entity counts per kind, for logging."""
        return {
            "customers": len(self._customers),
            "orders": len(self._orders),
            "order_items": len(self._order_items),
            "products": len(self._products),
            "categories": len(self._categories),
            "carriers": len(self._carriers),
        }

    def __repr__(self):
        return f"<EntityStore(version={self.version[:8]}, {self.counts()})>"
