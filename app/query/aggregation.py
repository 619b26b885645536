"""
Monetary and count aggregations over an entity snapshot.

``line_value`` is the single place where an absent unit price or discount is
treated as zero. Every total in the system goes through it.
"""

from decimal import Decimal
from typing import Callable, Dict, Hashable, Iterable, TypeVar

from app.query.navigation import RelationshipResolver
from app.store.entities import Order, OrderItem
from app.store.snapshot import EntityStore

K = TypeVar("K", bound=Hashable)
M = TypeVar("M")

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Express a monetary value with at least two decimal places, never rounding."""
    value = value if isinstance(value, Decimal) else Decimal(str(value))
    if value.as_tuple().exponent > -2:
        return value.quantize(CENT)
    return value


def line_value(item: OrderItem) -> Decimal:
    """quantity * (unit_price or 0) - (discount or 0)"""
    unit_price = item.unit_price if item.unit_price is not None else ZERO
    discount = item.discount if item.discount is not None else ZERO
    return Decimal(item.quantity) * unit_price - discount


def total_of(items: Iterable[OrderItem]) -> Decimal:
    return to_money(sum((line_value(item) for item in items), ZERO))


def quantity_of(items: Iterable[OrderItem]) -> int:
    return sum(item.quantity for item in items)


def group_sum(
    keys: Iterable[K],
    members_of: Callable[[K], Iterable[M]],
    value: Callable[[M], object],
    start=0,
) -> Dict[K, object]:
    """Sum ``value`` over each key's members. Every key appears, with ``start`` if it has none."""
    return {key: sum((value(member) for member in members_of(key)), start) for key in keys}


def group_count(keys: Iterable[K], members_of: Callable[[K], Iterable[M]]) -> Dict[K, int]:
    """Count each key's members. Every key appears, with 0 if it has none."""
    return {key: sum(1 for _ in members_of(key)) for key in keys}


class AggregationEngine:
    """Per-order, per-customer and per-product aggregates over one snapshot."""

    def __init__(self, store: EntityStore, resolver: RelationshipResolver = None):
        self.store = store
        self.resolver = resolver or RelationshipResolver(store)

    def order_total(self, order: Order) -> Decimal:
        return total_of(self.resolver.resolve_all(order, "order.items"))

    def item_count(self, order: Order) -> int:
        """Number of units in the order (sum of quantities)."""
        return quantity_of(self.resolver.resolve_all(order, "order.items"))

    def customer_totals(self) -> Dict[int, Decimal]:
        """Total order value per customer identity, 0.00 for customers without orders."""
        totals = group_sum(
            (customer.customer_id for customer in self.store.customers),
            self.store.orders_of_customer,
            lambda order: sum((line_value(item) for item in self.store.items_of_order(order.order_id)), ZERO),
            start=ZERO,
        )
        return {customer_id: to_money(total) for customer_id, total in totals.items()}

    def order_counts_by_customer(self) -> Dict[int, int]:
        return group_count(
            (customer.customer_id for customer in self.store.customers),
            self.store.orders_of_customer,
        )

    def quantity_sold_by_product(self) -> Dict[int, int]:
        """Units sold per product identity, 0 for products never ordered."""
        return group_sum(
            (product.product_id for product in self.store.products),
            self.store.items_of_product,
            lambda item: item.quantity,
        )
