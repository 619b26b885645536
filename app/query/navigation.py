"""
Named relationship navigations over an ``EntityStore``.

Every navigation the reports use is declared once in ``NAVIGATIONS``. Lookups
of an undeclared name fail immediately with ``UnknownNavigationError``.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Type

from app.core.exceptions import UnknownNavigationError
from app.store.entities import Carrier, Category, Customer, Order, OrderItem, Product
from app.store.snapshot import EntityStore


@dataclass(frozen=True)
class Navigation:
    """Defines how one entity kind reaches another."""

    name: str
    source: Type
    target: Type
    many: bool
    resolver: Callable[[EntityStore, Any], Any]


def _declare(*navigations: Navigation) -> Dict[str, Navigation]:
    return {navigation.name: navigation for navigation in navigations}


NAVIGATIONS: Dict[str, Navigation] = _declare(
    Navigation(
        "customer.orders", Customer, Order, True,
        lambda store, customer: store.orders_of_customer(customer.customer_id),
    ),
    Navigation(
        "order.customer", Order, Customer, False,
        lambda store, order: store.get_customer(order.customer_id),
    ),
    Navigation(
        "order.items", Order, OrderItem, True,
        lambda store, order: store.items_of_order(order.order_id),
    ),
    Navigation(
        "order.carrier", Order, Carrier, False,
        lambda store, order: store.get_carrier(order.carrier_id),
    ),
    Navigation(
        "order_item.order", OrderItem, Order, False,
        lambda store, item: store.get_order(item.order_id),
    ),
    Navigation(
        "order_item.product", OrderItem, Product, False,
        lambda store, item: store.get_product(item.product_id),
    ),
    Navigation(
        "product.order_items", Product, OrderItem, True,
        lambda store, product: store.items_of_product(product.product_id),
    ),
    Navigation(
        "product.categories", Product, Category, True,
        lambda store, product: store.categories_of_product(product.product_id),
    ),
    Navigation(
        "category.products", Category, Product, True,
        lambda store, category: store.products_of_category(category.category_id),
    ),
    Navigation(
        "carrier.orders", Carrier, Order, True,
        lambda store, carrier: store.orders_of_carrier(carrier.carrier_id),
    ),
)


def get_navigation(name: str) -> Navigation:
    """Look up a navigation definition by name."""
    try:
        return NAVIGATIONS[name]
    except KeyError:
        raise UnknownNavigationError(name, NAVIGATIONS.keys()) from None


class RelationshipResolver:
    """Resolves named navigations against one snapshot. Pure and side-effect free."""

    def __init__(self, store: EntityStore):
        self.store = store

    @staticmethod
    def navigation(name: str) -> Navigation:
        return get_navigation(name)

    def resolve(self, entity: Any, name: str):
        """
        Follow a navigation from ``entity``.

        Returns a tuple for to-many navigations and the related entity (or
        None when the optional relation is unset) for to-one navigations.
        """
        navigation = get_navigation(name)
        if not isinstance(entity, navigation.source):
            raise TypeError(
                f"Navigation '{name}' starts from {navigation.source.__name__}, "
                f"got {type(entity).__name__}"
            )
        return navigation.resolver(self.store, entity)

    def resolve_all(self, entity: Any, name: str) -> Tuple[Any, ...]:
        """Follow a navigation and always return a tuple."""
        result = self.resolve(entity, name)
        if get_navigation(name).many:
            return result
        return () if result is None else (result,)

    def resolve_one(self, entity: Any, name: str) -> Optional[Any]:
        """Follow a to-one navigation."""
        if get_navigation(name).many:
            raise TypeError(f"Navigation '{name}' is to-many; use resolve_all()")
        return self.resolve(entity, name)
