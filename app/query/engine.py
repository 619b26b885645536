"""
QueryEngine: the evaluation phase of report execution.

``evaluate`` is a pure function of a ``ReportQuery`` and an ``EntityStore``.
Rows are fully materialized before they are returned; an error anywhere in a
report aborts it without exposing partial rows.
"""

import logging
import time
from typing import Any, Callable, Dict, List

from app.query.aggregation import AggregationEngine
from app.query.builder import QueryBuilder
from app.query.navigation import RelationshipResolver
from app.query.predicates import (
    Predicate,
    exists,
    field_equals,
    field_greater_than,
    field_is_present,
    project,
    select,
)
from app.query.ranking import SortKey, stable_sort, top_n, within_last_days
from app.query.schemas import QueryResult, ReportKind, ReportQuery
from app.store.entities import Order
from app.store.snapshot import EntityStore

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class QueryEngine:
    """Evaluates report queries against one immutable snapshot."""

    def __init__(self, store: EntityStore):
        self.store = store
        self.resolver = RelationshipResolver(store)
        self.aggregates = AggregationEngine(store, self.resolver)
        self._handlers: Dict[ReportKind, Callable[[ReportQuery], List[Row]]] = {
            ReportKind.CUSTOMERS: self._customers,
            ReportKind.ORDERS_WITH_ITEM_COUNTS: self._orders_with_item_counts,
            ReportKind.PRODUCTS_BY_PRICE: self._products_by_price,
            ReportKind.PENDING_ORDERS: self._pending_orders,
            ReportKind.ORDER_COUNTS: self._order_counts,
            ReportKind.TOP_CUSTOMERS: self._top_customers,
            ReportKind.RECENT_ORDERS: self._recent_orders,
            ReportKind.PRODUCT_SALES: self._product_sales,
            ReportKind.DISCOUNTED_ORDERS: self._discounted_orders,
            ReportKind.CATEGORY_ORDERS: self._category_orders,
            ReportKind.SHIPMENTS: self._shipments,
        }

    # ===== MAIN ENTRY POINT =====

    def evaluate(self, query: ReportQuery) -> QueryResult:
        """Run one report and return all of its rows.

        The query is re-validated and its unset parameters filled with the
        defaults, so hand-built queries behave like builder-made ones.
        """
        query = QueryBuilder(query.reference_time).build(
            query.kind, limit=query.limit, days=query.days, status=query.status, category=query.category_name
        )
        handler = self._handlers[query.kind]
        start = time.perf_counter()
        rows = handler(query)
        logger.debug(
            "Evaluated %s %s -> %d rows in %.2f ms",
            query.kind.value, query.parameters(), len(rows), (time.perf_counter() - start) * 1000,
        )
        return QueryResult(query=query, rows=rows, snapshot_version=self.store.version)

    # ===== SHARED HELPERS =====

    def customer_name(self, order: Order) -> str:
        return self.resolver.resolve_one(order, "order.customer").full_name

    def _order_projection(self, **extra):
        return project(order_id="order_id", customer_name=self.customer_name, **extra)

    # ===== REPORTS =====

    def _customers(self, query: ReportQuery) -> List[Row]:
        return project(full_name="full_name", email="email").apply(self.store.customers)

    def _orders_with_item_counts(self, query: ReportQuery) -> List[Row]:
        projection = self._order_projection(status="status", item_count=self.aggregates.item_count)
        return projection.apply(self.store.orders)

    def _products_by_price(self, query: ReportQuery) -> List[Row]:
        products = stable_sort(
            self.store.products,
            SortKey("price", descending=True),
            SortKey("name"),
        )
        return project(product_name="name", price="price").apply(products)

    def _pending_orders(self, query: ReportQuery) -> List[Row]:
        orders = select(self.store.orders, field_equals("status", query.status))
        projection = self._order_projection(order_date="order_date", total=self.aggregates.order_total)
        return projection.apply(orders)

    def _order_counts(self, query: ReportQuery) -> List[Row]:
        counts = self.aggregates.order_counts_by_customer()
        return [
            {"customer_name": customer.full_name, "order_count": counts[customer.customer_id]}
            for customer in self.store.customers
        ]

    def _top_customers(self, query: ReportQuery) -> List[Row]:
        totals = self.aggregates.customer_totals()
        rows = [
            {"customer_name": customer.full_name, "total_value": totals[customer.customer_id]}
            for customer in self.store.customers
        ]
        ranked = stable_sort(rows, SortKey("total_value", descending=True), SortKey("customer_name"))
        return top_n(ranked, query.limit)

    def _recent_orders(self, query: ReportQuery) -> List[Row]:
        recent = within_last_days("order_date", query.reference_time, query.days)
        orders = select(self.store.orders, recent)
        return project(
            order_id="order_id", order_date="order_date", customer_name=self.customer_name
        ).apply(orders)

    def _product_sales(self, query: ReportQuery) -> List[Row]:
        sold = self.aggregates.quantity_sold_by_product()
        rows = [
            {"product_name": product.name, "total_sold": sold[product.product_id]}
            for product in self.store.products
        ]
        return stable_sort(rows, SortKey("total_sold", descending=True), SortKey("product_name"))

    def _discounted_orders(self, query: ReportQuery) -> List[Row]:
        discounted = field_greater_than("discount", 0)
        orders = select(self.store.orders, exists(self.resolver, "order.items", discounted))

        def discounted_products(order: Order) -> List[str]:
            items = select(self.resolver.resolve_all(order, "order.items"), discounted)
            return [self.resolver.resolve_one(item, "order_item.product").name for item in items]

        return self._order_projection(discounted_products=discounted_products).apply(orders)

    def _category_orders(self, query: ReportQuery) -> List[Row]:
        in_category = exists(self.resolver, "product.categories", field_equals("name", query.category_name))
        item_in_category = Predicate(
            lambda item: in_category(self.resolver.resolve_one(item, "order_item.product")),
            f"order_item.product {in_category.description}",
        )
        orders = select(self.store.orders, exists(self.resolver, "order.items", item_in_category))

        def matching_products(order: Order) -> List[str]:
            items = select(self.resolver.resolve_all(order, "order.items"), item_in_category)
            names = (self.resolver.resolve_one(item, "order_item.product").name for item in items)
            return list(dict.fromkeys(names))

        return self._order_projection(products=matching_products).apply(orders)

    def _shipments(self, query: ReportQuery) -> List[Row]:
        orders = select(self.store.orders, field_is_present("carrier_id"))
        return self._order_projection(
            status="status",
            carrier_name=lambda order: self.resolver.resolve_one(order, "order.carrier").name,
            tracking_number="tracking_number",
            shipped_date="shipped_date",
            delivered_date="delivered_date",
        ).apply(orders)
