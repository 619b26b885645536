"""
QueryBuilder: the build phase of report evaluation.

Each method validates its parameters and returns a ``ReportQuery``. Invalid
parameters are rejected here, before any entity is read. All queries from one
builder share the reference instant captured when the builder was created.
"""

from datetime import datetime
from typing import Optional

from app.core.config import DEFAULT_REPORT_CATEGORY, RECENT_ORDER_DAYS, TOP_CUSTOMER_LIMIT
from app.core.exceptions import InvalidQueryParameterError
from app.query.ranking import recency_cutoff, validate_limit
from app.query.schemas import ReportKind, ReportQuery
from app.store.entities import OrderStatus


def _require_text(name: str, value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise InvalidQueryParameterError(f"'{name}' must be a non-empty string")
    return value


class QueryBuilder:
    """Builds report queries against a single captured reference instant."""

    def __init__(self, reference_time: Optional[datetime] = None):
        self.reference_time = reference_time or datetime.now()

    def _query(self, kind: ReportKind, **parameters) -> ReportQuery:
        return ReportQuery(kind=kind, reference_time=self.reference_time, **parameters)

    def customers(self) -> ReportQuery:
        return self._query(ReportKind.CUSTOMERS)

    def orders_with_item_counts(self) -> ReportQuery:
        return self._query(ReportKind.ORDERS_WITH_ITEM_COUNTS)

    def products_by_price(self) -> ReportQuery:
        return self._query(ReportKind.PRODUCTS_BY_PRICE)

    def pending_orders(self, status: str = OrderStatus.PENDING.value) -> ReportQuery:
        return self._query(ReportKind.PENDING_ORDERS, status=_require_text("status", status))

    def order_counts(self) -> ReportQuery:
        return self._query(ReportKind.ORDER_COUNTS)

    def top_customers(self, limit: int = TOP_CUSTOMER_LIMIT) -> ReportQuery:
        return self._query(ReportKind.TOP_CUSTOMERS, limit=validate_limit(limit))

    def recent_orders(self, days: int = RECENT_ORDER_DAYS) -> ReportQuery:
        recency_cutoff(self.reference_time, days)
        return self._query(ReportKind.RECENT_ORDERS, days=days)

    def product_sales(self) -> ReportQuery:
        return self._query(ReportKind.PRODUCT_SALES)

    def discounted_orders(self) -> ReportQuery:
        return self._query(ReportKind.DISCOUNTED_ORDERS)

    def category_orders(self, category_name: str = DEFAULT_REPORT_CATEGORY) -> ReportQuery:
        return self._query(
            ReportKind.CATEGORY_ORDERS, category_name=_require_text("category", category_name)
        )

    def shipments(self) -> ReportQuery:
        return self._query(ReportKind.SHIPMENTS)

    def build(
        self,
        kind: ReportKind,
        limit: Optional[int] = None,
        days: Optional[int] = None,
        status: Optional[str] = None,
        category: Optional[str] = None,
    ) -> ReportQuery:
        """Build any report by kind; unset parameters fall back to the defaults."""
        try:
            kind = ReportKind(kind)
        except ValueError:
            raise InvalidQueryParameterError(f"Unknown report '{kind}'") from None
        if kind == ReportKind.PENDING_ORDERS:
            return self.pending_orders() if status is None else self.pending_orders(status)
        if kind == ReportKind.TOP_CUSTOMERS:
            return self.top_customers() if limit is None else self.top_customers(limit)
        if kind == ReportKind.RECENT_ORDERS:
            return self.recent_orders() if days is None else self.recent_orders(days)
        if kind == ReportKind.CATEGORY_ORDERS:
            return self.category_orders() if category is None else self.category_orders(category)
        return self._query(kind)
