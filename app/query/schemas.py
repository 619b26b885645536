"""
Query description types for the reporting system.

A ``ReportQuery`` is plain data: building one touches no entities. The
``QueryEngine`` evaluates it later against a snapshot.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class ReportKind(str, Enum):
    """Available reporting views."""

    CUSTOMERS = "customers"
    ORDERS_WITH_ITEM_COUNTS = "orders-with-item-counts"
    PRODUCTS_BY_PRICE = "products-by-price"
    PENDING_ORDERS = "pending-orders"
    ORDER_COUNTS = "order-counts"
    TOP_CUSTOMERS = "top-customers"
    RECENT_ORDERS = "recent-orders"
    PRODUCT_SALES = "product-sales"
    DISCOUNTED_ORDERS = "discounted-orders"
    CATEGORY_ORDERS = "category-orders"
    SHIPMENTS = "shipments"


@dataclass(frozen=True)
class ReportQuery:
    """Parameters of one report evaluation."""

    kind: ReportKind
    reference_time: datetime
    limit: Optional[int] = None
    days: Optional[int] = None
    status: Optional[str] = None
    category_name: Optional[str] = None

    def parameters(self) -> Dict[str, Any]:
        """Non-empty parameters, for logging and response metadata."""
        values = {
            "limit": self.limit,
            "days": self.days,
            "status": self.status,
            "category": self.category_name,
        }
        return {name: value for name, value in values.items() if value is not None}


@dataclass
class QueryResult:
    """Rows produced by evaluating a ``ReportQuery``."""

    query: ReportQuery
    rows: list = field(default_factory=list)
    snapshot_version: Optional[str] = None

    def __len__(self):
        return len(self.rows)
