"""Pydantic record schemas for the reporting module."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class ReportRecord(BaseModel):
    """Base class for flat report output records."""

    model_config = ConfigDict(frozen=True)


class CustomerRecord(ReportRecord):
    full_name: str
    email: str


class OrderItemCountRecord(ReportRecord):
    order_id: int
    customer_name: str
    status: str
    item_count: int


class ProductPriceRecord(ReportRecord):
    product_name: str
    price: Decimal


class PendingOrderRecord(ReportRecord):
    order_id: int
    customer_name: str
    order_date: datetime
    total: Decimal


class OrderCountRecord(ReportRecord):
    customer_name: str
    order_count: int


class CustomerValueRecord(ReportRecord):
    customer_name: str
    total_value: Decimal


class RecentOrderRecord(ReportRecord):
    order_id: int
    order_date: datetime
    customer_name: str


class ProductSalesRecord(ReportRecord):
    product_name: str
    total_sold: int


class DiscountedOrderRecord(ReportRecord):
    order_id: int
    customer_name: str
    discounted_products: List[str]


class CategoryOrderRecord(ReportRecord):
    order_id: int
    customer_name: str
    products: List[str]


class ShipmentRecord(ReportRecord):
    order_id: int
    customer_name: str
    status: str
    carrier_name: str
    tracking_number: Optional[str] = None
    shipped_date: Optional[datetime] = None
    delivered_date: Optional[datetime] = None


# ===== CATALOGUE / RESPONSE SCHEMAS =====


class ReportDescriptor(BaseModel):
    """Describes one available reporting view."""

    name: str
    title: str
    description: str
    columns: List[str]
    parameters: Dict[str, Any] = {}


class ReportResponse(BaseModel):
    """Envelope returned by report endpoints."""

    report: str
    generated_at: datetime
    snapshot_version: Optional[str] = None
    snapshot_loaded_at: Optional[datetime] = None
    parameters: Dict[str, Any] = {}
    row_count: int
    rows: List[Dict[str, Any]]
