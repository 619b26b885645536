"""Registry of the available reporting views."""

from typing import Dict, List, Optional, Type

from app.core.config import DEFAULT_REPORT_CATEGORY, RECENT_ORDER_DAYS, TOP_CUSTOMER_LIMIT
from app.query.schemas import ReportKind
from app.reporting.schemas import (
    CategoryOrderRecord,
    CustomerRecord,
    CustomerValueRecord,
    DiscountedOrderRecord,
    OrderCountRecord,
    OrderItemCountRecord,
    PendingOrderRecord,
    ProductPriceRecord,
    ProductSalesRecord,
    RecentOrderRecord,
    ReportDescriptor,
    ReportRecord,
    ShipmentRecord,
)
from app.store.entities import OrderStatus


class ReportDefinition:
    """Definition of a reporting view and the record type it produces."""

    def __init__(
        self,
        kind: ReportKind,
        title: str,
        description: str,
        record_type: Type[ReportRecord],
        parameters: Optional[Dict[str, object]] = None,
    ):
        self.kind = kind
        self.title = title
        self.description = description
        self.record_type = record_type
        self.parameters = parameters or {}

    @property
    def columns(self) -> List[str]:
        return list(self.record_type.model_fields)

    def describe(self) -> ReportDescriptor:
        return ReportDescriptor(
            name=self.kind.value,
            title=self.title,
            description=self.description,
            columns=self.columns,
            parameters=self.parameters,
        )


# Report Registry
REPORT_REGISTRY: Dict[ReportKind, ReportDefinition] = {}


def register_report(definition: ReportDefinition):
    """Register a report definition."""
    REPORT_REGISTRY[definition.kind] = definition


def get_report_definition(kind: ReportKind) -> ReportDefinition:
    return REPORT_REGISTRY[ReportKind(kind)]


def get_available_reports() -> List[ReportDefinition]:
    return list(REPORT_REGISTRY.values())


register_report(ReportDefinition(
    kind=ReportKind.CUSTOMERS,
    title="Customers",
    description="Every customer with full name and email",
    record_type=CustomerRecord,
))

register_report(ReportDefinition(
    kind=ReportKind.ORDERS_WITH_ITEM_COUNTS,
    title="Orders With Item Count",
    description="Every order with its customer, status and number of units ordered",
    record_type=OrderItemCountRecord,
))

register_report(ReportDefinition(
    kind=ReportKind.PRODUCTS_BY_PRICE,
    title="Products By Price",
    description="Products sorted by price, highest first",
    record_type=ProductPriceRecord,
))

register_report(ReportDefinition(
    kind=ReportKind.PENDING_ORDERS,
    title="Pending Orders",
    description="Orders in the given status with their computed total",
    record_type=PendingOrderRecord,
    parameters={"status": OrderStatus.PENDING.value},
))

register_report(ReportDefinition(
    kind=ReportKind.ORDER_COUNTS,
    title="Order Count Per Customer",
    description="Number of orders placed by every customer",
    record_type=OrderCountRecord,
))

register_report(ReportDefinition(
    kind=ReportKind.TOP_CUSTOMERS,
    title="Top Customers By Order Value",
    description="Customers ranked by total order value, ties broken by name",
    record_type=CustomerValueRecord,
    parameters={"limit": TOP_CUSTOMER_LIMIT},
))

register_report(ReportDefinition(
    kind=ReportKind.RECENT_ORDERS,
    title="Recent Orders",
    description="Orders placed within the last N days",
    record_type=RecentOrderRecord,
    parameters={"days": RECENT_ORDER_DAYS},
))

register_report(ReportDefinition(
    kind=ReportKind.PRODUCT_SALES,
    title="Total Sold Per Product",
    description="Units sold per product, most sold first, including unsold products",
    record_type=ProductSalesRecord,
))

register_report(ReportDefinition(
    kind=ReportKind.DISCOUNTED_ORDERS,
    title="Discounted Orders",
    description="Orders with at least one discounted item and the discounted products",
    record_type=DiscountedOrderRecord,
))

register_report(ReportDefinition(
    kind=ReportKind.CATEGORY_ORDERS,
    title="Orders By Category",
    description="Orders containing a product of the given category",
    record_type=CategoryOrderRecord,
    parameters={"category": DEFAULT_REPORT_CATEGORY},
))

register_report(ReportDefinition(
    kind=ReportKind.SHIPMENTS,
    title="Shipments",
    description="Orders handed to a carrier, with tracking and delivery dates",
    record_type=ShipmentRecord,
))
