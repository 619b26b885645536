"""
Snapshot entity types.

These are the immutable values the reporting core works on. They carry
foreign-key identities only; relationships are resolved through the indexes
kept by ``EntityStore``.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class OrderStatus(str, Enum):
    """Well-known order statuses. The core compares statuses as opaque strings."""

    PENDING = "Pending"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"


@dataclass(frozen=True)
class Customer:
    customer_id: int
    first_name: str
    last_name: str
    email: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class Carrier:
    carrier_id: int
    name: str
    contact_url: Optional[str] = None
    contact_phone: Optional[str] = None


@dataclass(frozen=True)
class Order:
    order_id: int
    customer_id: int
    order_date: datetime
    status: str
    carrier_id: Optional[int] = None
    tracking_number: Optional[str] = None
    shipped_date: Optional[datetime] = None
    delivered_date: Optional[datetime] = None


@dataclass(frozen=True)
class OrderItem:
    """Order line. ``unit_price`` and ``discount`` may be absent."""

    order_item_id: int
    order_id: int
    product_id: int
    quantity: int
    unit_price: Optional[Decimal] = None
    discount: Optional[Decimal] = None


@dataclass(frozen=True)
class Product:
    product_id: int
    name: str
    price: Decimal


@dataclass(frozen=True)
class Category:
    category_id: int
    name: str


@dataclass(frozen=True)
class ProductCategory:
    """Row of the product/category junction."""

    product_id: int
    category_id: int
