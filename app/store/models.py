"""Database models for the webstore schema (webstore database)."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Table, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import StoreBase as Base


# Junction table for the Product <-> Category many-to-many relationship
product_categories = Table(
    "product_categories",
    Base.metadata,
    Column("product_id", Integer, ForeignKey("products.product_id"), primary_key=True),
    Column("category_id", Integer, ForeignKey("categories.category_id"), primary_key=True),
)


class Customer(Base):
    """Customer placing orders in the web store."""

    __tablename__ = "customers"

    customer_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    orders = relationship("Order", back_populates="customer")

    def __repr__(self):
        return f"<Customer(id={self.customer_id}, name='{self.first_name} {self.last_name}')>"


class Carrier(Base):
    """Shipping carrier assigned to an order once it ships."""

    __tablename__ = "carriers"

    carrier_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    carrier_name: Mapped[str] = mapped_column(String(100), nullable=False)
    contact_url: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    orders = relationship("Order", back_populates="carrier")


class Order(Base):
    """Customer order. Carrier and tracking columns stay null until shipped."""

    __tablename__ = "orders"

    order_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.customer_id"), nullable=False)
    order_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    order_status: Mapped[str] = mapped_column(String(20), nullable=False, default="Pending")

    carrier_id: Mapped[Optional[int]] = mapped_column(ForeignKey("carriers.carrier_id"), nullable=True)
    tracking_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    shipped_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    delivered_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    customer = relationship("Customer", back_populates="orders")
    carrier = relationship("Carrier", back_populates="orders")
    order_items = relationship("OrderItem", back_populates="order")

    def __repr__(self):
        return f"<Order(id={self.order_id}, customer={self.customer_id}, status='{self.order_status}')>"


class Product(Base):
    """Product in the catalogue."""

    __tablename__ = "products"

    product_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_name: Mapped[str] = mapped_column(String(200), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    categories = relationship("Category", secondary=product_categories, back_populates="products")
    order_items = relationship("OrderItem", back_populates="product")


class Category(Base):
    """Product category."""

    __tablename__ = "categories"

    category_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    category_name: Mapped[str] = mapped_column(String(100), nullable=False)

    products = relationship("Product", secondary=product_categories, back_populates="categories")


class OrderItem(Base):
    """Line of an order. Unit price and discount are nullable."""

    __tablename__ = "order_items"
    __table_args__ = (CheckConstraint("quantity >= 1", name="ck_order_items_quantity_positive"),)

    order_item_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.order_id"), nullable=False)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.product_id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    discount: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)

    order = relationship("Order", back_populates="order_items")
    product = relationship("Product", back_populates="order_items")
