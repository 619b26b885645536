"""
Test configuration and shared fixtures for the WebStore reporting test suite.
Provides an in-memory webstore dataset, database setup and a FastAPI test client.
"""

import os

# Keep the app's module-level engines off the filesystem
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("WEBSTORE_DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("WEBSTORE_SEED_SAMPLE_DATA", "false")

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from app.app import create_app
from app.core.database import Base, StoreBase, get_store_db
from app.store import entities
from app.store import models
from app.store.snapshot import EntityStore

REFERENCE_TIME = datetime(2024, 6, 30, 12, 0, 0)


def build_entities(reference: datetime) -> Dict[str, List]:
    """
    Small webstore with known answers.

    Ann Lee:    order 1 (Pending, exactly 30 days old) = 2*10 + (1*5 - 1) = 24.00
                order 2 (Delivered, 31 days old, no items) = 0.00
    Bob Stone:  order 3 (Shipped, 2 days old) = 24.00
    Cara West:  order 4 (Pending, 10 days old) = 3*50 - 0 + 1*(no price) = 150.00
    Dan Young:  no orders
    """
    return {
        "customers": [
            entities.Customer(1, "Ann", "Lee", "ann.lee@example.com"),
            entities.Customer(2, "Bob", "Stone", "bob.stone@example.com"),
            entities.Customer(3, "Cara", "West", "cara.west@example.com"),
            entities.Customer(4, "Dan", "Young", "dan.young@example.com"),
        ],
        "carriers": [
            entities.Carrier(1, "DHL", "https://www.dhl.com", "1-800-225-5345"),
            entities.Carrier(2, "FedEx", "https://www.fedex.com", None),
            entities.Carrier(3, "UPS"),
        ],
        "categories": [
            entities.Category(1, "Electronics"),
            entities.Category(2, "Office"),
            entities.Category(3, "Books"),
        ],
        "products": [
            entities.Product(1, "Cable", Decimal("10.00")),
            entities.Product(2, "Notebook", Decimal("5.00")),
            entities.Product(3, "Laptop", Decimal("50.00")),
            entities.Product(4, "Poster", Decimal("5.00")),
            entities.Product(5, "Tablet", Decimal("24.00")),
        ],
        "product_categories": [
            entities.ProductCategory(1, 1),
            entities.ProductCategory(2, 2),
            entities.ProductCategory(3, 1),
            entities.ProductCategory(3, 2),
            entities.ProductCategory(5, 1),
        ],
        "orders": [
            entities.Order(1, 1, reference - timedelta(days=30), "Pending"),
            entities.Order(
                2, 1, reference - timedelta(days=31), "Delivered",
                carrier_id=1, tracking_number="DH123456789",
                shipped_date=reference - timedelta(days=29),
                delivered_date=reference - timedelta(days=27),
            ),
            entities.Order(
                3, 2, reference - timedelta(days=2), "Shipped",
                carrier_id=2, tracking_number="FX555",
                shipped_date=reference - timedelta(days=1),
            ),
            entities.Order(4, 3, reference - timedelta(days=10), "Pending"),
        ],
        "order_items": [
            entities.OrderItem(1, 1, 1, 2, Decimal("10.00"), None),
            entities.OrderItem(2, 1, 2, 1, Decimal("5.00"), Decimal("1.00")),
            entities.OrderItem(3, 3, 5, 1, Decimal("24.00"), None),
            entities.OrderItem(4, 4, 3, 3, Decimal("50.00"), Decimal("0.00")),
            entities.OrderItem(5, 4, 3, 1, None, None),
        ],
    }


# ===== IN-MEMORY SNAPSHOT =====


@pytest.fixture
def webstore_entities() -> Dict[str, List]:
    return build_entities(REFERENCE_TIME)


@pytest.fixture
def store(webstore_entities) -> EntityStore:
    """Entity store built directly from the sample entities"""
    return EntityStore(**webstore_entities)


# ===== DATABASE SETUP =====


def _memory_engine():
    return create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture(scope="session")
def log_engine():
    """Create in-memory SQLite engine for the log database"""
    engine = _memory_engine()
    from app.logging.models import Log  # noqa: F401
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture(scope="session")
def store_engine():
    """Create in-memory SQLite engine for the webstore database"""
    engine = _memory_engine()
    StoreBase.metadata.create_all(bind=engine)
    return engine


@pytest.fixture(scope="function")
def log_db_session(log_engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=log_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=log_engine)
        Base.metadata.create_all(bind=log_engine)


@pytest.fixture(scope="function")
def store_db_session(store_engine):
    """Create a database session for the webstore database"""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=store_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()  # Rollback any uncommitted changes
        session.close()
        # Clean up all data after each test
        StoreBase.metadata.drop_all(bind=store_engine)
        StoreBase.metadata.create_all(bind=store_engine)


def seed_webstore(session, reference: datetime) -> None:
    """Insert the sample entities as ORM rows"""
    data = build_entities(reference)

    session.add_all(
        models.Customer(customer_id=c.customer_id, first_name=c.first_name, last_name=c.last_name, email=c.email)
        for c in data["customers"]
    )
    session.add_all(
        models.Carrier(carrier_id=c.carrier_id, carrier_name=c.name, contact_url=c.contact_url, contact_phone=c.contact_phone)
        for c in data["carriers"]
    )
    session.add_all(models.Category(category_id=c.category_id, category_name=c.name) for c in data["categories"])
    session.add_all(
        models.Product(product_id=p.product_id, product_name=p.name, price=p.price) for p in data["products"]
    )
    session.flush()
    session.execute(
        models.product_categories.insert(),
        [{"product_id": link.product_id, "category_id": link.category_id} for link in data["product_categories"]],
    )
    session.add_all(
        models.Order(
            order_id=o.order_id, customer_id=o.customer_id, order_date=o.order_date, order_status=o.status,
            carrier_id=o.carrier_id, tracking_number=o.tracking_number,
            shipped_date=o.shipped_date, delivered_date=o.delivered_date,
        )
        for o in data["orders"]
    )
    session.flush()
    session.add_all(
        models.OrderItem(
            order_item_id=i.order_item_id, order_id=i.order_id, product_id=i.product_id,
            quantity=i.quantity, unit_price=i.unit_price, discount=i.discount,
        )
        for i in data["order_items"]
    )
    session.commit()


@pytest.fixture
def seeded_store_db(store_db_session):
    """Webstore database holding the sample entities, dated relative to now"""
    # One hour of headroom keeps the 30-day-old order inside the window for the test run
    seed_webstore(store_db_session, datetime.now() + timedelta(hours=1))
    return store_db_session


@pytest.fixture
def client(log_engine, log_db_session, store_db_session, monkeypatch):
    """Create FastAPI test client with database overrides; log tables are reset by log_db_session"""
    app = create_app(initialize=False)

    def override_get_store_db():
        try:
            yield store_db_session
        finally:
            pass

    app.dependency_overrides[get_store_db] = override_get_store_db

    # Request logs go to the in-memory log database
    monkeypatch.setattr(
        "app.logging.middleware.SessionLocal",
        sessionmaker(autocommit=False, autoflush=False, bind=log_engine),
    )

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
