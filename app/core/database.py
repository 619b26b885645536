"""Database configuration with separate entity and logging databases."""

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import DATABASE_URL, SEED_SAMPLE_DATA, WEBSTORE_DATABASE_URL

logger = logging.getLogger(__name__)


def _connect_args(url: str) -> dict:
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


# ===== LOG DATABASE =====
# Stores API request logs.
engine = create_engine(DATABASE_URL, connect_args=_connect_args(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


# ===== WEBSTORE DATABASE =====
# Stores customers, orders, order items, products, categories and carriers.
store_engine = create_engine(
    WEBSTORE_DATABASE_URL, connect_args=_connect_args(WEBSTORE_DATABASE_URL)
)
StoreSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=store_engine)
StoreBase = declarative_base()


# ===== SESSION GENERATORS =====


def get_store_db():
    """Get webstore database session."""
    db = StoreSessionLocal()
    try:
        yield db
    finally:
        db.close()


# ===== TABLE CREATION =====


def create_all_tables():
    """Create tables in both databases."""
    # Import models to ensure they're registered with Base classes
    from app.logging.models import Log  # noqa: F401
    from app.store.models import Carrier, Category, Customer, Order, OrderItem, Product  # noqa: F401

    logger.info("Creating log database tables")
    Base.metadata.create_all(bind=engine)

    logger.info("Creating webstore tables")
    StoreBase.metadata.create_all(bind=store_engine)


def drop_all_tables():
    """Drop all tables in both databases (use with caution!)."""
    from app.logging.models import Log  # noqa: F401
    from app.store.models import Carrier, Category, Customer, Order, OrderItem, Product  # noqa: F401

    logger.warning("Dropping all tables")
    Base.metadata.drop_all(bind=engine)
    StoreBase.metadata.drop_all(bind=store_engine)


def initialize_databases(force_recreate: bool = False, seed: bool = SEED_SAMPLE_DATA):
    """Create tables and optionally seed the webstore with sample data."""
    if force_recreate:
        drop_all_tables()

    create_all_tables()

    if seed:
        from app.store.sample_data import create_sample_data

        session = StoreSessionLocal()
        try:
            create_sample_data(session)
        finally:
            session.close()


def init_db():
    """Initialize databases, recreating them when the schema no longer matches."""
    try:
        initialize_databases()
    except Exception as e:
        if "has no column named" in str(e) or "no such column" in str(e):
            logger.warning("Schema mismatch detected. Recreating database with new schema...")
            initialize_databases(force_recreate=True)
        else:
            raise


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    initialize_databases()
