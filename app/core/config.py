"""Environment driven settings for the WebStore reporting application."""

import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


# ===== DATABASES =====
# Entity data: customers, orders, products, ...
WEBSTORE_DATABASE_URL = os.getenv("WEBSTORE_DATABASE_URL", "sqlite:///./webstore.db")
# Request logs
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./webstore_logs.db")

APPLICATION_ID = os.getenv("APPLICATION_ID", "Unknown")
SEED_SAMPLE_DATA = _env_bool("WEBSTORE_SEED_SAMPLE_DATA", True)

# ===== REPORT DEFAULTS =====
RECENT_ORDER_DAYS = _env_int("RECENT_ORDER_DAYS", 30)
TOP_CUSTOMER_LIMIT = _env_int("TOP_CUSTOMER_LIMIT", 3)
DEFAULT_REPORT_CATEGORY = os.getenv("DEFAULT_REPORT_CATEGORY", "Electronics")
