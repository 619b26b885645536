# app/core/dependencies.py
"""Dependencies for the reporting API"""

from typing import Annotated
from fastapi import Depends
from sqlalchemy.orm import Session
from app.core.database import get_store_db

# Webstore database dependency
StoreSessionDep = Annotated[Session, Depends(get_store_db)]


def get_webstore_dao(store_db: StoreSessionDep):
    """Get webstore DAO bound to the request's session"""
    from app.store.dao import WebStoreDAO
    return WebStoreDAO(store_db)


# One service (and so one snapshot) per request
def get_report_service(dao=Depends(get_webstore_dao)):
    """Get report service for the request"""
    from app.reporting.service import ReportService
    return ReportService(dao)
