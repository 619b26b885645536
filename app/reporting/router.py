"""API router for the reporting module."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from app.core.dependencies import get_report_service
from app.query.schemas import ReportKind
from app.reporting.schemas import ReportDescriptor, ReportResponse
from app.reporting.service import ReportService

router = APIRouter(prefix="/reports", tags=["reporting"])


# ===== CATALOGUE =====


@router.get("/", response_model=List[ReportDescriptor])
def get_available_reports(service: ReportService = Depends(get_report_service)) -> List[ReportDescriptor]:
    """List the reporting views and their default parameters."""
    return service.get_available_reports()


# ===== REPORT EXECUTION =====


@router.get("/{report_name}", response_model=ReportResponse)
def run_report(
    report_name: ReportKind,
    limit: Optional[int] = Query(None, description="Top-N count (top-customers)"),
    days: Optional[int] = Query(None, description="Recency window in days (recent-orders)"),
    status: Optional[str] = Query(None, description="Order status (pending-orders)"),
    category: Optional[str] = Query(None, description="Category name (category-orders)"),
    service: ReportService = Depends(get_report_service),
) -> ReportResponse:
    """Run one reporting view against a fresh snapshot."""
    return service.run_response(report_name, limit=limit, days=days, status=status, category=category)


# ===== EXPORT ENDPOINTS =====


@router.get("/{report_name}/export")
def export_report(
    report_name: ReportKind,
    format: str = Query("csv", description="csv or xlsx"),
    limit: Optional[int] = None,
    days: Optional[int] = None,
    status: Optional[str] = None,
    category: Optional[str] = None,
    service: ReportService = Depends(get_report_service),
) -> Response:
    """Export a reporting view as CSV or Excel (XLSX)."""
    content, media_type, file_name = service.export(
        report_name, format, limit=limit, days=days, status=status, category=category
    )
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={file_name}"},
    )
