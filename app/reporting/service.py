# app/reporting/service.py - Report execution and export over a webstore snapshot

import io
import logging
import time
from datetime import datetime
from typing import List, Optional, Tuple

import pandas as pd

from app.core.exceptions import InvalidQueryParameterError
from app.query.builder import QueryBuilder
from app.query.engine import QueryEngine
from app.query.schemas import QueryResult, ReportKind
from app.reporting.assembler import assemble_result
from app.reporting.report_registry import get_available_reports, get_report_definition
from app.reporting.schemas import ReportDescriptor, ReportRecord, ReportResponse
from app.store.dao import WebStoreDAO
from app.store.snapshot import EntityStore

logger = logging.getLogger(__name__)

EXPORT_MEDIA_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


class ReportService:
    """Runs reporting views against one snapshot per query session."""

    def __init__(self, dao: WebStoreDAO):
        self.dao = dao
        self._store: Optional[EntityStore] = None
        self._engine: Optional[QueryEngine] = None

    # ===== SNAPSHOT =====

    @property
    def store(self) -> EntityStore:
        if self._store is None:
            self.refresh()
        return self._store

    def refresh(self) -> EntityStore:
        """Load a new snapshot, discarding the engine built for the previous one."""
        self._store = self.dao.load_snapshot()
        self._engine = None
        return self._store

    @property
    def engine(self) -> QueryEngine:
        store = self.store
        if self._engine is None or self._engine.store is not store:
            self._engine = QueryEngine(store)
        return self._engine

    # ===== CATALOGUE =====

    def get_available_reports(self) -> List[ReportDescriptor]:
        return [definition.describe() for definition in get_available_reports()]

    # ===== EXECUTION =====

    def run(
        self,
        kind: ReportKind,
        limit: Optional[int] = None,
        days: Optional[int] = None,
        status: Optional[str] = None,
        category: Optional[str] = None,
        reference_time: Optional[datetime] = None,
    ) -> Tuple[QueryResult, List[ReportRecord]]:
        """Build, evaluate and assemble one report."""
        # Parameters are validated before the snapshot is touched
        query = QueryBuilder(reference_time).build(
            kind, limit=limit, days=days, status=status, category=category
        )

        start = time.perf_counter()
        result = self.engine.evaluate(query)
        records = assemble_result(result)
        logger.info(
            "Report %s %s returned %d rows in %.2f ms",
            query.kind.value, query.parameters(), len(records), (time.perf_counter() - start) * 1000,
        )
        return result, records

    def run_response(self, kind: ReportKind, **parameters) -> ReportResponse:
        result, records = self.run(kind, **parameters)
        return ReportResponse(
            report=result.query.kind.value,
            generated_at=result.query.reference_time,
            snapshot_version=result.snapshot_version,
            snapshot_loaded_at=self.engine.store.loaded_at,
            parameters=result.query.parameters(),
            row_count=len(records),
            rows=[record.model_dump(mode="json") for record in records],
        )

    # One method per reporting view

    def list_customers(self) -> List[ReportRecord]:
        return self.run(ReportKind.CUSTOMERS)[1]

    def list_orders_with_item_counts(self) -> List[ReportRecord]:
        return self.run(ReportKind.ORDERS_WITH_ITEM_COUNTS)[1]

    def list_products_by_price(self) -> List[ReportRecord]:
        return self.run(ReportKind.PRODUCTS_BY_PRICE)[1]

    def list_pending_orders(self, status: Optional[str] = None) -> List[ReportRecord]:
        return self.run(ReportKind.PENDING_ORDERS, status=status)[1]

    def order_count_per_customer(self) -> List[ReportRecord]:
        return self.run(ReportKind.ORDER_COUNTS)[1]

    def top_customers_by_value(self, limit: Optional[int] = None) -> List[ReportRecord]:
        return self.run(ReportKind.TOP_CUSTOMERS, limit=limit)[1]

    def recent_orders(self, days: Optional[int] = None, reference_time: Optional[datetime] = None) -> List[ReportRecord]:
        return self.run(ReportKind.RECENT_ORDERS, days=days, reference_time=reference_time)[1]

    def total_sold_per_product(self) -> List[ReportRecord]:
        return self.run(ReportKind.PRODUCT_SALES)[1]

    def discounted_orders(self) -> List[ReportRecord]:
        return self.run(ReportKind.DISCOUNTED_ORDERS)[1]

    def orders_in_category(self, category: Optional[str] = None) -> List[ReportRecord]:
        return self.run(ReportKind.CATEGORY_ORDERS, category=category)[1]

    def shipments(self) -> List[ReportRecord]:
        return self.run(ReportKind.SHIPMENTS)[1]

    # ===== EXPORT =====

    def export(self, kind: ReportKind, file_format: str = "csv", **parameters) -> Tuple[bytes, str, str]:
        """Render a report as CSV or XLSX. Returns (content, media type, file name)."""
        file_format = (file_format or "").lower()
        if file_format not in EXPORT_MEDIA_TYPES:
            raise InvalidQueryParameterError(
                f"Unsupported export format '{file_format}'. Use one of {sorted(EXPORT_MEDIA_TYPES)}"
            )

        definition = get_report_definition(kind)
        _, records = self.run(kind, **parameters)
        df = pd.DataFrame([self._flatten(record) for record in records], columns=definition.columns)

        buffer = io.BytesIO()
        if file_format == "csv":
            buffer.write(df.to_csv(index=False).encode("utf-8"))
        else:
            sheet_name = definition.title[:31]  # Excel sheet name limit is 31 chars
            with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
                df.to_excel(writer, sheet_name=sheet_name, index=False)
                _auto_adjust_columns(writer.sheets[sheet_name])

        file_name = f"{definition.kind.value}.{file_format}"
        return buffer.getvalue(), EXPORT_MEDIA_TYPES[file_format], file_name

    @staticmethod
    def _flatten(record: ReportRecord) -> dict:
        """Join list fields so each record fits a single spreadsheet row."""
        row = record.model_dump()
        for key, value in row.items():
            if isinstance(value, list):
                row[key] = ", ".join(str(v) for v in value)
        return row


def _auto_adjust_columns(worksheet):
    """Auto-adjust column widths for better readability."""
    for column in worksheet.columns:
        max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        worksheet.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)
