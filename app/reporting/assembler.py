"""Result assembler: maps evaluated rows onto report record types."""

from decimal import Decimal
from typing import Any, Dict, Iterable, List

from app.query.aggregation import to_money
from app.query.schemas import QueryResult, ReportKind
from app.reporting.report_registry import get_report_definition
from app.reporting.schemas import ReportRecord


def _normalize(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: to_money(value) if isinstance(value, Decimal) else value
        for key, value in row.items()
    }


def assemble(kind: ReportKind, rows: Iterable[Dict[str, Any]]) -> List[ReportRecord]:
    """Build output records for ``kind``. Inputs are never modified."""
    record_type = get_report_definition(kind).record_type
    return [record_type.model_validate(_normalize(row)) for row in rows]


def assemble_result(result: QueryResult) -> List[ReportRecord]:
    return assemble(result.query.kind, result.rows)
