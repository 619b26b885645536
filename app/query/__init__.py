"""
Query module for the reporting system.

This module provides the report evaluation pipeline with a focus on:
- A two-phase contract: build a ``ReportQuery`` (pure data), then evaluate it
- Deterministic ordering and exact Decimal arithmetic
- Index-based relationship navigation over an immutable snapshot

Main Components:
- QueryBuilder: validates parameters and builds report queries
- QueryEngine: evaluates report queries against an EntityStore
- RelationshipResolver: named navigations between entities
- AggregationEngine: totals, counts and per-group sums
"""

from .aggregation import AggregationEngine, line_value, to_money
from .builder import QueryBuilder
from .engine import QueryEngine
from .navigation import NAVIGATIONS, RelationshipResolver
from .ranking import SortKey, stable_sort, top_n
from .schemas import QueryResult, ReportKind, ReportQuery

__all__ = [
    # Main classes
    "QueryBuilder",
    "QueryEngine",
    "RelationshipResolver",
    "AggregationEngine",
    # Query types
    "ReportKind",
    "ReportQuery",
    "QueryResult",
    # Helpers
    "NAVIGATIONS",
    "SortKey",
    "stable_sort",
    "top_n",
    "line_value",
    "to_money",
]
