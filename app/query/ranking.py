"""Deterministic sorting, top-N selection and recency windows."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, List, Optional, Sequence, Union

from app.core.exceptions import InvalidQueryParameterError
from app.query.predicates import Predicate, field_at_least

KeyRef = Union[str, Callable[[Any], Any]]


@dataclass(frozen=True)
class SortKey:
    """Sort criterion: a field name (or dict key) or a callable, plus direction."""

    key: KeyRef
    descending: bool = False

    def extract(self, row: Any) -> Any:
        if callable(self.key):
            return self.key(row)
        if isinstance(row, dict):
            return row[self.key]
        return getattr(row, self.key)


def stable_sort(rows: Sequence[Any], primary: SortKey, secondary: Optional[SortKey] = None) -> List[Any]:
    """
    Sort by ``primary``, break ties with ``secondary``.

    Rows tying on both keys keep their incoming relative order. Sorting runs
    as two stable passes (secondary first), so each key keeps its own
    direction.
    """
    result = list(rows)
    if secondary is not None:
        result.sort(key=secondary.extract, reverse=secondary.descending)
    result.sort(key=primary.extract, reverse=primary.descending)
    return result


def top_n(rows: Sequence[Any], n: int) -> List[Any]:
    """First ``n`` rows; all of them when fewer exist, none when ``n <= 0``."""
    if n <= 0:
        return []
    return list(rows[:n])


def validate_limit(limit: int) -> int:
    if limit is None or limit < 0:
        raise InvalidQueryParameterError(f"Top-N count must be zero or positive, got {limit!r}")
    return limit


def recency_cutoff(reference: datetime, days: int) -> datetime:
    """Earliest instant still inside a window of ``days`` ending at ``reference``."""
    if days is None or days < 0:
        raise InvalidQueryParameterError(f"Recency window must be zero or positive days, got {days!r}")
    return reference - timedelta(days=days)


def within_last_days(field: KeyRef, reference: datetime, days: int) -> Predicate:
    """``field >= reference - days``. Boundary inclusive, absent dates excluded."""
    cutoff = recency_cutoff(reference, days)
    predicate = field_at_least(field, cutoff)
    predicate.description = f"{predicate.description} (last {days} days)"
    return predicate
