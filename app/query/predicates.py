"""
Composable predicates and projections over snapshot entities.

Comparison predicates never match an absent (None) field. Zero-defaulting of
unit price and discount belongs to the aggregation layer only.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from app.query.navigation import RelationshipResolver, get_navigation

FieldRef = Union[str, Callable[[Any], Any]]


def _getter(field: FieldRef) -> Callable[[Any], Any]:
    if callable(field):
        return field
    return lambda entity: getattr(entity, field)


def _field_name(field: FieldRef) -> str:
    return field if isinstance(field, str) else getattr(field, "__name__", "<expr>")


class Predicate:
    """Boolean test over an entity. Combine with ``&``, ``|`` and ``~``."""

    def __init__(self, test: Callable[[Any], bool], description: str = "<predicate>"):
        self._test = test
        self.description = description

    def __call__(self, entity: Any) -> bool:
        return bool(self._test(entity))

    def __and__(self, other: "Predicate") -> "Predicate":
        return Predicate(
            lambda entity: self(entity) and other(entity),
            f"({self.description} AND {other.description})",
        )

    def __or__(self, other: "Predicate") -> "Predicate":
        return Predicate(
            lambda entity: self(entity) or other(entity),
            f"({self.description} OR {other.description})",
        )

    def __invert__(self) -> "Predicate":
        return Predicate(lambda entity: not self(entity), f"NOT {self.description}")

    def __repr__(self):
        return f"<Predicate {self.description}>"


def always() -> Predicate:
    return Predicate(lambda entity: True, "TRUE")


def field_equals(field: FieldRef, value: Any) -> Predicate:
    get = _getter(field)
    return Predicate(lambda entity: get(entity) == value, f"{_field_name(field)} == {value!r}")


def field_in(field: FieldRef, values: Iterable[Any]) -> Predicate:
    allowed = frozenset(values)
    get = _getter(field)
    return Predicate(lambda entity: get(entity) in allowed, f"{_field_name(field)} IN {sorted(map(repr, allowed))}")


def field_is_present(field: FieldRef) -> Predicate:
    get = _getter(field)
    return Predicate(lambda entity: get(entity) is not None, f"{_field_name(field)} IS NOT NULL")


def field_greater_than(field: FieldRef, threshold: Any) -> Predicate:
    get = _getter(field)

    def test(entity):
        value = get(entity)
        return value is not None and value > threshold

    return Predicate(test, f"{_field_name(field)} > {threshold!r}")


def field_at_least(field: FieldRef, threshold: Any) -> Predicate:
    get = _getter(field)

    def test(entity):
        value = get(entity)
        return value is not None and value >= threshold

    return Predicate(test, f"{_field_name(field)} >= {threshold!r}")


def field_between(field: FieldRef, lower: Any = None, upper: Any = None) -> Predicate:
    """Inclusive range test; a None bound is open."""
    get = _getter(field)

    def test(entity):
        value = get(entity)
        if value is None:
            return False
        if lower is not None and value < lower:
            return False
        if upper is not None and value > upper:
            return False
        return True

    return Predicate(test, f"{lower!r} <= {_field_name(field)} <= {upper!r}")


def exists(resolver: RelationshipResolver, navigation: str, inner: Optional[Predicate] = None) -> Predicate:
    """
    True iff any entity reached through ``navigation`` satisfies ``inner``.

    Vacuously false over an empty related collection. The navigation name is
    checked here, before any entity is visited.
    """
    get_navigation(navigation)
    inner = inner or always()

    def test(entity):
        return any(inner(related) for related in resolver.resolve_all(entity, navigation))

    return Predicate(test, f"EXISTS {navigation} WHERE {inner.description}")


def select(entities: Iterable[Any], predicate: Predicate) -> List[Any]:
    """Filter entities, preserving their order."""
    return [entity for entity in entities if predicate(entity)]


class Projection:
    """Maps an entity (or joined tuple) onto a flat dict of named output fields."""

    def __init__(self, fields: Dict[str, FieldRef]):
        self.fields = dict(fields)
        self._getters = {name: _getter(ref) for name, ref in self.fields.items()}

    def __call__(self, entity: Any) -> Dict[str, Any]:
        return {name: get(entity) for name, get in self._getters.items()}

    @property
    def columns(self) -> List[str]:
        return list(self.fields)

    def apply(self, entities: Iterable[Any]) -> List[Dict[str, Any]]:
        return [self(entity) for entity in entities]


def project(**fields: FieldRef) -> Projection:
    return Projection(fields)
