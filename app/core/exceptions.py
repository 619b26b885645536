"""Exception hierarchy for the reporting core."""


class WebStoreError(Exception):
    """Base class for all reporting errors."""


class SnapshotIntegrityError(WebStoreError):
    """The loaded snapshot breaks a referential or value invariant.

    Raised while the entity store is being built. A malformed snapshot is never
    partially evaluated.
    """


class InvalidQueryParameterError(WebStoreError, ValueError):
    """A query parameter was rejected before any traversal started."""


class UnknownNavigationError(InvalidQueryParameterError):
    """A navigation name is not part of the relationship registry."""

    def __init__(self, name: str, available=None):
        self.name = name
        self.available = sorted(available or [])
        message = f"Unknown navigation '{name}'"
        if self.available:
            message += f". Available: {self.available}"
        super().__init__(message)
