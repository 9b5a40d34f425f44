"""Custom exception hierarchy for collection-engine."""


class CollectionEngineError(Exception):
    """Base exception for all collection-engine errors."""


class ValidationError(CollectionEngineError):
    """Raised when an operation precondition is violated.

    Parameters
    ----------
    message : str
        Human readable description of the violation.
    field : str | None
        Name of the offending input, so UI layers can render field-level
        messages.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class InconsistentDataError(CollectionEngineError):
    """Raised when a record cannot be placed in an aggregate.

    Aggregating code logs and excludes the record instead of propagating.
    """

    def __init__(self, message: str, title_id: str | None = None) -> None:
        super().__init__(message)
        self.title_id = title_id


class EntityNotFoundError(CollectionEngineError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(CollectionEngineError):
    """Raised when an entity is in an invalid state for the operation."""


class ConfigurationError(CollectionEngineError):
    """Raised when configuration is invalid or missing."""


class SinkError(CollectionEngineError):
    """Raised when a sink operation fails."""
