"""Tests for the exception hierarchy."""

import pytest

from collection_engine.exceptions import (
    CollectionEngineError,
    ConfigurationError,
    EntityNotFoundError,
    InconsistentDataError,
    InvalidEntityStateError,
    ReferentialIntegrityError,
    SinkError,
    ValidationError,
)


class TestExceptionHierarchy:
    """All engine errors derive from CollectionEngineError."""

    @pytest.mark.parametrize(
        "exc_class",
        [
            ConfigurationError,
            EntityNotFoundError,
            InconsistentDataError,
            InvalidEntityStateError,
            ReferentialIntegrityError,
            SinkError,
            ValidationError,
        ],
    )
    def test_subclass(self, exc_class: type) -> None:
        assert issubclass(exc_class, CollectionEngineError)

    def test_referential_integrity_is_not_found(self) -> None:
        with pytest.raises(EntityNotFoundError):
            raise ReferentialIntegrityError("Client c1 not found")


class TestValidationError:
    def test_carries_field(self) -> None:
        exc = ValidationError("count must be at least 2", field="count")
        assert exc.field == "count"
        assert str(exc) == "count must be at least 2"

    def test_field_optional(self) -> None:
        assert ValidationError("bad").field is None


class TestInconsistentDataError:
    def test_carries_title_id(self) -> None:
        exc = InconsistentDataError("duplicate installment number 2", title_id="t9")
        assert exc.title_id == "t9"
