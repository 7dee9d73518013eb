"""Tests for finstate.core.exceptions."""

from finstate.core.exceptions import (
    ConfigurationError,
    DataProcessingError,
    FinStateError,
    ReconciliationError,
)
from finstate.core.store import EntityNotFoundError, StoreError, UnknownCollectionError


def test_hierarchy():
    """All exceptions should inherit from FinStateError."""
    for exc_cls in [
        ConfigurationError,
        DataProcessingError,
        ReconciliationError,
        StoreError,
        EntityNotFoundError,
        UnknownCollectionError,
    ]:
        assert issubclass(exc_cls, FinStateError)


def test_entity_not_found_is_key_error():
    assert issubclass(EntityNotFoundError, KeyError)
    assert issubclass(EntityNotFoundError, StoreError)


def test_catch_base():
    """Catching FinStateError should catch all subtypes."""
    try:
        raise EntityNotFoundError("holdings/h-1 not found")
    except FinStateError as e:
        assert "h-1" in str(e)
