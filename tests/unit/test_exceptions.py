"""Unit tests for the error taxonomy."""

import pytest

from elohero.exceptions import (
    ConcurrencyConflict,
    EloHeroError,
    InvalidInput,
    PreconditionFailed,
    StorageUnavailable,
)


def test_invalid_input_prefixes_field():
    exc = InvalidInput("must not be empty", field="teams")
    assert str(exc) == "Invalid 'teams': must not be empty"
    assert exc.field == "teams"


def test_invalid_input_without_field():
    exc = InvalidInput("bad submission")
    assert str(exc) == "bad submission"
    assert exc.field is None


def test_invalid_input_is_value_error():
    with pytest.raises(ValueError):
        raise InvalidInput("bad")


def test_concurrency_conflict_reports_attempts():
    exc = ConcurrencyConflict("could not apply match", attempts=3)
    assert exc.attempts == 3
    assert str(exc) == "could not apply match (after 3 attempts)"


@pytest.mark.parametrize(
    "error_cls", [InvalidInput, PreconditionFailed, ConcurrencyConflict, StorageUnavailable]
)
def test_all_errors_share_base(error_cls):
    assert issubclass(error_cls, EloHeroError)
