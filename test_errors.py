"""
test_errors.py

Tests for the chainassert error taxonomy.

Tests cover:
- Error codes and stable message text
- Field and value attributes
- Family membership (validation vs snapshot)
"""

import pytest

from chainassert import (
    DuplicateEntryError,
    EmptyRequiredSetError,
    ErrorMismatchError,
    ImplausibleValueError,
    MissingFieldError,
    NotDeclaredError,
    SnapshotError,
    SnapshotLoadError,
    ValidationError,
    ValidatorImmutabilityError,
)


class TestValidationErrors:
    """Each kind carries a distinct code and names what went wrong."""

    @pytest.mark.parametrize("error, code, text", [
        (MissingFieldError("genesis_block_identifier"), "V001",
         "genesis_block_identifier is missing"),
        (ImplausibleValueError("current_block_timestamp", 0, "must be greater than 1"), "V002",
         "current_block_timestamp 0 is implausible: must be greater than 1"),
        (DuplicateEntryError("operation_types", "Transfer"), "V003",
         "operation_types contains a duplicate Transfer"),
        (EmptyRequiredSetError("operation_statuses"), "V004",
         "no operation_statuses found"),
        (NotDeclaredError("operation.status", "Unknown"), "V010",
         "operation.status Unknown is not declared"),
        (ErrorMismatchError(3, "message 'x' is not declared for this code"), "V011",
         "error code 3 does not match its declaration: message 'x' is not declared for this code"),
    ])
    def test_code_and_text(self, error, code, text):
        assert isinstance(error, ValidationError)
        assert error.error_code == code
        assert error.message == text
        assert str(error) == f"[{code}] {text}"

    def test_field_name_kept(self):
        error = DuplicateEntryError("operation_statuses", "Success")
        assert error.field_name == "operation_statuses"
        assert error.value == "Success"

    def test_base_without_field(self):
        error = ValidationError("something broke")
        assert error.field_name is None
        assert str(error) == "[V000] something broke"


class TestSnapshotErrors:
    """Snapshot failures form their own family."""

    def test_load_error_with_source(self):
        error = SnapshotLoadError("IO error: denied", source="/tmp/caps.json")
        assert isinstance(error, SnapshotError)
        assert not isinstance(error, ValidationError)
        assert error.source == "/tmp/caps.json"
        assert str(error) == (
            "[V020] Snapshot error: Failed to load snapshot from '/tmp/caps.json': IO error: denied"
        )

    def test_load_error_without_source(self):
        error = SnapshotLoadError("bad shape")
        assert "from '" not in str(error)


class TestImmutabilityError:

    def test_message(self):
        error = ValidatorImmutabilityError("set attribute '_frozen'")
        assert error.operation == "set attribute '_frozen'"
        assert "immutable" in str(error)
