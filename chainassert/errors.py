"""
errors.py

Error taxonomy for chainassert.

Every failure names the offending field (and value, where one exists)
in stable text so that callers can surface it to an operator unchanged.

Two families:
- ValidationError: a declaration or live response broke a rule
- SnapshotError: a persisted snapshot could not be read or parsed
"""

from typing import Any, Optional


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(Exception):
    """
    Raised when a capability declaration or a live response fails validation.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: Optional[str] = None,
        error_code: str = "V000",
    ):
        self.message = message
        self.field_name = field_name
        self.error_code = error_code
        super().__init__(self.format())

    def format(self) -> str:
        """Format as human-readable error message."""
        return f"[{self.error_code}] {self.message}"


class MissingFieldError(ValidationError):
    """Raised when a required identifier, reference, or list is absent."""

    def __init__(self, field_name: str):
        super().__init__(
            message=f"{field_name} is missing",
            field_name=field_name,
            error_code="V001",
        )


class ImplausibleValueError(ValidationError):
    """Raised when a present value fails a sanity bound."""

    def __init__(self, field_name: str, value: Any, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(
            message=f"{field_name} {value!r} is implausible: {reason}",
            field_name=field_name,
            error_code="V002",
        )


class DuplicateEntryError(ValidationError):
    """Raised when an allow-list contains the same entry twice."""

    def __init__(self, field_name: str, value: Any):
        self.value = value
        super().__init__(
            message=f"{field_name} contains a duplicate {value}",
            field_name=field_name,
            error_code="V003",
        )


class EmptyRequiredSetError(ValidationError):
    """Raised when an allow-list that must be non-empty has no entries."""

    def __init__(self, field_name: str):
        super().__init__(
            message=f"no {field_name} found",
            field_name=field_name,
            error_code="V004",
        )


class NotDeclaredError(ValidationError):
    """Raised when a live response uses a value outside the declared set."""

    def __init__(self, field_name: str, value: Any):
        self.value = value
        super().__init__(
            message=f"{field_name} {value} is not declared",
            field_name=field_name,
            error_code="V010",
        )


class ErrorMismatchError(ValidationError):
    """Raised when a live error uses a declared code with different content."""

    def __init__(self, code: int, reason: str):
        self.code = code
        self.reason = reason
        super().__init__(
            message=f"error code {code} does not match its declaration: {reason}",
            field_name="error",
            error_code="V011",
        )


# =============================================================================
# Snapshot Errors
# =============================================================================

class SnapshotError(Exception):
    """Base exception for persisted snapshot failures."""

    def __init__(
        self,
        message: str,
        *,
        error_code: str = "V020",
    ):
        self.message = message
        self.error_code = error_code
        super().__init__(self.format())

    def format(self) -> str:
        """Format as human-readable error message."""
        return f"[{self.error_code}] Snapshot error: {self.message}"


class SnapshotLoadError(SnapshotError):
    """Failed to load a snapshot from file or data."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        source_info = f" from '{source}'" if source else ""
        super().__init__(
            message=f"Failed to load snapshot{source_info}: {message}",
            error_code="V020",
        )


# =============================================================================
# Immutability
# =============================================================================

class ValidatorImmutabilityError(Exception):
    """Raised when attempting to mutate a constructed Validator."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"Cannot {operation}: Validator is immutable after construction"
        )
