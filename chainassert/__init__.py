"""
chainassert — Capability Conformance Validator
==============================================

chainassert checks that a blockchain data server sticks to what it
declared. A server's status and options responses (or a snapshot of them
saved earlier) are turned into an immutable Validator; every later
response is checked against that Validator before it is trusted.

What's Public
-------------
Everything exported in ``__all__``:

- **Construction**: CapabilityConstructor, ConstructorConfig
- **Validation**: Validator, ValidatorConfiguration
- **Wire types**: NetworkIdentifier, BlockIdentifier, OperationStatus,
  Error, Allow, NetworkStatusResponse, NetworkOptionsResponse, ...
- **Persistence**: Snapshot
- **Exceptions**: ValidationError and its subclasses, SnapshotLoadError

Example
-------
::

    from chainassert import CapabilityConstructor

    validator = CapabilityConstructor().from_responses(network, status, options)
    validator.operation_status("Success")
    validator.save_snapshot("capabilities.json")
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",

    # --- Construction ---
    "CapabilityConstructor",
    "ConstructorConfig",
    "MIN_UNIX_EPOCH",
    "new_validator_with_responses",
    "new_validator_with_snapshot",

    # --- Validator ---
    "Validator",
    "ValidatorConfiguration",

    # --- Wire Types ---
    "Allow",
    "BlockIdentifier",
    "Error",
    "NetworkIdentifier",
    "NetworkOptionsResponse",
    "NetworkStatusResponse",
    "Operation",
    "OperationIdentifier",
    "OperationStatus",
    "Peer",
    "Version",

    # --- Persistence ---
    "Snapshot",

    # --- Exceptions ---
    "ValidationError",
    "MissingFieldError",
    "ImplausibleValueError",
    "DuplicateEntryError",
    "EmptyRequiredSetError",
    "NotDeclaredError",
    "ErrorMismatchError",
    "SnapshotError",
    "SnapshotLoadError",
    "ValidatorImmutabilityError",
]

from chainassert.config import MIN_UNIX_EPOCH, ConstructorConfig
from chainassert.errors import (
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
from chainassert.snapshot import Snapshot
from chainassert.types import (
    Allow,
    BlockIdentifier,
    Error,
    NetworkIdentifier,
    NetworkOptionsResponse,
    NetworkStatusResponse,
    Operation,
    OperationIdentifier,
    OperationStatus,
    Peer,
    Version,
)
from chainassert.validator import (
    CapabilityConstructor,
    Validator,
    ValidatorConfiguration,
    new_validator_with_responses,
    new_validator_with_snapshot,
)
