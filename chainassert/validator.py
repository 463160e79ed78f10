"""
validator.py

CapabilityConstructor and Validator.

CapabilityConstructor turns an untrusted capability declaration (live
status and options responses, or a persisted snapshot) into a Validator.
It runs its checks in a fixed order and raises the first violation; no
partially built Validator is ever returned.

A Validator is the accepted, immutable projection of that declaration.
It answers membership questions about live responses in constant time
and can be persisted and rebuilt without loss.

Design Invariants:
- Immutable after construction
- Construction is pure (no I/O outside the snapshot helpers)
- Allow-lists are scanned in declaration order during construction and
  held as mappings afterwards
- Any change of capability means building a new Validator
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Sequence, Tuple, Union

from chainassert.config import DEFAULT_CONFIG, ConstructorConfig
from chainassert.errors import (
    ErrorMismatchError,
    ImplausibleValueError,
    MissingFieldError,
    NotDeclaredError,
    ValidatorImmutabilityError,
)
from chainassert.network import (
    check_block_identifier,
    check_error,
    check_errors,
    check_network_identifier,
    check_network_options_response,
    check_network_status_response,
    check_operation_statuses,
    check_operation_types,
)
from chainassert.snapshot import Snapshot
from chainassert.types import (
    BlockIdentifier,
    Error,
    NetworkIdentifier,
    NetworkOptionsResponse,
    NetworkStatusResponse,
    Operation,
    OperationStatus,
)

logger = logging.getLogger(__name__)


# =============================================================================
# ValidatorConfiguration
# =============================================================================

@dataclass(frozen=True)
class ValidatorConfiguration:
    """
    What a Validator accepts.

    The collections are sets: callers may rely on membership only,
    never on iteration order.
    """
    network_identifier: NetworkIdentifier
    genesis_block_identifier: BlockIdentifier
    operation_types: FrozenSet[str]
    operation_statuses: FrozenSet[OperationStatus]
    errors: FrozenSet[Error]


# =============================================================================
# Validator
# =============================================================================

class Validator:
    """
    Immutable record of a server's accepted capabilities.

    Obtain one from CapabilityConstructor; the constructor is the only
    place the invariants are checked.
    """

    __slots__ = (
        '_network_identifier',
        '_genesis_block_identifier',
        '_statuses_by_name',
        '_operation_types',
        '_errors_by_code',
        '_historical_balance_lookup',
        '_frozen',
    )

    def __init__(
        self,
        *,
        network_identifier: NetworkIdentifier,
        genesis_block_identifier: BlockIdentifier,
        statuses_by_name: Dict[str, OperationStatus],
        operation_types: FrozenSet[str],
        errors_by_code: Dict[int, Tuple[Error, ...]],
        historical_balance_lookup: bool = False,
    ):
        object.__setattr__(self, '_network_identifier', network_identifier)
        object.__setattr__(self, '_genesis_block_identifier', genesis_block_identifier)
        object.__setattr__(self, '_statuses_by_name', dict(statuses_by_name))
        object.__setattr__(self, '_operation_types', frozenset(operation_types))
        object.__setattr__(self, '_errors_by_code', dict(errors_by_code))
        object.__setattr__(self, '_historical_balance_lookup', historical_balance_lookup)
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise ValidatorImmutabilityError(f"set attribute '{name}'")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if getattr(self, '_frozen', False):
            raise ValidatorImmutabilityError(f"delete attribute '{name}'")
        object.__delattr__(self, name)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def network_identifier(self) -> NetworkIdentifier:
        return self._network_identifier

    @property
    def genesis_block_identifier(self) -> BlockIdentifier:
        return self._genesis_block_identifier

    @property
    def historical_balance_lookup(self) -> bool:
        """Whether the server answers balance queries at past heights."""
        return self._historical_balance_lookup

    def configuration(self) -> ValidatorConfiguration:
        """Return the accepted network, genesis block, and allow-lists."""
        return ValidatorConfiguration(
            network_identifier=self._network_identifier,
            genesis_block_identifier=self._genesis_block_identifier,
            operation_types=self._operation_types,
            operation_statuses=frozenset(self._statuses_by_name.values()),
            errors=frozenset(e for group in self._errors_by_code.values() for e in group),
        )

    # -------------------------------------------------------------------------
    # Response Checks
    # -------------------------------------------------------------------------

    def network(self, network_identifier: Optional[NetworkIdentifier]) -> None:
        """Ensure a response refers to the network this Validator accepts."""
        check_network_identifier(network_identifier)
        if network_identifier != self._network_identifier:
            raise NotDeclaredError("network_identifier", network_identifier)

    def operation_status(self, status: Optional[str]) -> None:
        if status is None or not status.strip():
            raise MissingFieldError("operation.status")
        if status not in self._statuses_by_name:
            raise NotDeclaredError("operation.status", status)

    def operation_type(self, op_type: Optional[str]) -> None:
        if op_type is None or not op_type.strip():
            raise MissingFieldError("operation.type")
        if op_type not in self._operation_types:
            raise NotDeclaredError("operation.type", op_type)

    def operation_successful(self, operation: Operation) -> bool:
        """
        Return whether an operation's status is declared as successful.

        Raises:
            MissingFieldError: If the operation has no status
            NotDeclaredError: If the status is not declared
        """
        self.operation_status(operation.status)
        return self._statuses_by_name[operation.status].successful

    def error(self, error: Optional[Error]) -> None:
        """
        Ensure a returned error matches one the server declared.

        When a code is declared more than once, any declared variant with
        that code is accepted.
        """
        check_error(error)
        declared = self._errors_by_code.get(error.code)
        if not declared:
            raise NotDeclaredError("error.code", error.code)

        same_message = [e for e in declared if e.message == error.message]
        if not same_message:
            raise ErrorMismatchError(
                error.code, f"message {error.message!r} is not declared for this code",
            )
        if not any(e.retriable == error.retriable for e in same_message):
            raise ErrorMismatchError(
                error.code, f"retriable={error.retriable} is not declared for this code",
            )

    def operation(self, operation: Optional[Operation], index: int) -> None:
        """
        Check a single operation expected at position index.

        Related operations must point at earlier operations.
        """
        if operation is None:
            raise MissingFieldError("operation")

        identifier = operation.operation_identifier
        if identifier is None:
            raise MissingFieldError("operation.operation_identifier")
        if identifier.index != index:
            raise ImplausibleValueError(
                "operation_identifier.index", identifier.index, f"expected {index}",
            )
        if identifier.network_index is not None and identifier.network_index < 0:
            raise ImplausibleValueError(
                "operation_identifier.network_index",
                identifier.network_index,
                "network_index must be non-negative",
            )

        self.operation_type(operation.type)
        if operation.status is not None:
            self.operation_status(operation.status)

        for related in operation.related_operations:
            if related.index < 0:
                raise ImplausibleValueError(
                    "related_operations.index",
                    related.index,
                    "index must be non-negative",
                )
            if related.index >= index:
                raise ImplausibleValueError(
                    "related_operations.index",
                    related.index,
                    f"must refer to an operation before {index}",
                )

    def operations(self, operations: Sequence[Operation]) -> None:
        """Check operations in order; indexes must run 0, 1, 2, ..."""
        for i, operation in enumerate(operations):
            self.operation(operation, i)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def to_snapshot(self) -> Snapshot:
        config = self.configuration()
        return Snapshot(
            network_identifier=config.network_identifier,
            genesis_block_identifier=config.genesis_block_identifier,
            allowed_operation_types=tuple(config.operation_types),
            allowed_operation_statuses=tuple(config.operation_statuses),
            allowed_errors=tuple(config.errors),
            historical_balance_lookup=self._historical_balance_lookup,
        )

    def save_snapshot(self, path: Union[str, Path]) -> None:
        """Persist this Validator so CapabilityConstructor.from_snapshot can rebuild it."""
        self.to_snapshot().save(path)

    # -------------------------------------------------------------------------
    # Comparison Methods
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Validator):
            return NotImplemented
        return (
            self.configuration() == other.configuration()
            and self._historical_balance_lookup == other._historical_balance_lookup
        )

    def __hash__(self) -> int:
        return hash((self.configuration(), self._historical_balance_lookup))

    def __repr__(self) -> str:
        return (
            f"Validator(network={str(self._network_identifier)!r}, "
            f"statuses={len(self._statuses_by_name)}, "
            f"types={len(self._operation_types)}, "
            f"error_codes={len(self._errors_by_code)})"
        )


# =============================================================================
# CapabilityConstructor
# =============================================================================

class CapabilityConstructor:
    """
    Builds Validators from capability declarations.

    Example:
        constructor = CapabilityConstructor()
        validator = constructor.from_responses(network, status, options)
        validator.operation_type("Transfer")

        # Later, without contacting the server
        validator.save_snapshot("capabilities.json")
        restored = constructor.from_snapshot("capabilities.json")
    """

    __slots__ = ('_config',)

    def __init__(self, config: Optional[ConstructorConfig] = None):
        self._config = config or DEFAULT_CONFIG

    @property
    def config(self) -> ConstructorConfig:
        return self._config

    def from_responses(
        self,
        network: Optional[NetworkIdentifier],
        status: Optional[NetworkStatusResponse],
        options: Optional[NetworkOptionsResponse],
    ) -> Validator:
        """
        Build a Validator from live status and options responses.

        Checks, in order: network identifier, genesis and current block,
        current block timestamp, peers, allow-list presence, version,
        operation statuses, operation types, errors.

        Raises:
            ValidationError: The first violated rule
        """
        check_network_identifier(network)
        check_network_status_response(status, self._config.min_unix_epoch)
        allow = check_network_options_response(options)

        return self._build(
            network=network,
            genesis=status.genesis_block_identifier,
            statuses=allow.operation_statuses,
            types=allow.operation_types,
            errors=allow.errors,
            historical_balance_lookup=allow.historical_balance_lookup,
        )

    def from_snapshot(self, path: Union[str, Path]) -> Validator:
        """
        Build a Validator from a persisted snapshot file.

        Raises:
            SnapshotLoadError: If the file cannot be read or parsed
            ValidationError: If the contents break a rule
        """
        return self.from_snapshot_object(Snapshot.load(path))

    def from_snapshot_dict(self, data: Dict[str, Any]) -> Validator:
        """Build a Validator from an already-decoded snapshot dictionary."""
        return self.from_snapshot_object(Snapshot.from_dict(data))

    def from_snapshot_object(self, snapshot: Snapshot) -> Validator:
        """
        Build a Validator from a Snapshot.

        A snapshot has no current block, so only the genesis block is checked.
        """
        check_network_identifier(snapshot.network_identifier)
        check_block_identifier(snapshot.genesis_block_identifier, "genesis_block_identifier")
        return self._build(
            network=snapshot.network_identifier,
            genesis=snapshot.genesis_block_identifier,
            statuses=snapshot.allowed_operation_statuses,
            types=snapshot.allowed_operation_types,
            errors=snapshot.allowed_errors,
            historical_balance_lookup=snapshot.historical_balance_lookup,
        )

    def _build(
        self,
        *,
        network: NetworkIdentifier,
        genesis: BlockIdentifier,
        statuses: Optional[Sequence[OperationStatus]],
        types: Optional[Sequence[str]],
        errors: Optional[Sequence[Error]],
        historical_balance_lookup: bool,
    ) -> Validator:
        statuses_by_name = check_operation_statuses(statuses)
        operation_types = check_operation_types(types)
        errors_by_code = check_errors(
            errors,
            warn_on_duplicate_codes=self._config.warn_on_duplicate_error_codes,
        )

        validator = Validator(
            network_identifier=network,
            genesis_block_identifier=genesis,
            statuses_by_name=statuses_by_name,
            operation_types=operation_types,
            errors_by_code=errors_by_code,
            historical_balance_lookup=historical_balance_lookup,
        )
        logger.debug("accepted capabilities for %s: %r", network, validator)
        return validator


# =============================================================================
# Convenience
# =============================================================================

def new_validator_with_responses(
    network: Optional[NetworkIdentifier],
    status: Optional[NetworkStatusResponse],
    options: Optional[NetworkOptionsResponse],
) -> Validator:
    """Build a Validator from live responses with the default settings."""
    return CapabilityConstructor().from_responses(network, status, options)


def new_validator_with_snapshot(path: Union[str, Path]) -> Validator:
    """Build a Validator from a snapshot file with the default settings."""
    return CapabilityConstructor().from_snapshot(path)
