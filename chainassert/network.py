"""
network.py

Structural checks for network capability messages.

Each check raises the first violation it finds and returns nothing (or the
normalized form of what it checked). Allow-list scans run in declaration
order so a duplicate is always reported at the lowest index of its second
occurrence.
"""

import logging
from typing import Dict, FrozenSet, Optional, Sequence, Tuple

from chainassert.config import MIN_UNIX_EPOCH
from chainassert.errors import (
    DuplicateEntryError,
    EmptyRequiredSetError,
    ImplausibleValueError,
    MissingFieldError,
)
from chainassert.types import (
    Allow,
    BlockIdentifier,
    Error,
    NetworkIdentifier,
    NetworkOptionsResponse,
    NetworkStatusResponse,
    OperationStatus,
    Peer,
    Version,
)

logger = logging.getLogger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


# =============================================================================
# Identifiers
# =============================================================================

def check_network_identifier(network: Optional[NetworkIdentifier]) -> None:
    """Ensure both halves of a network identifier are present."""
    if network is None:
        raise MissingFieldError("network_identifier")
    if _is_blank(network.blockchain):
        raise MissingFieldError("network_identifier.blockchain")
    if _is_blank(network.network):
        raise MissingFieldError("network_identifier.network")


def check_block_identifier(
    block: Optional[BlockIdentifier],
    field_name: str = "block_identifier",
) -> None:
    """Ensure a block identifier is present with a usable index and hash."""
    if block is None:
        raise MissingFieldError(field_name)
    if block.index < 0:
        raise ImplausibleValueError(
            f"{field_name}.index", block.index, "index must be non-negative",
        )
    if _is_blank(block.hash):
        raise MissingFieldError(f"{field_name}.hash")


def check_timestamp(timestamp: int, min_unix_epoch: int = MIN_UNIX_EPOCH) -> None:
    """Reject timestamps at or before the minimum plausible epoch."""
    if timestamp <= min_unix_epoch:
        raise ImplausibleValueError(
            "current_block_timestamp",
            timestamp,
            f"must be greater than {min_unix_epoch}",
        )


def check_peers(peers: Optional[Sequence[Peer]]) -> None:
    for i, peer in enumerate(peers or ()):
        if peer is None:
            raise MissingFieldError(f"peers[{i}]")
        if _is_blank(peer.peer_id):
            raise MissingFieldError(f"peers[{i}].peer_id")


def check_version(version: Optional[Version]) -> None:
    if version is None:
        raise MissingFieldError("version")
    if _is_blank(version.rosetta_version):
        raise MissingFieldError("version.rosetta_version")
    if _is_blank(version.node_version):
        raise MissingFieldError("version.node_version")


# =============================================================================
# Allow-lists
# =============================================================================

def check_operation_statuses(
    statuses: Optional[Sequence[OperationStatus]],
) -> Dict[str, OperationStatus]:
    """
    Check the declared operation statuses and index them by status string.

    Two entries with the same status string are duplicates even when their
    successful flags differ.
    """
    if not statuses:
        raise EmptyRequiredSetError("operation_statuses")

    by_status: Dict[str, OperationStatus] = {}
    for i, status in enumerate(statuses):
        if status is None:
            raise MissingFieldError(f"operation_statuses[{i}]")
        if _is_blank(status.status):
            raise MissingFieldError(f"operation_statuses[{i}].status")
        if status.status in by_status:
            raise DuplicateEntryError("operation_statuses", status.status)
        by_status[status.status] = status
    return by_status


def check_operation_types(types: Optional[Sequence[str]]) -> FrozenSet[str]:
    """Check the declared operation types. An absent list declares no types."""
    seen = set()
    for i, op_type in enumerate(types or ()):
        if _is_blank(op_type):
            raise MissingFieldError(f"operation_types[{i}]")
        if op_type in seen:
            raise DuplicateEntryError("operation_types", op_type)
        seen.add(op_type)
    return frozenset(seen)


def check_error(error: Optional[Error], field_name: str = "error") -> None:
    """Ensure a single error is well formed."""
    if error is None:
        raise MissingFieldError(field_name)
    if error.code < 0:
        raise ImplausibleValueError(
            f"{field_name}.code", error.code, "code must be non-negative",
        )
    if _is_blank(error.message):
        raise MissingFieldError(f"{field_name}.message")


def check_errors(
    errors: Optional[Sequence[Error]],
    *,
    warn_on_duplicate_codes: bool = True,
) -> Dict[int, Tuple[Error, ...]]:
    """
    Check every declared error and group them by code.

    Codes may repeat across distinct messages; that is allowed and only
    logged when warn_on_duplicate_codes is set.
    """
    by_code: Dict[int, Tuple[Error, ...]] = {}
    for i, error in enumerate(errors or ()):
        check_error(error, f"errors[{i}]")
        if error.code in by_code and warn_on_duplicate_codes:
            logger.warning("errors declares code %d more than once", error.code)
        by_code[error.code] = by_code.get(error.code, ()) + (error,)
    return by_code


# =============================================================================
# Responses
# =============================================================================

def check_network_status_response(
    status: Optional[NetworkStatusResponse],
    min_unix_epoch: int = MIN_UNIX_EPOCH,
) -> None:
    """Genesis, then current block, then timestamp, then peers."""
    if status is None:
        raise MissingFieldError("network_status")
    check_block_identifier(status.genesis_block_identifier, "genesis_block_identifier")
    check_block_identifier(status.current_block_identifier, "current_block_identifier")
    check_timestamp(status.current_block_timestamp, min_unix_epoch)
    check_peers(status.peers)


def check_network_options_response(options: Optional[NetworkOptionsResponse]) -> Allow:
    """
    Ensure the options message carries an allow-list and a version.

    Returns the allow-list; its contents are checked separately so callers
    can keep the per-list results.
    """
    if options is None:
        raise MissingFieldError("network_options")
    if options.allow is None:
        raise MissingFieldError("allow")
    check_version(options.version)
    return options.allow
