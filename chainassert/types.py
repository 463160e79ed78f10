"""
types.py

Wire message types for the network capability surface.

These mirror the JSON objects a server returns from its status and options
endpoints. They are plain immutable values: no validation beyond shape
happens here (that belongs to chainassert.network and chainassert.validator).

from_dict() raises TypeError, KeyError, or ValueError when the data does not
have the expected shape. Unknown keys are ignored.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

# Save reference to built-in type before any shadowing
_builtin_type = type


# =============================================================================
# Shape Helpers
# =============================================================================

def _require_mapping(value: Any, field_name: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise TypeError(
            f"{field_name} must be an object, got {_builtin_type(value).__name__}"
        )
    return value


def _require_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(
            f"{field_name} must be a string, got {_builtin_type(value).__name__}"
        )
    return value


def _require_int(value: Any, field_name: str) -> int:
    # bool is an int subclass but never a valid index or code
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(
            f"{field_name} must be an integer, got {_builtin_type(value).__name__}"
        )
    return value


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(
            f"{field_name} must be a boolean, got {_builtin_type(value).__name__}"
        )
    return value


def _optional_list(value: Any, field_name: str) -> Optional[List[Any]]:
    if value is None:
        return None
    if not isinstance(value, list):
        raise TypeError(
            f"{field_name} must be an array, got {_builtin_type(value).__name__}"
        )
    return value


# =============================================================================
# Identifiers
# =============================================================================

@dataclass(frozen=True)
class NetworkIdentifier:
    """Identifies the blockchain and network a client validates against."""
    blockchain: str
    network: str

    def to_dict(self) -> Dict[str, Any]:
        return {"blockchain": self.blockchain, "network": self.network}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkIdentifier":
        data = _require_mapping(data, "network_identifier")
        return cls(
            blockchain=_require_str(data["blockchain"], "blockchain"),
            network=_require_str(data["network"], "network"),
        )

    def __str__(self) -> str:
        return f"{self.blockchain}/{self.network}"


@dataclass(frozen=True)
class BlockIdentifier:
    """Points at a single block by height and hash."""
    index: int
    hash: str

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "hash": self.hash}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BlockIdentifier":
        data = _require_mapping(data, "block_identifier")
        return cls(
            index=_require_int(data["index"], "index"),
            hash=_require_str(data["hash"], "hash"),
        )

    @classmethod
    def from_optional(cls, data: Any) -> Optional["BlockIdentifier"]:
        """Construct from a dictionary, mapping an absent value to None."""
        if data is None:
            return None
        return cls.from_dict(data)


@dataclass(frozen=True)
class OperationIdentifier:
    """Position of an operation inside a transaction."""
    index: int
    network_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"index": self.index}
        if self.network_index is not None:
            result["network_index"] = self.network_index
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OperationIdentifier":
        data = _require_mapping(data, "operation_identifier")
        network_index = data.get("network_index")
        if network_index is not None:
            network_index = _require_int(network_index, "network_index")
        return cls(
            index=_require_int(data["index"], "index"),
            network_index=network_index,
        )


# =============================================================================
# Allow-list Entries
# =============================================================================

@dataclass(frozen=True)
class OperationStatus:
    """A status string a server may put on an operation."""
    status: str
    successful: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "successful": self.successful}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OperationStatus":
        data = _require_mapping(data, "operation_status")
        return cls(
            status=_require_str(data["status"], "status"),
            successful=_require_bool(data["successful"], "successful"),
        )


@dataclass(frozen=True)
class Error:
    """An error shape a server may return."""
    code: int
    message: str
    retriable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "retriable": self.retriable,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Error":
        data = _require_mapping(data, "error")
        return cls(
            code=_require_int(data["code"], "code"),
            message=_require_str(data["message"], "message"),
            retriable=_require_bool(data.get("retriable", False), "retriable"),
        )


@dataclass(frozen=True)
class Allow:
    """
    Everything a server declares it may emit.

    Lists are None when the server omitted them, which is distinct from
    an empty list only on the wire; the validator treats both as absent.
    """
    operation_statuses: Optional[Tuple[OperationStatus, ...]] = None
    operation_types: Optional[Tuple[str, ...]] = None
    errors: Optional[Tuple[Error, ...]] = None
    historical_balance_lookup: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation_statuses": (
                None if self.operation_statuses is None
                else [s.to_dict() for s in self.operation_statuses]
            ),
            "operation_types": (
                None if self.operation_types is None
                else list(self.operation_types)
            ),
            "errors": (
                None if self.errors is None
                else [e.to_dict() for e in self.errors]
            ),
            "historical_balance_lookup": self.historical_balance_lookup,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Allow":
        data = _require_mapping(data, "allow")
        statuses = _optional_list(data.get("operation_statuses"), "operation_statuses")
        types = _optional_list(data.get("operation_types"), "operation_types")
        errors = _optional_list(data.get("errors"), "errors")
        return cls(
            operation_statuses=(
                None if statuses is None
                else tuple(OperationStatus.from_dict(s) for s in statuses)
            ),
            operation_types=(
                None if types is None
                else tuple(_require_str(t, "operation_type") for t in types)
            ),
            errors=(
                None if errors is None
                else tuple(Error.from_dict(e) for e in errors)
            ),
            historical_balance_lookup=_require_bool(
                data.get("historical_balance_lookup", False),
                "historical_balance_lookup",
            ),
        )


# =============================================================================
# Network Responses
# =============================================================================

@dataclass(frozen=True)
class Peer:
    """A node the server is connected to."""
    peer_id: str
    metadata: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"peer_id": self.peer_id}
        if self.metadata is not None:
            result["metadata"] = self.metadata
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Peer":
        data = _require_mapping(data, "peer")
        metadata = data.get("metadata")
        if metadata is not None:
            metadata = dict(_require_mapping(metadata, "metadata"))
        return cls(
            peer_id=_require_str(data["peer_id"], "peer_id"),
            metadata=metadata,
        )


@dataclass(frozen=True)
class Version:
    """Protocol and node versions reported by a server."""
    rosetta_version: str
    node_version: str
    middleware_version: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "rosetta_version": self.rosetta_version,
            "node_version": self.node_version,
        }
        if self.middleware_version is not None:
            result["middleware_version"] = self.middleware_version
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Version":
        data = _require_mapping(data, "version")
        middleware_version = data.get("middleware_version")
        if middleware_version is not None:
            middleware_version = _require_str(middleware_version, "middleware_version")
        return cls(
            rosetta_version=_require_str(data["rosetta_version"], "rosetta_version"),
            node_version=_require_str(data["node_version"], "node_version"),
            middleware_version=middleware_version,
        )


@dataclass(frozen=True)
class NetworkStatusResponse:
    """Chain state snapshot: genesis, current block, and peers."""
    current_block_identifier: Optional[BlockIdentifier]
    current_block_timestamp: int
    genesis_block_identifier: Optional[BlockIdentifier]
    peers: Tuple[Peer, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_block_identifier": (
                None if self.current_block_identifier is None
                else self.current_block_identifier.to_dict()
            ),
            "current_block_timestamp": self.current_block_timestamp,
            "genesis_block_identifier": (
                None if self.genesis_block_identifier is None
                else self.genesis_block_identifier.to_dict()
            ),
            "peers": [p.to_dict() for p in self.peers],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkStatusResponse":
        data = _require_mapping(data, "network_status")
        peers = _optional_list(data.get("peers"), "peers") or []
        return cls(
            current_block_identifier=BlockIdentifier.from_optional(
                data.get("current_block_identifier")
            ),
            current_block_timestamp=_require_int(
                data["current_block_timestamp"], "current_block_timestamp"
            ),
            genesis_block_identifier=BlockIdentifier.from_optional(
                data.get("genesis_block_identifier")
            ),
            peers=tuple(Peer.from_dict(p) for p in peers),
        )


@dataclass(frozen=True)
class NetworkOptionsResponse:
    """Version information and the allow-list of a server."""
    version: Optional[Version]
    allow: Optional[Allow]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": None if self.version is None else self.version.to_dict(),
            "allow": None if self.allow is None else self.allow.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkOptionsResponse":
        data = _require_mapping(data, "network_options")
        version = data.get("version")
        allow = data.get("allow")
        return cls(
            version=None if version is None else Version.from_dict(version),
            allow=None if allow is None else Allow.from_dict(allow),
        )


# =============================================================================
# Operations
# =============================================================================

@dataclass(frozen=True)
class Operation:
    """
    A single operation inside a transaction.

    Only the fields the allow-list governs are modelled; status is None
    for operations that have not been executed yet.
    """
    operation_identifier: OperationIdentifier
    type: str
    status: Optional[str] = None
    related_operations: Tuple[OperationIdentifier, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "operation_identifier": self.operation_identifier.to_dict(),
            "type": self.type,
        }
        if self.status is not None:
            result["status"] = self.status
        if self.related_operations:
            result["related_operations"] = [
                r.to_dict() for r in self.related_operations
            ]
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Operation":
        data = _require_mapping(data, "operation")
        status = data.get("status")
        if status is not None:
            status = _require_str(status, "status")
        related = _optional_list(data.get("related_operations"), "related_operations") or []
        return cls(
            operation_identifier=OperationIdentifier.from_dict(data["operation_identifier"]),
            type=_require_str(data["type"], "type"),
            status=status,
            related_operations=tuple(OperationIdentifier.from_dict(r) for r in related),
        )
