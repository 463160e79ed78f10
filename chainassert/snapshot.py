"""
snapshot.py

Persisted capability snapshot.

A snapshot holds just enough of an accepted declaration to rebuild a
Validator without contacting the server again. The file is a single JSON
object with snake_case keys:

    {
      "network_identifier": {"blockchain": "...", "network": "..."},
      "genesis_block_identifier": {"index": 0, "hash": "..."},
      "allowed_operation_types": ["Transfer"],
      "allowed_operation_statuses": [{"status": "Success", "successful": true}],
      "allowed_errors": [{"code": 1, "message": "error", "retriable": true}],
      "historical_balance_lookup": false
    }

Loading only checks shape. Semantic checks happen in CapabilityConstructor.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from chainassert.errors import SnapshotLoadError
from chainassert.types import (
    BlockIdentifier,
    Error,
    NetworkIdentifier,
    OperationStatus,
    _optional_list,
    _require_bool,
    _require_mapping,
    _require_str,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Shape-checked, not yet validated, contents of a snapshot file."""
    network_identifier: Optional[NetworkIdentifier]
    genesis_block_identifier: Optional[BlockIdentifier]
    allowed_operation_types: Optional[Tuple[str, ...]]
    allowed_operation_statuses: Optional[Tuple[OperationStatus, ...]]
    allowed_errors: Optional[Tuple[Error, ...]]
    historical_balance_lookup: bool = False

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a dictionary.

        Types and statuses are sorted, errors are sorted by code then
        message, so equal configurations serialize identically.
        """
        return {
            "network_identifier": (
                None if self.network_identifier is None
                else self.network_identifier.to_dict()
            ),
            "genesis_block_identifier": (
                None if self.genesis_block_identifier is None
                else self.genesis_block_identifier.to_dict()
            ),
            "allowed_operation_types": (
                None if self.allowed_operation_types is None
                else sorted(self.allowed_operation_types)
            ),
            "allowed_operation_statuses": (
                None if self.allowed_operation_statuses is None
                else [
                    s.to_dict() for s in
                    sorted(self.allowed_operation_statuses, key=lambda s: s.status)
                ]
            ),
            "allowed_errors": (
                None if self.allowed_errors is None
                else [
                    e.to_dict() for e in
                    sorted(self.allowed_errors, key=lambda e: (e.code, e.message, e.retriable))
                ]
            ),
            "historical_balance_lookup": self.historical_balance_lookup,
        }

    def to_json(self, *, indent: Optional[int] = 1) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), sort_keys=True, indent=indent)

    @classmethod
    def from_dict(cls, data: Any, source: Optional[str] = None) -> "Snapshot":
        """
        Construct from a dictionary.

        Raises:
            SnapshotLoadError: If the data does not have the snapshot shape
        """
        try:
            data = _require_mapping(data, "snapshot")

            network = data.get("network_identifier")
            genesis = data.get("genesis_block_identifier")
            types = _optional_list(data.get("allowed_operation_types"), "allowed_operation_types")
            statuses = _optional_list(
                data.get("allowed_operation_statuses"), "allowed_operation_statuses"
            )
            errors = _optional_list(data.get("allowed_errors"), "allowed_errors")

            return cls(
                network_identifier=(
                    None if network is None else NetworkIdentifier.from_dict(network)
                ),
                genesis_block_identifier=BlockIdentifier.from_optional(genesis),
                allowed_operation_types=(
                    None if types is None
                    else tuple(_require_str(t, "allowed_operation_types[]") for t in types)
                ),
                allowed_operation_statuses=(
                    None if statuses is None
                    else tuple(OperationStatus.from_dict(s) for s in statuses)
                ),
                allowed_errors=(
                    None if errors is None
                    else tuple(Error.from_dict(e) for e in errors)
                ),
                historical_balance_lookup=_require_bool(
                    data.get("historical_balance_lookup", False),
                    "historical_balance_lookup",
                ),
            )
        except KeyError as e:
            raise SnapshotLoadError(f"missing key {e}", source=source) from e
        except (TypeError, ValueError) as e:
            raise SnapshotLoadError(str(e), source=source) from e

    @classmethod
    def from_json(cls, json_str: str, source: Optional[str] = None) -> "Snapshot":
        """
        Construct from JSON string.

        Raises:
            SnapshotLoadError: If the string is not valid JSON or has the wrong shape
        """
        try:
            data = json.loads(json_str)
        except (ValueError, RecursionError) as e:
            # ValueError covers JSONDecodeError and over-long integer literals
            raise SnapshotLoadError(f"Invalid JSON: {e}", source=source) from e
        return cls.from_dict(data, source=source)

    # -------------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Snapshot":
        """
        Load a snapshot from a JSON file.

        Args:
            path: Path to the snapshot file

        Returns:
            Snapshot instance

        Raises:
            SnapshotLoadError: If the file cannot be read or parsed
        """
        path = Path(path)
        source = str(path)

        if not path.exists():
            raise SnapshotLoadError(f"File not found: {path}", source=source)

        try:
            with open(path, 'r', encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise SnapshotLoadError(f"IO error: {e}", source=source) from e

        snapshot = cls.from_json(content, source=source)
        logger.debug("loaded snapshot from %s", source)
        return snapshot

    def save(self, path: Union[str, Path]) -> None:
        """Write the snapshot to a JSON file, replacing any existing file."""
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
        logger.debug("saved snapshot to %s", path)
