"""
config.py

Construction settings for CapabilityConstructor.

Settings are passed in explicitly; nothing is read from the environment.
"""

from dataclasses import dataclass, replace
from typing import Any

# 2000-01-01T00:00:00Z in milliseconds. Any current block timestamp at or
# before this is treated as a placeholder rather than a real chain time.
MIN_UNIX_EPOCH = 946713600000


@dataclass(frozen=True)
class ConstructorConfig:
    """
    Settings applied while building a Validator.

    Attributes:
        min_unix_epoch: Current block timestamps must be strictly greater
            than this value (milliseconds since the Unix epoch).
        warn_on_duplicate_error_codes: Log a warning when the declared
            error list repeats a code. Duplicate codes are never rejected.
    """
    min_unix_epoch: int = MIN_UNIX_EPOCH
    warn_on_duplicate_error_codes: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.min_unix_epoch, bool) or not isinstance(self.min_unix_epoch, int):
            raise TypeError(
                f"min_unix_epoch must be int, got {type(self.min_unix_epoch).__name__}"
            )
        if not isinstance(self.warn_on_duplicate_error_codes, bool):
            raise TypeError(
                "warn_on_duplicate_error_codes must be bool, "
                f"got {type(self.warn_on_duplicate_error_codes).__name__}"
            )

    def with_overrides(self, **overrides: Any) -> "ConstructorConfig":
        """Return a copy with the given settings replaced."""
        return replace(self, **overrides)


DEFAULT_CONFIG = ConstructorConfig()
