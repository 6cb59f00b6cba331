"""Durable key/value storage interface and record encoding."""

from collections.abc import Mapping
from typing import Protocol

from hydration_tracker.domain.errors import ParseError

LAST_RESET_DATE_KEY = "lastResetDate"
INTAKE_ML_KEY = "intakeMl"
GOAL_REACHED_KEY = "goalReached"

_TRUE_VALUES = {"true", "1"}


class PersistenceStore(Protocol):
    """Async key/value storage that outlives the process.

    Implementations raise `StorageReadError` or `StorageWriteError` when the
    medium is unavailable. A missing key is reported as None, never as an
    error.
    """

    async def get(self, key: str) -> str | None:
        """Return the stored value for a key, if it was ever written."""

    async def set(self, key: str, value: str) -> None:
        """Store a single value."""

    async def set_many(self, pairs: Mapping[str, str]) -> None:
        """Store several values as one batch."""


def parse_intake_ml(raw: str) -> int:
    """Parse a stored intake value into a non-negative integer."""
    cleaned = raw.strip()
    if not (cleaned.isascii() and cleaned.isdigit()):
        raise ParseError(f"Stored intake is not a non-negative integer: {raw!r}")
    return int(cleaned)


def encode_intake_ml(total_ml: int) -> str:
    return str(total_ml)


def parse_flag(raw: str | None) -> bool:
    if raw is None:
        return False
    return raw.strip().lower() in _TRUE_VALUES


def encode_flag(value: bool) -> str:
    return "true" if value else "false"
