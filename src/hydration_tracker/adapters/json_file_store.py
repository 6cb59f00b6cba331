"""Local JSON file key/value store."""

import asyncio
import json
import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from hydration_tracker.domain.errors import StorageReadError, StorageWriteError
from hydration_tracker.services.store import PersistenceStore


@dataclass
class JsonFileKeyValueStore(PersistenceStore):
    """Stores all keys in one JSON document on disk.

    Writes replace the whole document atomically, so a batch is either fully
    visible or not at all.
    """

    path: Path
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        self.path = Path(self.path)

    async def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        document = await asyncio.to_thread(self._read_document)
        value = document.get(key)
        return None if value is None else str(value)

    async def set(self, key: str, value: str) -> None:
        """Store a single value."""
        await self.set_many({key: value})

    async def set_many(self, pairs: Mapping[str, str]) -> None:
        """Store several values in one atomic file replacement."""
        async with self._lock:
            try:
                document = await asyncio.to_thread(self._read_document)
            except StorageReadError as exc:
                raise StorageWriteError(f"Cannot update {self.path}: {exc}") from exc
            document.update(pairs)
            await asyncio.to_thread(self._write_document, document)

    def _read_document(self) -> dict[str, object]:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            raise StorageReadError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageReadError(f"Unexpected document in {self.path}")
        return data

    def _write_document(self, document: dict[str, object]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(document, handle, indent=2, sort_keys=True)
                os.replace(temp_name, self.path)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageWriteError(f"Cannot write {self.path}: {exc}") from exc
