"""In-memory key/value store."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from hydration_tracker.services.store import PersistenceStore


@dataclass
class InMemoryKeyValueStore(PersistenceStore):
    """Process-local store; values are lost on exit."""

    values: dict[str, str] = field(default_factory=dict)

    async def get(self, key: str) -> str | None:
        return self.values.get(key)

    async def set(self, key: str, value: str) -> None:
        self.values[key] = value

    async def set_many(self, pairs: Mapping[str, str]) -> None:
        self.values.update(pairs)
