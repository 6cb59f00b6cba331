"""Supabase-backed key/value store."""

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from hydration_tracker.domain.errors import StorageReadError, StorageWriteError
from hydration_tracker.services.store import PersistenceStore


@dataclass
class SupabaseKeyValueStore(PersistenceStore):
    """Supabase implementation of the key/value store.

    Rows live in `table` keyed by `(namespace, key)`. The synchronous client
    runs in a worker thread so callers on the event loop are not blocked.
    """

    client: Client
    table: str = "kv_store"
    namespace: str = "hydration"

    async def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        try:
            response = await asyncio.to_thread(self._select, key)
        except Exception as exc:
            raise StorageReadError(f"Failed to read {key} from Supabase") from exc
        if not response.data:
            return None
        value = response.data[0].get("value")
        return None if value is None else str(value)

    async def set(self, key: str, value: str) -> None:
        """Store a single value."""
        await self.set_many({key: value})

    async def set_many(self, pairs: Mapping[str, str]) -> None:
        """Upsert every pair in a single request."""
        updated_at = datetime.now(tz=UTC).isoformat()
        rows = [
            {
                "namespace": self.namespace,
                "key": key,
                "value": value,
                "updated_at": updated_at,
            }
            for key, value in pairs.items()
        ]
        try:
            await asyncio.to_thread(self._upsert, rows)
        except Exception as exc:
            raise StorageWriteError(
                f"Failed to write {', '.join(pairs)} to Supabase"
            ) from exc

    def _select(self, key: str):  # type: ignore[no-untyped-def]
        return (
            self.client.table(self.table)
            .select("value")
            .eq("namespace", self.namespace)
            .eq("key", key)
            .limit(1)
            .execute()
        )

    def _upsert(self, rows: list[dict[str, str]]) -> None:
        self.client.table(self.table).upsert(
            rows, on_conflict="namespace,key"
        ).execute()
