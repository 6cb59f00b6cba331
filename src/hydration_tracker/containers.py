"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from hydration_tracker.adapters.json_file_store import JsonFileKeyValueStore
from hydration_tracker.adapters.memory_store import InMemoryKeyValueStore
from hydration_tracker.adapters.supabase_kv_store import SupabaseKeyValueStore
from hydration_tracker.config import Settings
from hydration_tracker.services.day_boundary import DateBoundaryDetector
from hydration_tracker.services.intake import AppStateController
from hydration_tracker.services.store import PersistenceStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: PersistenceStore
    controller: AppStateController
    close_resources: Callable[[], Awaitable[None]]


def build_store(settings: Settings) -> PersistenceStore:
    """Create the key/value store selected by the settings."""
    if settings.storage_backend == "memory":
        return InMemoryKeyValueStore()
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "Supabase storage requires HYDRATION_SUPABASE_URL and "
                "HYDRATION_SUPABASE_SERVICE_KEY"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client, table=settings.supabase_table)
    return JsonFileKeyValueStore(settings.data_path)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    limits = resolved_settings.limits()
    if limits.glass_size_ml > limits.max_intake_ml:
        raise ValueError("Glass size cannot exceed the maximum daily intake")

    store = build_store(resolved_settings)
    controller = AppStateController(
        store=store,
        day_boundary=DateBoundaryDetector(timezone_name=resolved_settings.timezone),
        limits=limits,
    )

    async def close_resources() -> None:
        await controller.flush()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        controller=controller,
        close_resources=close_resources,
    )
