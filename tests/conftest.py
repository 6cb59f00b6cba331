"""Shared test fixtures."""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta

import pytest

from hydration_tracker.adapters.memory_store import InMemoryKeyValueStore
from hydration_tracker.config import Settings
from hydration_tracker.containers import AppContainer
from hydration_tracker.domain.errors import StorageReadError, StorageWriteError
from hydration_tracker.domain.intake import IntakeLimits
from hydration_tracker.services.day_boundary import DateBoundaryDetector
from hydration_tracker.services.intake import AppStateController
from hydration_tracker.services.store import PersistenceStore

TODAY = "2026-10-17"
YESTERDAY = "2026-10-16"


@dataclass
class FakeClock:
    """Controllable clock returning naive local timestamps."""

    current: datetime = field(default_factory=lambda: datetime(2026, 10, 17, 9, 30))

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


@dataclass
class RecordingKeyValueStore(InMemoryKeyValueStore):
    """In-memory store that records every write call."""

    writes: list[dict[str, str]] = field(default_factory=list)

    async def set(self, key: str, value: str) -> None:
        self.writes.append({key: value})
        await super().set(key, value)

    async def set_many(self, pairs: Mapping[str, str]) -> None:
        self.writes.append(dict(pairs))
        await super().set_many(pairs)


@dataclass
class FailingKeyValueStore(InMemoryKeyValueStore):
    """In-memory store whose reads or writes can be switched off."""

    fail_reads: bool = False
    fail_writes: bool = False

    async def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise StorageReadError("storage offline")
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageWriteError("storage offline")
        await super().set(key, value)

    async def set_many(self, pairs: Mapping[str, str]) -> None:
        if self.fail_writes:
            raise StorageWriteError("storage offline")
        await super().set_many(pairs)


def make_controller(
    store: PersistenceStore,
    clock: FakeClock | None = None,
    limits: IntakeLimits | None = None,
) -> AppStateController:
    return AppStateController(
        store=store,
        day_boundary=DateBoundaryDetector(clock=clock or FakeClock()),
        limits=limits or IntakeLimits(),
    )


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("hydration_tracker")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> RecordingKeyValueStore:
    return RecordingKeyValueStore()


@pytest.fixture
def settings() -> Settings:
    return Settings(storage_backend="memory")


@pytest.fixture
def container(
    settings: Settings, store: RecordingKeyValueStore, clock: FakeClock
) -> AppContainer:
    controller = make_controller(store, clock, settings.limits())

    async def close_resources() -> None:
        await controller.flush()

    return AppContainer(
        settings=settings,
        store=store,
        controller=controller,
        close_resources=close_resources,
    )
