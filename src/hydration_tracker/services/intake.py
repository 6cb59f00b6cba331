"""Intake state controller: load sequencing, commands and persistence."""

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from hydration_tracker.domain.errors import ParseError, StorageError, StorageReadError
from hydration_tracker.domain.intake import (
    IntakeLimits,
    IntakeSnapshot,
    IntakeState,
    add_intake,
    apply_goal_latch,
    build_snapshot,
    remove_intake,
    reset_intake,
)
from hydration_tracker.services.day_boundary import DateBoundaryDetector
from hydration_tracker.services.store import (
    GOAL_REACHED_KEY,
    INTAKE_ML_KEY,
    LAST_RESET_DATE_KEY,
    PersistenceStore,
    encode_flag,
    encode_intake_ml,
    parse_flag,
    parse_intake_ml,
)

_logger = logging.getLogger(__name__)

StateListener = Callable[[IntakeState], None]
Transition = Callable[[IntakeState], IntakeState]


@dataclass
class AppStateController:
    """Owns the single intake state of a running session.

    Commands are applied synchronously and persisted in the background; the
    in-memory state stays authoritative when storage fails. Commands issued
    before `load()` completes are queued and replayed afterwards, so an early
    save can never overwrite durable state with defaults.
    """

    store: PersistenceStore
    day_boundary: DateBoundaryDetector
    limits: IntakeLimits = field(default_factory=IntakeLimits)
    _state: IntakeState = field(init=False, repr=False)
    _initialized: bool = field(default=False, init=False, repr=False)
    _load_task: asyncio.Task[IntakeState] | None = field(
        default=None, init=False, repr=False
    )
    _warned_memory_only: bool = field(default=False, init=False, repr=False)
    _queued: list[Transition] = field(default_factory=list, init=False, repr=False)
    _pending_saves: set[asyncio.Task[None]] = field(
        default_factory=set, init=False, repr=False
    )
    _subscribers: list[StateListener] = field(
        default_factory=list, init=False, repr=False
    )
    _celebration_listeners: list[StateListener] = field(
        default_factory=list, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self._state = reset_intake(self.day_boundary.today())

    @property
    def state(self) -> IntakeState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def load(self) -> IntakeState:
        """Restore today's state from storage, resetting it on a new day.

        Concurrent callers share one in-flight load and all receive the
        loaded state.
        """
        if self._initialized:
            return self._state
        if self._load_task is None:
            self._load_task = asyncio.get_running_loop().create_task(self._load())
        return await asyncio.shield(self._load_task)

    async def _load(self) -> IntakeState:
        record = await self._read_record()
        today = self.day_boundary.today()
        last_reset_date = record.get(LAST_RESET_DATE_KEY)
        if self.day_boundary.is_new_day(last_reset_date, today=today):
            _logger.info(
                "Starting new day %s (last reset: %s)", today, last_reset_date
            )
            self._state = reset_intake(today)
            await self._write_batch(_reset_record(self._state))
        else:
            self._state = self._restore(today, record)
            _logger.info(
                "Restored intake for %s: %s ml", today, self._state.total_ml
            )

        self._initialized = True
        self._notify(self._subscribers, self._state)
        self._replay_queued()
        return self._state

    def add_glass(self) -> IntakeState:
        """Add one glass to today's intake."""
        glass = self.limits.glass_size_ml
        return self._dispatch(lambda state: add_intake(state, glass, self.limits))

    def remove_glass(self) -> IntakeState:
        """Remove one glass from today's intake."""
        glass = self.limits.glass_size_ml
        return self._dispatch(lambda state: remove_intake(state, glass))

    def roll_over_if_needed(self) -> bool:
        """Reset the state if the calendar day changed while running."""
        if not self._initialized:
            return False
        today = self.day_boundary.today()
        if not self.day_boundary.is_new_day(self._state.current_day, today=today):
            return False
        _logger.info("Day rolled over from %s to %s", self._state.current_day, today)
        self._state = reset_intake(today)
        self._schedule_save(_reset_record(self._state))
        self._notify(self._subscribers, self._state)
        return True

    @property
    def goal_reached(self) -> bool:
        return self._state.goal_reached

    @property
    def progress_fraction(self) -> float:
        return self.snapshot().progress_fraction

    @property
    def glasses_count(self) -> int:
        return self._state.total_ml // self.limits.glass_size_ml

    def snapshot(self) -> IntakeSnapshot:
        """Return the derived values the presentation layer renders."""
        return build_snapshot(self._state, self.limits)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call `listener` with the new state after every change."""
        return _register(self._subscribers, listener)

    def on_celebrate(self, listener: StateListener) -> Callable[[], None]:
        """Call `listener` once per day when the goal is first reached."""
        return _register(self._celebration_listeners, listener)

    async def flush(self) -> None:
        """Wait until every scheduled save has finished."""
        while self._pending_saves:
            await asyncio.gather(*list(self._pending_saves))

    def _dispatch(self, transition: Transition) -> IntakeState:
        if not self._initialized:
            self._queued.append(transition)
            _logger.info("Intake not loaded yet; command queued")
            return self._state
        return self._apply(transition)

    def _apply(self, transition: Transition) -> IntakeState:
        self.roll_over_if_needed()
        previous = self._state
        updated, celebrated = apply_goal_latch(
            previous.total_ml, transition(previous), self.limits
        )
        if updated == previous:
            return previous

        self._state = updated
        changes = {INTAKE_ML_KEY: encode_intake_ml(updated.total_ml)}
        if updated.goal_reached != previous.goal_reached:
            changes[GOAL_REACHED_KEY] = encode_flag(updated.goal_reached)
        self._schedule_save(changes)

        if celebrated:
            _logger.info("Daily goal reached: %s ml", updated.total_ml)
            self._notify(self._celebration_listeners, updated)
        self._notify(self._subscribers, updated)
        return updated

    def _replay_queued(self) -> None:
        queued, self._queued = self._queued, []
        for transition in queued:
            self._apply(transition)

    def _restore(self, today: str, record: Mapping[str, str]) -> IntakeState:
        total_ml = 0
        raw_intake = record.get(INTAKE_ML_KEY)
        if raw_intake is not None:
            try:
                total_ml = parse_intake_ml(raw_intake)
            except ParseError:
                _logger.warning("Ignoring unreadable stored intake %r", raw_intake)
        total_ml = min(total_ml, self.limits.max_intake_ml)
        goal_reached = (
            parse_flag(record.get(GOAL_REACHED_KEY))
            or total_ml >= self.limits.daily_goal_ml
        )
        return IntakeState(
            total_ml=total_ml, current_day=today, goal_reached=goal_reached
        )

    async def _read_record(self) -> dict[str, str]:
        record: dict[str, str] = {}
        try:
            for key in (LAST_RESET_DATE_KEY, INTAKE_ML_KEY, GOAL_REACHED_KEY):
                value = await self.store.get(key)
                if value is not None:
                    record[key] = value
        except StorageReadError:
            _logger.exception("Failed to read stored intake; starting fresh")
            return {}
        return record

    def _schedule_save(self, changes: dict[str, str]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if not self._warned_memory_only:
                _logger.warning("No running event loop; intake kept in memory only")
                self._warned_memory_only = True
            return
        task = loop.create_task(self._write_batch(changes))
        self._pending_saves.add(task)
        task.add_done_callback(self._pending_saves.discard)

    async def _write_batch(self, changes: dict[str, str]) -> None:
        try:
            if len(changes) == 1:
                ((key, value),) = changes.items()
                await self.store.set(key, value)
            else:
                await self.store.set_many(changes)
        except StorageError:
            _logger.exception(
                "Failed to persist %s; in-memory intake stays authoritative",
                ", ".join(changes),
            )

    @staticmethod
    def _notify(listeners: list[StateListener], state: IntakeState) -> None:
        for listener in list(listeners):
            try:
                listener(state)
            except Exception:
                _logger.exception("Intake listener failed")


def _reset_record(state: IntakeState) -> dict[str, str]:
    return {
        LAST_RESET_DATE_KEY: state.current_day,
        INTAKE_ML_KEY: encode_intake_ml(state.total_ml),
        GOAL_REACHED_KEY: encode_flag(state.goal_reached),
    }


def _register(
    listeners: list[StateListener], listener: StateListener
) -> Callable[[], None]:
    listeners.append(listener)

    def unsubscribe() -> None:
        if listener in listeners:
            listeners.remove(listener)

    return unsubscribe
