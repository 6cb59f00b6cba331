"""Calendar day boundary detection."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from zoneinfo import ZoneInfo


def _system_clock() -> datetime:
    return datetime.now(tz=UTC)


def day_identifier(now: datetime) -> str:
    """Return the calendar day identifier (ISO date) for a timestamp."""
    return now.date().isoformat()


@dataclass
class DateBoundaryDetector:
    """Decides whether the calendar day has changed since the last reset.

    Days are compared by identifier equality in the configured timezone, or in
    the system's local time when none is configured. Elapsed time plays no
    part: midnight starts a new day, and a jump over several days still counts
    as a single change.
    """

    timezone_name: str | None = None
    clock: Callable[[], datetime] = field(default=_system_clock)

    def now(self) -> datetime:
        """Return the clock reading converted into the tracking timezone."""
        current = self.clock()
        if self.timezone_name:
            # naive readings are local time
            return current.astimezone(ZoneInfo(self.timezone_name))
        if current.tzinfo is None:
            return current
        return current.astimezone()

    def today(self) -> str:
        """Return today's day identifier."""
        return day_identifier(self.now())

    def is_new_day(self, last_reset_date: str | None, today: str | None = None) -> bool:
        """Return True when `last_reset_date` is absent or not today."""
        return last_reset_date != (today or self.today())
