"""Tests for calendar day boundary detection."""

from datetime import UTC, datetime

from hydration_tracker.services.day_boundary import DateBoundaryDetector, day_identifier
from tests.conftest import FakeClock


def test_day_identifier_is_iso_date() -> None:
    assert day_identifier(datetime(2026, 1, 5, 23, 59)) == "2026-01-05"


def test_absent_date_is_new_day() -> None:
    detector = DateBoundaryDetector(clock=FakeClock())
    assert detector.is_new_day(None) is True


def test_same_day_is_not_new_day() -> None:
    detector = DateBoundaryDetector(clock=FakeClock())
    assert detector.is_new_day("2026-10-17") is False


def test_midnight_starts_new_day_regardless_of_elapsed_time() -> None:
    clock = FakeClock(datetime(2026, 10, 17, 23, 59, 30))
    detector = DateBoundaryDetector(clock=clock)
    recorded = detector.today()

    clock.advance(minutes=1)

    assert detector.is_new_day(recorded) is True


def test_long_session_within_one_day_is_not_new_day() -> None:
    clock = FakeClock(datetime(2026, 10, 17, 0, 1))
    detector = DateBoundaryDetector(clock=clock)
    recorded = detector.today()

    clock.advance(hours=23, minutes=58)

    assert detector.is_new_day(recorded) is False


def test_clock_moving_backward_within_day_is_not_new_day() -> None:
    clock = FakeClock(datetime(2026, 10, 17, 18, 0))
    detector = DateBoundaryDetector(clock=clock)
    recorded = detector.today()

    clock.advance(hours=-6)

    assert detector.is_new_day(recorded) is False


def test_multi_day_jump_is_a_single_new_day() -> None:
    clock = FakeClock(datetime(2026, 10, 17, 8, 0))
    detector = DateBoundaryDetector(clock=clock)
    recorded = detector.today()

    clock.advance(days=5)

    assert detector.is_new_day(recorded) is True
    assert detector.today() == "2026-10-22"


def test_timezone_determines_calendar_day() -> None:
    instant = datetime(2026, 10, 17, 3, 0, tzinfo=UTC)
    utc_detector = DateBoundaryDetector(timezone_name="UTC", clock=lambda: instant)
    la_detector = DateBoundaryDetector(
        timezone_name="America/Los_Angeles", clock=lambda: instant
    )

    assert utc_detector.today() == "2026-10-17"
    assert la_detector.today() == "2026-10-16"


def test_explicit_today_overrides_clock() -> None:
    detector = DateBoundaryDetector(clock=FakeClock())
    assert detector.is_new_day("2026-10-16", today="2026-10-16") is False


def test_naive_reading_is_converted_into_configured_timezone() -> None:
    reading = datetime(2026, 10, 17, 23, 30)
    detector = DateBoundaryDetector(timezone_name="UTC", clock=lambda: reading)

    assert detector.now().tzinfo is not None
    assert detector.today() == reading.astimezone(UTC).date().isoformat()
