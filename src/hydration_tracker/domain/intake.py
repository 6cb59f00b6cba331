"""Domain models and transitions for daily intake."""

from dataclasses import dataclass, replace

GLASS_SIZE_ML = 250
DAILY_GOAL_ML = 2000
OVERFLOW_ALLOWANCE_ML = 1000


@dataclass(frozen=True)
class IntakeLimits:
    """Fixed quantities that bound a day's intake."""

    glass_size_ml: int = GLASS_SIZE_ML
    daily_goal_ml: int = DAILY_GOAL_ML
    overflow_allowance_ml: int = OVERFLOW_ALLOWANCE_ML

    @property
    def max_intake_ml(self) -> int:
        """Hard clamp for the daily total."""
        return self.daily_goal_ml + self.overflow_allowance_ml


@dataclass(frozen=True)
class IntakeState:
    """Intake accumulated on a single calendar day."""

    total_ml: int
    current_day: str
    goal_reached: bool = False


@dataclass(frozen=True)
class IntakeSnapshot:
    """Read-only values derived from the current state for rendering."""

    day: str
    total_ml: int
    daily_goal_ml: int
    glass_size_ml: int
    glasses_count: int
    progress_fraction: float
    progress_percent: int
    remaining_ml: int
    goal_reached: bool
    can_remove: bool


def add_intake(state: IntakeState, amount: int, limits: IntakeLimits) -> IntakeState:
    """Return the state with `amount` added, saturating at the maximum intake."""
    _check_amount(amount)
    total = min(state.total_ml + amount, limits.max_intake_ml)
    if total == state.total_ml:
        return state
    return replace(state, total_ml=total)


def remove_intake(state: IntakeState, amount: int) -> IntakeState:
    """Return the state with `amount` removed, saturating at zero."""
    _check_amount(amount)
    total = max(state.total_ml - amount, 0)
    if total == state.total_ml:
        return state
    return replace(state, total_ml=total)


def reset_intake(day: str) -> IntakeState:
    """Return an empty state for `day` with the goal latch cleared."""
    return IntakeState(total_ml=0, current_day=day, goal_reached=False)


def apply_goal_latch(
    previous_total_ml: int, state: IntakeState, limits: IntakeLimits
) -> tuple[IntakeState, bool]:
    """Latch the goal when the total crosses it upward.

    Returns the (possibly latched) state and whether the crossing happened on
    this transition. A latched state never reports another crossing until the
    day is reset, even if the total dips below the goal and climbs back.
    """
    crossed = (
        previous_total_ml < limits.daily_goal_ml <= state.total_ml
        and not state.goal_reached
    )
    if not crossed:
        return state, False
    return replace(state, goal_reached=True), True


def build_snapshot(state: IntakeState, limits: IntakeLimits) -> IntakeSnapshot:
    """Derive the render values for a state."""
    progress = min(state.total_ml / limits.daily_goal_ml, 1.0)
    return IntakeSnapshot(
        day=state.current_day,
        total_ml=state.total_ml,
        daily_goal_ml=limits.daily_goal_ml,
        glass_size_ml=limits.glass_size_ml,
        glasses_count=state.total_ml // limits.glass_size_ml,
        progress_fraction=progress,
        progress_percent=round(progress * 100),
        remaining_ml=max(limits.daily_goal_ml - state.total_ml, 0),
        goal_reached=state.goal_reached,
        can_remove=state.total_ml > 0,
    )


def _check_amount(amount: int) -> None:
    if amount < 0:
        raise ValueError(f"Intake amount must be non-negative, got {amount}")
