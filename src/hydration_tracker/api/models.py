"""Pydantic response models for the intake API."""

from pydantic import BaseModel

from hydration_tracker.domain.intake import IntakeSnapshot


class IntakeSnapshotResponse(BaseModel):
    """Current intake values for rendering."""

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

    @classmethod
    def from_snapshot(cls, snapshot: IntakeSnapshot) -> "IntakeSnapshotResponse":
        return cls(
            day=snapshot.day,
            total_ml=snapshot.total_ml,
            daily_goal_ml=snapshot.daily_goal_ml,
            glass_size_ml=snapshot.glass_size_ml,
            glasses_count=snapshot.glasses_count,
            progress_fraction=snapshot.progress_fraction,
            progress_percent=snapshot.progress_percent,
            remaining_ml=snapshot.remaining_ml,
            goal_reached=snapshot.goal_reached,
            can_remove=snapshot.can_remove,
        )


class IntakeCommandResponse(BaseModel):
    """Intake values after a command, plus whether it completed the goal."""

    intake: IntakeSnapshotResponse
    celebrated: bool = False
