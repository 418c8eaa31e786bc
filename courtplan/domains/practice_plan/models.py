"""Percentage plan models.

A plan allocates an athlete's training time across the category
hierarchy. Every percentage, at every level, is PERCENT OF WHOLE: an
Area at 20 means 20% of all training time, not 20% of its Type.

A percentage of None means the field is absent from the document. The
validator reports that as a structural error; zero is a valid
"explicitly excluded" value.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from courtplan.domains.practice_plan.enums import PlanGranularity, TrainingArea, TrainingType
from courtplan.planning.invariants import DEFAULT_WINDOW_DAYS


class ExerciseAllocation(BaseModel):
    """Target share of one named exercise."""

    percent_of_whole: float | None = None


class AreaAllocation(BaseModel):
    """Target share of one Area, with optional per-exercise breakdown."""

    percent_of_whole: float | None = None
    exercises: dict[str, ExerciseAllocation] = Field(default_factory=dict)


class TypeAllocation(BaseModel):
    """Target share of one Type and its Areas."""

    percent_of_whole: float | None = None
    areas: dict[TrainingArea, AreaAllocation] = Field(default_factory=dict)


class PercentagePlan(BaseModel):
    """Per-athlete target allocation of training time.

    Attributes:
        athlete_id: Owning athlete
        types: Allocation per Type
        version: Document format; None marks the legacy relative convention
        granularity: Level recorded at the last successful save (informational)
        window_days: Days of logged practice the plan is compared against
    """

    athlete_id: str
    types: dict[TrainingType, TypeAllocation] = Field(default_factory=dict)
    version: int | None = None
    granularity: PlanGranularity | None = None
    window_days: int = DEFAULT_WINDOW_DAYS
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def type_percent(self, training_type: TrainingType) -> float | None:
        allocation = self.types.get(training_type)
        return allocation.percent_of_whole if allocation else None

    def area_percent(self, training_type: TrainingType, area: TrainingArea) -> float | None:
        allocation = self.types.get(training_type)
        if allocation is None or area not in allocation.areas:
            return None
        return allocation.areas[area].percent_of_whole

    def exercise_percent(
        self,
        training_type: TrainingType,
        area: TrainingArea,
        exercise: str,
    ) -> float | None:
        allocation = self.types.get(training_type)
        if allocation is None or area not in allocation.areas:
            return None
        exercise_allocation = allocation.areas[area].exercises.get(exercise)
        return exercise_allocation.percent_of_whole if exercise_allocation else None
