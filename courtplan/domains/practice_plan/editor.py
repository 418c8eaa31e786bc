"""One-field-at-a-time plan editing.

A coach edits a plan by setting single percentages. Every mutation is
applied in place and immediately re-validated; values outside 0-100 are
stored as entered so the validator can report them.
"""

from datetime import UTC, datetime

from loguru import logger

from courtplan.domains.practice_plan.documents import empty_plan
from courtplan.domains.practice_plan.enums import TrainingArea, TrainingType
from courtplan.domains.practice_plan.hierarchy import DEFAULT_SCHEMA, CategorySchema
from courtplan.domains.practice_plan.models import (
    AreaAllocation,
    ExerciseAllocation,
    PercentagePlan,
    TypeAllocation,
)
from courtplan.planning.errors import UnknownCategoryError
from courtplan.planning.invariants import CURRENT_PLAN_VERSION
from courtplan.planning.validate import PlanValidationResult, validate_plan


class PlanEditor:
    """Mutates a plan in place and re-validates after each change."""

    def __init__(self, plan: PercentagePlan, schema: CategorySchema = DEFAULT_SCHEMA):
        self.plan = plan
        self.schema = schema
        self.last_result: PlanValidationResult = validate_plan(plan, schema)

    @classmethod
    def for_athlete(
        cls,
        athlete_id: str,
        plan: PercentagePlan | None = None,
        schema: CategorySchema = DEFAULT_SCHEMA,
    ) -> "PlanEditor":
        """Edit the athlete's plan, starting from an all-zero plan if there is none."""
        return cls(plan if plan is not None else empty_plan(athlete_id, schema), schema)

    def _type(self, training_type: TrainingType) -> TypeAllocation:
        training_type = self.schema.check_type(training_type)
        return self.plan.types.setdefault(training_type, TypeAllocation())

    def _area(self, training_type: TrainingType, area: TrainingArea) -> AreaAllocation:
        area = self.schema.check_area(training_type, area)
        return self._type(training_type).areas.setdefault(area, AreaAllocation())

    def _revalidate(self) -> PlanValidationResult:
        self.last_result = validate_plan(self.plan, self.schema)
        return self.last_result

    def set_type_percent(self, training_type: TrainingType, value: float) -> PlanValidationResult:
        self._type(training_type).percent_of_whole = value
        return self._revalidate()

    def set_area_percent(
        self,
        training_type: TrainingType,
        area: TrainingArea,
        value: float,
    ) -> PlanValidationResult:
        self._area(training_type, area).percent_of_whole = value
        return self._revalidate()

    def set_exercise_percent(
        self,
        training_type: TrainingType,
        area: TrainingArea,
        exercise: str,
        value: float,
    ) -> PlanValidationResult:
        if not self.schema.requires_exercise(training_type):
            raise UnknownCategoryError(f"{training_type} does not take exercise-level percentages")
        self.schema.check_exercise(training_type, area, exercise)
        area_allocation = self._area(training_type, area)
        area_allocation.exercises.setdefault(exercise, ExerciseAllocation()).percent_of_whole = value
        return self._revalidate()

    def mark_saved(self, now: datetime | None = None) -> PercentagePlan:
        """Stamp the metadata written back after a successful validate+save cycle.

        The plan is stamped only if the latest validation passed; otherwise it
        is returned unchanged.
        """
        if not self.last_result.is_valid:
            logger.info(
                "Plan not stamped: validation errors present",
                athlete_id=self.plan.athlete_id,
                error_count=len(self.last_result.errors),
            )
            return self.plan

        now = now or datetime.now(UTC)
        self.plan.version = CURRENT_PLAN_VERSION
        self.plan.granularity = self.last_result.granularity
        self.plan.updated_at = now
        if self.plan.created_at is None:
            self.plan.created_at = now
        return self.plan
