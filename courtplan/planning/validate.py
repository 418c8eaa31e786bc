"""Strict percentage-plan validator.

Recommendations are only ever generated from plans that pass every check
here. There is no best-effort mode and no default percentages: an
incomplete plan blocks recommendations for its athlete.

Checks:
1. Every schema node has an explicit percentage (0 is valid, absent is not)
2. Every percentage lies within 0-100
3. Areas of each Type > 0 sum to the Type (once the plan has area detail)
4. Exercises of each non-exempt Area > 0 sum to the Area (once the plan
   has exercise detail outside the exempt Type)
5. Type percentages sum to 100

Data problems never raise; they come back as error strings keyed by the
offending path. Names outside the schema are contract violations and
raise UnknownCategoryError.
"""

from dataclasses import dataclass, field

from loguru import logger

from courtplan.domains.practice_plan.allocation import (
    area_total,
    exercise_total,
    has_exercise_detail,
    infer_granularity,
    total_percent,
)
from courtplan.domains.practice_plan.enums import PlanGranularity, PlanStatus
from courtplan.domains.practice_plan.hierarchy import DEFAULT_SCHEMA, CategorySchema
from courtplan.domains.practice_plan.models import PercentagePlan
from courtplan.planning.errors import PlanInvariantError
from courtplan.planning.invariants import (
    MAX_BLOCKING_ERRORS,
    MAX_PERCENT,
    MIN_PERCENT,
    REQUIRED_TOTAL_PERCENT,
    SUM_TOLERANCE_PERCENT,
)

NO_PLAN_REASON = "no plan"


@dataclass(frozen=True)
class PlanValidationResult:
    """Outcome of validate_plan.

    Attributes:
        is_valid: No structural errors and no parent/child sum mismatches
        is_complete: Valid and the grand total is 100 within tolerance
        errors: One entry per offending node, plus one for the grand total
        warnings: Non-blocking observations
        total_percent: Sum of Type percentages
        granularity: Inferred deepest level carrying data
        can_recommend: Same as is_complete
        total_mismatch: The grand total is off by more than the tolerance
    """

    is_valid: bool
    is_complete: bool
    errors: list[str]
    warnings: list[str]
    total_percent: float
    granularity: PlanGranularity
    can_recommend: bool
    total_mismatch: bool = False


@dataclass(frozen=True)
class RecommendationGate:
    """Whether recommendations may be generated from a plan, and why not."""

    can_generate: bool
    reason: str | None = None
    blocking_errors: list[str] | None = None
    validation: PlanValidationResult | None = field(default=None, repr=False)


def _sum_mismatch(actual: float, expected: float) -> bool:
    return abs(actual - expected) > SUM_TOLERANCE_PERCENT


def _check_structure(plan: PercentagePlan, schema: CategorySchema, errors: list[str], warnings: list[str]) -> None:
    def check_value(path: str, value: float | None) -> None:
        if value is None:
            errors.append(f"{path}: percentage is missing")
        elif not MIN_PERCENT <= value <= MAX_PERCENT:
            errors.append(f"{path}: {value:g}% is outside {MIN_PERCENT:g}-{MAX_PERCENT:g}")

    # Names outside the schema fail fast
    for training_type, allocation in plan.types.items():
        for area, area_allocation in allocation.areas.items():
            schema.check_area(training_type, area)
            if not schema.requires_exercise(training_type):
                if area_allocation.exercises:
                    warnings.append(f"{training_type} > {area}: exercise entries ignored for exempt type")
                continue
            for exercise in area_allocation.exercises:
                schema.check_exercise(training_type, area, exercise)

    for training_type in schema.types:
        allocation = plan.types.get(training_type)
        if allocation is None:
            errors.append(f"{training_type}: type is missing from the plan")
            continue
        check_value(str(training_type), allocation.percent_of_whole)

        for area in schema.areas_for(training_type):
            area_allocation = allocation.areas.get(area)
            area_path = f"{training_type} > {area}"
            if area_allocation is None:
                errors.append(f"{area_path}: area is missing from the plan")
                continue
            check_value(area_path, area_allocation.percent_of_whole)

            if not schema.requires_exercise(training_type):
                continue
            for exercise in schema.exercises_for(training_type, area):
                exercise_allocation = area_allocation.exercises.get(exercise)
                exercise_path = f"{area_path} > {exercise}"
                if exercise_allocation is None:
                    errors.append(f"{exercise_path}: exercise is missing from the plan")
                    continue
                check_value(exercise_path, exercise_allocation.percent_of_whole)


def _check_consistency(
    plan: PercentagePlan,
    schema: CategorySchema,
    granularity: PlanGranularity,
    errors: list[str],
    warnings: list[str],
) -> None:
    check_areas = granularity != PlanGranularity.TIPO
    check_exercises = has_exercise_detail(plan, schema)

    if granularity == PlanGranularity.EJERCICIO and not check_exercises:
        warnings.append(
            f"Exercise-level detail comes only from {schema.exempt_type}; "
            "other types are analysed at area level"
        )

    for training_type, allocation in plan.types.items():
        type_percent = allocation.percent_of_whole or 0.0
        areas_sum = area_total(plan, training_type)

        if type_percent > 0 and check_areas and _sum_mismatch(areas_sum, type_percent):
            errors.append(
                f"{training_type}: areas sum to {areas_sum:.1f}% but the type is {type_percent:.1f}%"
            )
        if type_percent == 0 and areas_sum > 0:
            warnings.append(f"{training_type}: type is 0% but its areas sum to {areas_sum:.1f}%")

        if not check_exercises or not schema.requires_exercise(training_type):
            continue
        for area, area_allocation in allocation.areas.items():
            area_percent = area_allocation.percent_of_whole or 0.0
            if area_percent <= 0:
                continue
            exercises_sum = exercise_total(plan, training_type, area)
            if _sum_mismatch(exercises_sum, area_percent):
                errors.append(
                    f"{training_type} > {area}: exercises sum to {exercises_sum:.1f}% "
                    f"but the area is {area_percent:.1f}%"
                )


def validate_plan(plan: PercentagePlan, schema: CategorySchema = DEFAULT_SCHEMA) -> PlanValidationResult:
    """Validate a plan for structural completeness and numeric consistency.

    Args:
        plan: Plan to validate (not modified)
        schema: Category hierarchy the plan must cover

    Returns:
        PlanValidationResult

    Raises:
        UnknownCategoryError: If the plan names a category outside the schema
    """
    errors: list[str] = []
    warnings: list[str] = []

    _check_structure(plan, schema, errors, warnings)
    granularity = infer_granularity(plan, schema)
    _check_consistency(plan, schema, granularity, errors, warnings)

    # The grand total blocks completeness, not validity
    is_valid = not errors
    total = total_percent(plan)
    total_mismatch = _sum_mismatch(total, REQUIRED_TOTAL_PERCENT)
    if total_mismatch:
        errors.append(f"Plan total must be {REQUIRED_TOTAL_PERCENT:g}%; currently {total:.1f}%")

    is_complete = is_valid and not total_mismatch

    logger.debug(
        "Plan validated",
        athlete_id=plan.athlete_id,
        is_complete=is_complete,
        error_count=len(errors),
        granularity=granularity.value,
    )

    return PlanValidationResult(
        is_valid=is_valid,
        is_complete=is_complete,
        errors=errors,
        warnings=warnings,
        total_percent=round(total, 2),
        granularity=granularity,
        can_recommend=is_complete,
        total_mismatch=total_mismatch,
    )


def can_generate_recommendations(
    plan: PercentagePlan | None,
    schema: CategorySchema = DEFAULT_SCHEMA,
) -> RecommendationGate:
    """Gate used by the recommendation engine.

    Returns a top reason plus up to MAX_BLOCKING_ERRORS supporting errors
    when blocked, and only the "no plan" reason when there is no plan.
    """
    if plan is None:
        return RecommendationGate(can_generate=False, reason=NO_PLAN_REASON)

    result = validate_plan(plan, schema)
    if result.can_recommend:
        return RecommendationGate(can_generate=True, validation=result)

    if result.total_mismatch:
        reason = (
            f"Plan total is {result.total_percent:.1f}%, "
            f"it must be {REQUIRED_TOTAL_PERCENT:g}% to generate recommendations"
        )
    else:
        reason = f"Plan has {len(result.errors)} validation error(s)"

    return RecommendationGate(
        can_generate=False,
        reason=reason,
        blocking_errors=result.errors[:MAX_BLOCKING_ERRORS],
        validation=result,
    )


def ensure_recommendable(
    plan: PercentagePlan | None,
    schema: CategorySchema = DEFAULT_SCHEMA,
) -> PlanValidationResult:
    """Validate a plan and raise if recommendations cannot be generated from it.

    Raises:
        PlanInvariantError: With code NO_PLAN or PLAN_NOT_COMPLETE
    """
    gate = can_generate_recommendations(plan, schema)
    if gate.validation is None:
        raise PlanInvariantError("NO_PLAN", [gate.reason or NO_PLAN_REASON])
    if not gate.can_generate:
        raise PlanInvariantError("PLAN_NOT_COMPLETE", gate.validation.errors)
    return gate.validation


def plan_status(result: PlanValidationResult) -> PlanStatus:
    """Summarize a validation result as a coarse plan status."""
    if result.is_complete:
        return PlanStatus.COMPLETE
    if not result.is_valid:
        return PlanStatus.INVALID
    if result.total_percent == 0:
        return PlanStatus.EMPTY
    return PlanStatus.INCOMPLETE
