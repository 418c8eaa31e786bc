"""Totals, detail detection and percent conversions for percentage plans."""

from courtplan.domains.practice_plan.enums import PlanGranularity, TrainingArea, TrainingType
from courtplan.domains.practice_plan.hierarchy import CategorySchema
from courtplan.domains.practice_plan.models import PercentagePlan


def _value(percent: float | None) -> float:
    return percent if percent is not None else 0.0


def percent_of_parent(child_percent_of_whole: float, parent_percent_of_whole: float) -> float:
    """Express a percent-of-whole value relative to its parent.

    Returns 0.0 when the parent has no share (nothing to be relative to).
    """
    if parent_percent_of_whole <= 0:
        return 0.0
    return child_percent_of_whole / parent_percent_of_whole * 100


def percent_of_whole(percent_of_parent_value: float, parent_percent_of_whole: float) -> float:
    """Inverse of percent_of_parent: absolute = relative * parent / 100."""
    return percent_of_parent_value * parent_percent_of_whole / 100


def total_percent(plan: PercentagePlan) -> float:
    """Sum of all Type percentages (absent values count as 0)."""
    return sum(_value(allocation.percent_of_whole) for allocation in plan.types.values())


def area_total(plan: PercentagePlan, training_type: TrainingType) -> float:
    allocation = plan.types.get(training_type)
    if allocation is None:
        return 0.0
    return sum(_value(area.percent_of_whole) for area in allocation.areas.values())


def exercise_total(plan: PercentagePlan, training_type: TrainingType, area: TrainingArea) -> float:
    allocation = plan.types.get(training_type)
    if allocation is None or area not in allocation.areas:
        return 0.0
    return sum(_value(e.percent_of_whole) for e in allocation.areas[area].exercises.values())


def has_area_detail(plan: PercentagePlan) -> bool:
    """True if any Area carries a share above zero."""
    return any(
        _value(area.percent_of_whole) > 0
        for allocation in plan.types.values()
        for area in allocation.areas.values()
    )


def has_exercise_detail(plan: PercentagePlan, schema: CategorySchema) -> bool:
    """True if any Exercise of a non-exempt Type carries a share above zero."""
    for training_type, allocation in plan.types.items():
        if training_type == schema.exempt_type:
            continue
        for area in allocation.areas.values():
            if any(_value(e.percent_of_whole) > 0 for e in area.exercises.values()):
                return True
    return False


def has_exempt_area_detail(plan: PercentagePlan, schema: CategorySchema) -> bool:
    """True if the exercise-exempt Type carries Area shares above zero."""
    if schema.exempt_type is None or schema.exempt_type not in plan.types:
        return False
    return any(
        _value(area.percent_of_whole) > 0
        for area in plan.types[schema.exempt_type].areas.values()
    )


def infer_granularity(plan: PercentagePlan, schema: CategorySchema) -> PlanGranularity:
    """Infer the deepest level at which the plan carries real data.

    An exempt Type's Areas are already its deepest level, so Area values
    there count as full exercise-level detail.
    """
    if has_exercise_detail(plan, schema) or has_exempt_area_detail(plan, schema):
        return PlanGranularity.EJERCICIO
    if has_area_detail(plan):
        return PlanGranularity.AREA
    return PlanGranularity.TIPO


def to_parent_relative(plan: PercentagePlan) -> dict[str, dict]:
    """Display view with every Area/Exercise expressed relative to its parent.

    Type values stay percent of whole. The stored plan is not modified.
    """
    view: dict[str, dict] = {}
    for training_type, allocation in plan.types.items():
        type_percent = _value(allocation.percent_of_whole)
        areas: dict[str, dict] = {}
        for area, area_allocation in allocation.areas.items():
            area_percent = _value(area_allocation.percent_of_whole)
            areas[area.value] = {
                "percent": round(percent_of_parent(area_percent, type_percent), 1),
                "exercises": {
                    name: round(percent_of_parent(_value(e.percent_of_whole), area_percent), 1)
                    for name, e in area_allocation.exercises.items()
                },
            }
        view[training_type.value] = {"percent": type_percent, "areas": areas}
    return view
