"""Legacy plan upcaster.

Plans stored before the version marker existed kept Area (and Exercise)
values as percent of their PARENT. The current convention stores every
level as percent of the WHOLE plan. This module rewrites an in-memory copy
of a legacy plan into the current convention; the caller's plan object and
the persisted document are never touched.

Detection is heuristic: an Area above LEGACY_RELATIVE_AREA_THRESHOLD is read
as percent of its Type, since an Area claiming more than half of all
training time is implausible. A legitimately dominant Area will be
misclassified; that is accepted behaviour.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from loguru import logger

from courtplan.domains.practice_plan.allocation import area_total, has_area_detail, percent_of_whole
from courtplan.domains.practice_plan.documents import empty_plan
from courtplan.domains.practice_plan.hierarchy import DEFAULT_SCHEMA, CategorySchema
from courtplan.domains.practice_plan.models import AreaAllocation, PercentagePlan
from courtplan.planning.invariants import (
    CURRENT_PLAN_VERSION,
    LEGACY_ADJUST_MIN_DISCREPANCY,
    LEGACY_MAX_TOTAL_DISCREPANCY,
    LEGACY_RELATIVE_AREA_THRESHOLD,
    REQUIRED_TOTAL_PERCENT,
)


@dataclass(frozen=True)
class MigrationReport:
    """What the upcast changed, for audit display."""

    changes: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    old_total: float = 0.0
    new_total: float = 0.0


@dataclass(frozen=True)
class UpcastResult:
    """Upcast plan plus what happened to it.

    Attributes:
        plan: Plan in the current convention (a copy when changed)
        changed: Whether any rewrite happened
        discarded: Whether the plan was replaced by an all-zero plan
        report: Change/warning details
    """

    plan: PercentagePlan
    changed: bool
    discarded: bool
    report: MigrationReport


def needs_upcast(plan: PercentagePlan) -> bool:
    """A plan without the current version marker is in the legacy convention."""
    return plan.version != CURRENT_PLAN_VERSION


def _grand_total(plan: PercentagePlan) -> float:
    """Total on the deepest populated level (Areas if any carry data, else Types)."""
    if has_area_detail(plan):
        return sum(area_total(plan, training_type) for training_type in plan.types)
    return sum(allocation.percent_of_whole or 0.0 for allocation in plan.types.values())


def _round1(value: float) -> float:
    return round(value, 1)


def _rebalance_exercises(area: AreaAllocation) -> None:
    """Make an Area's exercise shares sum exactly to the Area after rounding."""
    populated = [e for e in area.exercises.values() if (e.percent_of_whole or 0.0) > 0]
    if not populated or area.percent_of_whole is None:
        return
    residue = area.percent_of_whole - sum(e.percent_of_whole for e in populated)
    largest = max(populated, key=lambda e: e.percent_of_whole)
    largest.percent_of_whole = _round1(largest.percent_of_whole + residue)


def _convert_relative_areas(plan: PercentagePlan, changes: list[str]) -> None:
    for training_type, allocation in plan.types.items():
        if allocation.percent_of_whole is None and any(
            area.percent_of_whole for area in allocation.areas.values()
        ):
            allocation.percent_of_whole = area_total(plan, training_type)
            changes.append(f"{training_type}: type percentage recovered from its areas")

        type_percent = allocation.percent_of_whole or 0.0
        for area, area_allocation in allocation.areas.items():
            relative = area_allocation.percent_of_whole
            if relative is None or relative <= LEGACY_RELATIVE_AREA_THRESHOLD:
                continue
            area_allocation.percent_of_whole = percent_of_whole(relative, type_percent)
            for exercise in area_allocation.exercises.values():
                if exercise.percent_of_whole is not None:
                    exercise.percent_of_whole = percent_of_whole(
                        exercise.percent_of_whole, area_allocation.percent_of_whole
                    )
            changes.append(
                f"{training_type} > {area}: {relative:g}% of type converted to "
                f"{area_allocation.percent_of_whole:.1f}% of whole"
            )


def _adjust_to_hundred(plan: PercentagePlan, total: float) -> None:
    """Scale the deepest populated level so the plan sums to 100."""
    factor = REQUIRED_TOTAL_PERCENT / total

    if not has_area_detail(plan):
        types = [a for a in plan.types.values() if a.percent_of_whole]
        for allocation in types:
            allocation.percent_of_whole = _round1(allocation.percent_of_whole * factor)
        residue = REQUIRED_TOTAL_PERCENT - sum(a.percent_of_whole for a in types)
        if types and abs(residue) > 0.01:
            types[-1].percent_of_whole = _round1(types[-1].percent_of_whole + residue)
        return

    areas = [
        area
        for allocation in plan.types.values()
        for area in allocation.areas.values()
        if area.percent_of_whole
    ]
    for area in areas:
        area.percent_of_whole = _round1(area.percent_of_whole * factor)
        for exercise in area.exercises.values():
            if exercise.percent_of_whole:
                exercise.percent_of_whole = _round1(exercise.percent_of_whole * factor)

    residue = REQUIRED_TOTAL_PERCENT - sum(area.percent_of_whole for area in areas)
    if areas and abs(residue) > 0.01:
        areas[-1].percent_of_whole = _round1(areas[-1].percent_of_whole + residue)

    for area in areas:
        _rebalance_exercises(area)

    for training_type, allocation in plan.types.items():
        if any(area.percent_of_whole for area in allocation.areas.values()):
            allocation.percent_of_whole = _round1(area_total(plan, training_type))


def upcast_plan(plan: PercentagePlan, schema: CategorySchema = DEFAULT_SCHEMA) -> UpcastResult:
    """Rewrite a legacy plan into the absolute-percentage convention.

    Idempotent: a plan already carrying the current version is returned
    as-is. Totals within LEGACY_MAX_TOTAL_DISCREPANCY of 100 are scaled
    proportionally; anything further off is replaced with an all-zero plan.
    """
    if not needs_upcast(plan):
        total = _grand_total(plan)
        return UpcastResult(
            plan=plan,
            changed=False,
            discarded=False,
            report=MigrationReport(old_total=total, new_total=total),
        )

    migrated = plan.model_copy(deep=True)
    old_total = _grand_total(migrated)
    changes: list[str] = [f"Plan upgraded to version {CURRENT_PLAN_VERSION} (absolute percentages)"]
    warnings: list[str] = []

    _convert_relative_areas(migrated, changes)
    converted_total = _grand_total(migrated)
    discrepancy = abs(converted_total - REQUIRED_TOTAL_PERCENT)

    if discrepancy > LEGACY_MAX_TOTAL_DISCREPANCY:
        logger.warning(
            "Legacy plan discarded: total too far from 100%",
            athlete_id=plan.athlete_id,
            total=round(converted_total, 1),
        )
        replacement = empty_plan(plan.athlete_id, schema)
        replacement.window_days = plan.window_days
        replacement.created_at = plan.created_at
        warnings.append(
            f"Plan summed to {converted_total:.1f}% after conversion; replaced with an empty plan"
        )
        return UpcastResult(
            plan=replacement,
            changed=True,
            discarded=True,
            report=MigrationReport(changes=changes, warnings=warnings, old_total=old_total, new_total=0.0),
        )

    if discrepancy > LEGACY_ADJUST_MIN_DISCREPANCY and converted_total > 0:
        _adjust_to_hundred(migrated, converted_total)
        changes.append(f"Total adjusted from {converted_total:.1f}% to {_grand_total(migrated):.1f}%")

    migrated.version = CURRENT_PLAN_VERSION
    new_total = _grand_total(migrated)

    if old_total > 150:
        warnings.append("Original percentages looked relative (they summed above 150%)")
    if abs(new_total - REQUIRED_TOTAL_PERCENT) > LEGACY_ADJUST_MIN_DISCREPANCY:
        warnings.append(f"Final total is {new_total:.1f}% instead of 100%")

    logger.info(
        "Legacy plan upcast",
        athlete_id=plan.athlete_id,
        old_total=round(old_total, 1),
        new_total=round(new_total, 1),
        change_count=len(changes),
    )

    return UpcastResult(
        plan=migrated,
        changed=True,
        discarded=False,
        report=MigrationReport(changes=changes, warnings=warnings, old_total=old_total, new_total=new_total),
    )


def upcast_plans(
    plans: Mapping[str, PercentagePlan | None],
    schema: CategorySchema = DEFAULT_SCHEMA,
) -> dict[str, PercentagePlan | None]:
    """Upcast every plan in an athlete-keyed mapping; missing plans stay missing."""
    return {
        athlete_id: upcast_plan(plan, schema).plan if plan is not None else None
        for athlete_id, plan in plans.items()
    }
