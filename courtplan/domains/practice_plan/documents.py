"""Lossless read/write of stored plan documents.

Document shape (keys are schema names):

    {
        "athlete_id": "p-1",
        "version": 2,
        "granularity": "AREA",
        "window_days": 30,
        "types": {
            "Canasto": {
                "percent_of_whole": 60,
                "areas": {
                    "Juego de base": {
                        "percent_of_whole": 40,
                        "exercises": {"Estático": {"percent_of_whole": 20}},
                    },
                },
            },
        },
    }

A missing "percent_of_whole" is kept as absent so the validator can
report it; a missing "version" marks the legacy relative convention.
"""

from collections.abc import Mapping
from typing import Any

from loguru import logger
from pydantic import ValidationError

from courtplan.domains.practice_plan.hierarchy import DEFAULT_SCHEMA, CategorySchema
from courtplan.domains.practice_plan.models import (
    AreaAllocation,
    ExerciseAllocation,
    PercentagePlan,
    TypeAllocation,
)
from courtplan.planning.errors import PlanDocumentError
from courtplan.planning.invariants import CURRENT_PLAN_VERSION


def empty_plan(athlete_id: str, schema: CategorySchema = DEFAULT_SCHEMA) -> PercentagePlan:
    """Create an all-zero plan covering every node of the schema."""
    types: dict = {}
    for training_type in schema.types:
        areas = {
            area: AreaAllocation(
                percent_of_whole=0.0,
                exercises={
                    name: ExerciseAllocation(percent_of_whole=0.0)
                    for name in schema.exercises_for(training_type, area)
                },
            )
            for area in schema.areas_for(training_type)
        }
        types[training_type] = TypeAllocation(percent_of_whole=0.0, areas=areas)
    return PercentagePlan(athlete_id=athlete_id, types=types, version=CURRENT_PLAN_VERSION)


def _mapping(value: Any, path: str) -> Mapping:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise PlanDocumentError(f"{path}: expected a mapping, got {type(value).__name__}")
    return value


def _clean_types(raw_types: Mapping, schema: CategorySchema, athlete_id: str) -> dict[str, dict]:
    """Check every key against the schema and drop exempt-Type exercise entries."""
    cleaned: dict[str, dict] = {}
    for type_name, raw_type in raw_types.items():
        training_type = schema.check_type(type_name)
        raw_type = _mapping(raw_type, type_name)
        areas: dict[str, dict] = {}
        for area_name, raw_area in _mapping(raw_type.get("areas"), f"{type_name}.areas").items():
            area = schema.check_area(training_type, area_name)
            raw_area = _mapping(raw_area, f"{type_name} > {area_name}")
            raw_exercises = _mapping(raw_area.get("exercises"), f"{type_name} > {area_name}.exercises")
            if not schema.requires_exercise(training_type):
                if raw_exercises:
                    logger.warning(
                        "Dropping exercise entries under exercise-exempt type",
                        athlete_id=athlete_id,
                        training_type=training_type.value,
                        area=area.value,
                    )
                raw_exercises = {}
            for exercise_name in raw_exercises:
                schema.check_exercise(training_type, area, exercise_name)
            areas[area.value] = {**raw_area, "exercises": dict(raw_exercises)}
        cleaned[training_type.value] = {**raw_type, "areas": areas}
    return cleaned


def plan_from_document(raw: Any, schema: CategorySchema = DEFAULT_SCHEMA) -> PercentagePlan:
    """Read a stored plan document.

    Raises:
        UnknownCategoryError: If a Type/Area/Exercise key is outside the schema
        PlanDocumentError: If the document is otherwise unreadable
    """
    document = _mapping(raw, "plan")
    athlete_id = str(document.get("athlete_id", ""))
    cleaned = {
        **document,
        "types": _clean_types(_mapping(document.get("types"), "types"), schema, athlete_id),
    }
    try:
        return PercentagePlan.model_validate(cleaned)
    except ValidationError as e:
        raise PlanDocumentError(f"Unreadable plan document for athlete {athlete_id!r}: {e}") from e


def plan_to_document(plan: PercentagePlan) -> dict[str, Any]:
    """Write a plan back to its document form (absent values stay absent)."""
    return plan.model_dump(mode="json", exclude_none=True)
