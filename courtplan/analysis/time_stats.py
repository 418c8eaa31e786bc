"""Logged practice time aggregation.

Turns an athlete's logged entries into minute totals and percentages per
Type, Area and Exercise. Every percentage is measured against the total
minutes across ALL entries, matching the plan's percent-of-whole
convention: Type percentages sum to 100 and each Area percentage is
directly comparable with the Area's planned percentage.

Pure function of its input; entries are expected to be windowed already.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from courtplan.analysis.durations import parse_duration_minutes
from courtplan.domains.practice_plan.hierarchy import DEFAULT_SCHEMA, CategorySchema
from courtplan.domains.practice_plan.records import LoggedEntry

NO_EXERCISE_LABEL = "Sin nombre"


@dataclass
class ExerciseTimeStats:
    minutes: float = 0.0
    percent: float = 0.0
    entry_count: int = 0


@dataclass
class AreaTimeStats:
    """Time logged in one Area of one Type.

    Attributes:
        percent: Percent of all logged minutes
        percent_within_type: Percent of the owning Type's minutes (display only)
    """

    minutes: float = 0.0
    percent: float = 0.0
    percent_within_type: float = 0.0
    entry_count: int = 0
    exercises: dict[str, ExerciseTimeStats] = field(default_factory=dict)


@dataclass
class TypeTimeStats:
    minutes: float = 0.0
    percent: float = 0.0
    entry_count: int = 0
    areas: dict[str, AreaTimeStats] = field(default_factory=dict)


@dataclass
class AthleteTimeStats:
    """Derived, never persisted.

    Attributes:
        total_minutes: Sum of parsed minutes across all entries
        total_count: Number of entries, including zero-minute ones
        types: Nested Type -> Area -> Exercise breakdown
        areas: Flat per-Area totals across Types
    """

    total_minutes: float = 0.0
    total_count: int = 0
    types: dict[str, TypeTimeStats] = field(default_factory=dict)
    areas: dict[str, ExerciseTimeStats] = field(default_factory=dict)

    def type_stats(self, training_type: str) -> TypeTimeStats | None:
        return self.types.get(training_type)

    def area_stats(self, training_type: str, area: str) -> AreaTimeStats | None:
        type_stats = self.types.get(training_type)
        return type_stats.areas.get(area) if type_stats else None

    def exercise_stats(self, training_type: str, area: str, exercise: str) -> ExerciseTimeStats | None:
        area_stats = self.area_stats(training_type, area)
        return area_stats.exercises.get(exercise) if area_stats else None


def _labels(entry: LoggedEntry, schema: CategorySchema) -> tuple[str, str, str]:
    """Canonical labels where the schema knows them, trimmed raw text otherwise."""
    type_label = entry.training_type.strip()
    area_label = entry.area.strip()
    exercise_label = (entry.exercise_name or "").strip() or NO_EXERCISE_LABEL
    training_type = schema.match_type(type_label)
    if training_type is not None:
        type_label = training_type.value
        area = schema.match_area(training_type, area_label)
        if area is not None:
            area_label = area.value
            exercise = schema.match_exercise(training_type, area, exercise_label)
            if exercise is not None:
                exercise_label = exercise
    return type_label, area_label, exercise_label


def _percent(minutes: float, total: float) -> float:
    return minutes / total * 100 if total > 0 else 0.0


def aggregate_entries(
    entries: Iterable[LoggedEntry],
    schema: CategorySchema = DEFAULT_SCHEMA,
) -> AthleteTimeStats:
    """Aggregate logged entries into per-category minutes and percentages.

    Zero-minute entries (unparseable durations) count toward total_count and
    the per-category entry counts but add nothing to minute sums.
    """
    stats = AthleteTimeStats()

    for entry in entries:
        minutes = parse_duration_minutes(entry.time_text)
        type_label, area_label, exercise_label = _labels(entry, schema)

        stats.total_count += 1
        stats.total_minutes += minutes

        type_stats = stats.types.setdefault(type_label, TypeTimeStats())
        type_stats.minutes += minutes
        type_stats.entry_count += 1

        area_stats = type_stats.areas.setdefault(area_label, AreaTimeStats())
        area_stats.minutes += minutes
        area_stats.entry_count += 1

        exercise_stats = area_stats.exercises.setdefault(exercise_label, ExerciseTimeStats())
        exercise_stats.minutes += minutes
        exercise_stats.entry_count += 1

        flat_area = stats.areas.setdefault(area_label, ExerciseTimeStats())
        flat_area.minutes += minutes
        flat_area.entry_count += 1

    total = stats.total_minutes
    for type_stats in stats.types.values():
        type_stats.percent = _percent(type_stats.minutes, total)
        for area_stats in type_stats.areas.values():
            area_stats.percent = _percent(area_stats.minutes, total)
            area_stats.percent_within_type = _percent(area_stats.minutes, type_stats.minutes)
            for exercise_stats in area_stats.exercises.values():
                exercise_stats.percent = _percent(exercise_stats.minutes, total)
    for flat_area in stats.areas.values():
        flat_area.percent = _percent(flat_area.minutes, total)

    return stats
