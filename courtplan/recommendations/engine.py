"""Gap-based recommendation engine.

Compares each athlete's validated percentage plan with the time they
actually logged and emits signed-gap recommendation items at Type, Area
and Exercise level, then folds the non-blocked athletes into a group view.

Athletes with a missing or incomplete plan are blocked, never analysed
against guessed percentages. One athlete's plan problems never stop the
others from being processed.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from statistics import fmean

from loguru import logger

from courtplan.analysis.time_stats import AthleteTimeStats, aggregate_entries
from courtplan.domains.practice_plan.allocation import has_exercise_detail
from courtplan.domains.practice_plan.enums import PlanGranularity
from courtplan.domains.practice_plan.hierarchy import DEFAULT_SCHEMA, CategorySchema
from courtplan.domains.practice_plan.models import PercentagePlan
from courtplan.domains.practice_plan.records import AthleteRef, InProgressEntry, LoggedEntry, TrainingSession
from courtplan.planning.upcast import upcast_plan
from courtplan.planning.validate import can_generate_recommendations
from courtplan.recommendations.coincidences import (
    athlete_highlights,
    detect_coincidences,
    group_recommendation_text,
)
from courtplan.recommendations.models import (
    BasedOn,
    BlockedAthlete,
    DateRange,
    EngineConfig,
    EngineOutput,
    GroupAnalysis,
    IndividualAnalysis,
    IndividualSummary,
    RecItem,
    category_label,
)
from courtplan.recommendations.thresholds import (
    OPTIMAL_GAP,
    PRIORITY_ORDER,
    GapAction,
    RecLevel,
    get_action_from_gap,
    get_priority_from_gap,
)

NO_PLAYERS_MESSAGE = "No athletes were supplied; there is nothing to analyse."
NO_VALID_PLAYERS_MESSAGE = (
    "No athlete has a complete plan. Complete the plans to 100% to generate recommendations."
)

_LEVEL_ORDER = {RecLevel.TIPO: 0, RecLevel.AREA: 1, RecLevel.EJERCICIO: 2}


@dataclass(frozen=True)
class _AthleteRun:
    analysis: IndividualAnalysis
    stats: AthleteTimeStats


def _item_sort_key(item: RecItem) -> tuple:
    return (
        PRIORITY_ORDER[item.priority],
        -abs(item.gap),
        _LEVEL_ORDER[item.level],
        item.parent_type,
        item.parent_area or "",
        item.area,
    )


def _reason(label: str, action: GapAction, current: float, planned: float) -> str:
    if action == GapAction.INCREMENT:
        return f"Train more {label}: {current:.1f}% logged against {planned:.1f}% planned"
    if action == GapAction.REDUCE:
        return f"Train less {label}: {current:.1f}% logged against {planned:.1f}% planned"
    return f"{label} is on target ({current:.1f}% logged, {planned:.1f}% planned)"


def _make_item(
    level: RecLevel,
    parent_type: str,
    parent_area: str | None,
    area: str,
    current: float,
    planned: float,
    exercises: int,
    minutes: float,
) -> RecItem:
    current = round(current, 1)
    planned = round(planned, 1)
    gap = round(planned - current, 1)
    action = get_action_from_gap(gap)
    return RecItem(
        level=level,
        parent_type=parent_type,
        parent_area=parent_area,
        area=area,
        current_percent=current,
        planned_percent=planned,
        gap=gap,
        action=action,
        priority=get_priority_from_gap(gap),
        reason=_reason(category_label(level, parent_type, parent_area, area), action, current, planned),
        based_on=BasedOn(exercises=exercises, minutes=round(minutes, 1)),
    )


def _should_emit(planned: float, current: float, minutes: float) -> bool:
    # Zero-planned categories still surface when time was logged in them
    return abs(planned - current) > OPTIMAL_GAP or minutes > 0


def _plan_items(
    plan: PercentagePlan,
    stats: AthleteTimeStats,
    granularity: PlanGranularity,
    schema: CategorySchema,
) -> list[RecItem]:
    items: list[RecItem] = []
    exercise_detail = granularity == PlanGranularity.EJERCICIO and has_exercise_detail(plan, schema)

    for training_type, allocation in plan.types.items():
        type_name = training_type.value
        planned = allocation.percent_of_whole or 0.0
        type_stats = stats.type_stats(type_name)
        current = type_stats.percent if type_stats else 0.0
        minutes = type_stats.minutes if type_stats else 0.0
        if _should_emit(planned, current, minutes):
            items.append(
                _make_item(
                    RecLevel.TIPO,
                    type_name,
                    None,
                    type_name,
                    current,
                    planned,
                    type_stats.entry_count if type_stats else 0,
                    minutes,
                )
            )

        if granularity == PlanGranularity.TIPO:
            continue

        for area, area_allocation in allocation.areas.items():
            area_name = area.value
            planned_area = area_allocation.percent_of_whole or 0.0
            area_stats = stats.area_stats(type_name, area_name)
            current_area = area_stats.percent if area_stats else 0.0
            area_minutes = area_stats.minutes if area_stats else 0.0
            if _should_emit(planned_area, current_area, area_minutes):
                items.append(
                    _make_item(
                        RecLevel.AREA,
                        type_name,
                        None,
                        area_name,
                        current_area,
                        planned_area,
                        area_stats.entry_count if area_stats else 0,
                        area_minutes,
                    )
                )

            if not exercise_detail or not schema.requires_exercise(training_type):
                continue

            for exercise, exercise_allocation in area_allocation.exercises.items():
                planned_exercise = exercise_allocation.percent_of_whole or 0.0
                exercise_stats = area_stats.exercises.get(exercise) if area_stats else None
                current_exercise = exercise_stats.percent if exercise_stats else 0.0
                exercise_minutes = exercise_stats.minutes if exercise_stats else 0.0
                if _should_emit(planned_exercise, current_exercise, exercise_minutes):
                    items.append(
                        _make_item(
                            RecLevel.EJERCICIO,
                            type_name,
                            area_name,
                            exercise,
                            current_exercise,
                            planned_exercise,
                            exercise_stats.entry_count if exercise_stats else 0,
                            exercise_minutes,
                        )
                    )

    items.sort(key=_item_sort_key)
    return items


def _window_sessions(sessions: Iterable[TrainingSession], config: EngineConfig) -> list[TrainingSession]:
    as_of = config.as_of or date.today()
    start = as_of - timedelta(days=config.window_days)
    return sorted(
        (s for s in sessions if start <= s.performed_on <= as_of),
        key=lambda s: (s.performed_on, s.session_id),
    )


def _analyze(
    athlete: AthleteRef,
    sessions: Iterable[TrainingSession],
    in_progress: Sequence[InProgressEntry],
    plan: PercentagePlan | None,
    config: EngineConfig,
    schema: CategorySchema,
    plan_error: str | None = None,
) -> _AthleteRun | BlockedAthlete:
    if plan_error is not None:
        logger.info("Athlete blocked from recommendations", athlete_id=athlete.id, reason=plan_error)
        return BlockedAthlete(athlete_id=athlete.id, athlete_name=athlete.name, reasons=[plan_error])

    plan_warnings: list[str] = []
    if plan is not None:
        upcast = upcast_plan(plan, schema)
        plan = upcast.plan
        plan_warnings.extend(upcast.report.warnings)

    gate = can_generate_recommendations(plan, schema)
    if not gate.can_generate:
        reasons = [gate.reason or "plan cannot be used"]
        reasons.extend(gate.blocking_errors or [])
        logger.info("Athlete blocked from recommendations", athlete_id=athlete.id, reason=reasons[0])
        return BlockedAthlete(athlete_id=athlete.id, athlete_name=athlete.name, reasons=reasons)

    validation = gate.validation
    windowed = _window_sessions(sessions, config)
    entries: list[LoggedEntry] = [entry for session in windowed for entry in session.entries]
    live_entries: list[LoggedEntry] = []
    if config.include_in_progress:
        live_entries = [e.entry for e in in_progress if e.athlete_id == athlete.id]
    stats = aggregate_entries([*entries, *live_entries], schema)

    items = _plan_items(plan, stats, validation.granularity, schema)
    plan_warnings.extend(validation.warnings)

    date_range = None
    if windowed:
        date_range = DateRange(start=windowed[0].performed_on, end=windowed[-1].performed_on)

    analysis = IndividualAnalysis(
        athlete_id=athlete.id,
        athlete_name=athlete.name,
        items=items,
        summary=IndividualSummary(
            total_exercises=stats.total_count,
            total_minutes=round(stats.total_minutes, 1),
            sessions_analyzed=len(windowed),
            in_progress_entries=len(live_entries),
            plan_granularity=validation.granularity,
            date_range=date_range,
        ),
        plan_warnings=plan_warnings,
    )
    return _AthleteRun(analysis=analysis, stats=stats)


def analyze_athlete(
    athlete: AthleteRef,
    sessions: Iterable[TrainingSession],
    plan: PercentagePlan | None,
    in_progress: Iterable[InProgressEntry] = (),
    config: EngineConfig | None = None,
    schema: CategorySchema = DEFAULT_SCHEMA,
) -> IndividualAnalysis | BlockedAthlete:
    """Analyse one athlete; returns a BlockedAthlete when the plan cannot be used.

    The caller's plan is never modified; legacy plans are upcast on a copy.
    """
    result = _analyze(athlete, sessions, list(in_progress), plan, config or EngineConfig(), schema)
    if isinstance(result, BlockedAthlete):
        return result
    return result.analysis


def _group_items(runs: list[_AthleteRun], schema: CategorySchema) -> tuple[list[RecItem], dict[str, float]]:
    averages: dict[str, float] = {}
    items: list[RecItem] = []

    for training_type in schema.types:
        type_name = training_type.value
        type_stats = [run.stats.type_stats(type_name) for run in runs]
        average = fmean(s.percent if s else 0.0 for s in type_stats)
        averages[type_name] = round(average, 1)

        planned = [
            item.planned_percent
            for run in runs
            for item in run.analysis.items
            if item.level == RecLevel.TIPO and item.parent_type == type_name
        ]
        if not planned:
            continue

        exercises = sum(s.entry_count for s in type_stats if s)
        minutes = sum(s.minutes for s in type_stats if s)
        items.append(
            _make_item(RecLevel.TIPO, type_name, None, type_name, average, fmean(planned), exercises, minutes)
        )

    items.sort(key=_item_sort_key)
    return items, averages


def build_recommendations(
    players: Sequence[AthleteRef],
    historical: Mapping[str, Iterable[TrainingSession]],
    plans: Mapping[str, PercentagePlan | None],
    in_progress: Iterable[InProgressEntry] | None = None,
    config: EngineConfig | None = None,
    schema: CategorySchema = DEFAULT_SCHEMA,
    plan_errors: Mapping[str, str] | None = None,
) -> EngineOutput:
    """Build individual and group recommendations for a set of athletes.

    Args:
        players: Athletes to analyse, in display order
        historical: Persisted sessions keyed by athlete id (windowed here)
        plans: Percentage plans keyed by athlete id; missing or None blocks the athlete
        in_progress: Entries from the session currently running
        config: Window and in-progress settings
        schema: Category hierarchy
        plan_errors: Reasons a stored plan could not be read, keyed by athlete id;
            listed athletes are blocked with that reason

    Returns:
        EngineOutput with per-athlete analyses (non-blocked only) and the group view
    """
    config = config or EngineConfig()
    live = list(in_progress or [])

    if not players:
        return EngineOutput(
            group=GroupAnalysis(analyzed_players=0, total_players=0, message=NO_PLAYERS_MESSAGE)
        )

    runs: list[_AthleteRun] = []
    blocked: list[BlockedAthlete] = []
    for athlete in players:
        result = _analyze(
            athlete,
            historical.get(athlete.id, ()),
            live,
            plans.get(athlete.id),
            config,
            schema,
            (plan_errors or {}).get(athlete.id),
        )
        if isinstance(result, BlockedAthlete):
            blocked.append(result)
        else:
            runs.append(result)

    warnings = [f"{b.athlete_name}: {b.reasons[0]}" for b in blocked]

    if not runs:
        logger.info("No athletes with a complete plan", total_players=len(players))
        return EngineOutput(
            group=GroupAnalysis(
                analyzed_players=0,
                total_players=len(players),
                blocked=blocked,
                warnings=warnings,
                warning_count=len(warnings),
                message=NO_VALID_PLAYERS_MESSAGE,
            )
        )

    analyses = [run.analysis for run in runs]
    group_items, averages = _group_items(runs, schema)
    coincidences = detect_coincidences(analyses)
    highlights = athlete_highlights(analyses)

    message = None
    if blocked:
        message = f"{len(runs)} of {len(players)} athletes analysed; {len(blocked)} blocked by their plan"

    logger.info(
        "Recommendations built",
        analyzed_players=len(runs),
        total_players=len(players),
        blocked=len(blocked),
        coincidences=len(coincidences),
    )

    return EngineOutput(
        individual={analysis.athlete_id: analysis for analysis in analyses},
        group=GroupAnalysis(
            items=group_items,
            analyzed_players=len(runs),
            total_players=len(players),
            averages=averages,
            recommendation=group_recommendation_text(coincidences, highlights, schema),
            strong_coincidences=coincidences,
            highlights=highlights,
            blocked=blocked,
            warnings=warnings,
            warning_count=len(warnings),
            message=message,
        ),
    )
