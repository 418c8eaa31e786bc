"""Recommendation engine inputs and outputs.

Outputs are pydantic models so the presentation layer can serialize them
directly (model_dump(mode="json")).
"""

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from courtplan.domains.practice_plan.enums import PlanGranularity
from courtplan.planning.invariants import DEFAULT_WINDOW_DAYS
from courtplan.recommendations.thresholds import GapAction, Priority, RecLevel

if TYPE_CHECKING:
    from courtplan.config.settings import Settings


def category_label(level: RecLevel, parent_type: str, parent_area: str | None, area: str) -> str:
    """Human-readable path of a recommendation category."""
    if level == RecLevel.TIPO:
        return area
    if level == RecLevel.AREA:
        return f"{parent_type} > {area}"
    return f"{parent_type} > {parent_area} > {area}"


@dataclass(frozen=True)
class EngineConfig:
    """Per-call engine configuration.

    Attributes:
        window_days: Days of historical sessions to include, counted back from as_of
        include_in_progress: Include entries from the session currently running
        as_of: Window end date; today when None
    """

    window_days: int = DEFAULT_WINDOW_DAYS
    include_in_progress: bool = True
    as_of: date | None = None

    @classmethod
    def from_settings(cls, settings: "Settings", as_of: date | None = None) -> "EngineConfig":
        return cls(
            window_days=settings.analysis_window_days,
            include_in_progress=settings.include_in_progress,
            as_of=as_of,
        )


class BasedOn(BaseModel):
    exercises: int
    minutes: float


class RecItem(BaseModel):
    """One signed-gap recommendation.

    gap = planned_percent - current_percent; positive means under-trained.
    For EJERCICIO items `area` holds the exercise and `parent_area` its Area.
    """

    level: RecLevel
    parent_type: str
    parent_area: str | None = None
    area: str
    current_percent: float
    planned_percent: float
    gap: float
    action: GapAction
    priority: Priority
    reason: str
    based_on: BasedOn

    @property
    def label(self) -> str:
        return category_label(self.level, self.parent_type, self.parent_area, self.area)


class DateRange(BaseModel):
    start: date
    end: date


class IndividualSummary(BaseModel):
    total_exercises: int
    total_minutes: float
    sessions_analyzed: int
    in_progress_entries: int = 0
    plan_used: str = "real"
    plan_granularity: PlanGranularity
    date_range: DateRange | None = None


class IndividualAnalysis(BaseModel):
    athlete_id: str
    athlete_name: str
    items: list[RecItem] = Field(default_factory=list)
    summary: IndividualSummary
    plan_warnings: list[str] = Field(default_factory=list)


class BlockedAthlete(BaseModel):
    athlete_id: str
    athlete_name: str
    reasons: list[str]


class Coincidence(BaseModel):
    """A (level, category name, action) shared by several athletes.

    Attributes:
        parent_type: Owning Type of the first member, kept for display
        parent_types: Every Type the members' items sit under, sorted
    """

    level: RecLevel
    parent_type: str
    parent_types: list[str] = Field(default_factory=list)
    parent_area: str | None = None
    area: str
    action: GapAction
    player_count: int
    players: list[str]
    average_gap: float
    priority: Priority

    @property
    def label(self) -> str:
        if len(self.parent_types) > 1:
            return f"{self.area} ({', '.join(self.parent_types)})"
        return category_label(self.level, self.parent_type, self.parent_area, self.area)


class AthleteHighlights(BaseModel):
    """Largest individual deficits (up to 2) and excess (up to 1) for one athlete."""

    athlete_id: str
    athlete_name: str
    deficits: list[RecItem] = Field(default_factory=list)
    excesses: list[RecItem] = Field(default_factory=list)


class GroupAnalysis(BaseModel):
    items: list[RecItem] = Field(default_factory=list)
    analyzed_players: int
    total_players: int
    averages: dict[str, float] = Field(default_factory=dict)
    recommendation: str = ""
    strong_coincidences: list[Coincidence] = Field(default_factory=list)
    highlights: list[AthleteHighlights] = Field(default_factory=list)
    blocked: list[BlockedAthlete] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    warning_count: int = 0
    message: str | None = None


class EngineOutput(BaseModel):
    individual: dict[str, IndividualAnalysis] = Field(default_factory=dict)
    group: GroupAnalysis
