"""Read-only plan loading with upcast-once-per-read caching.

The loader sits between the persistence collaborator (any PlanSource) and
the recommendation engine. It never writes back: legacy plans are upcast
in memory and the upcast copy is what gets cached.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from loguru import logger

from courtplan.domains.practice_plan.documents import plan_from_document
from courtplan.domains.practice_plan.hierarchy import DEFAULT_SCHEMA, CategorySchema
from courtplan.domains.practice_plan.models import PercentagePlan
from courtplan.persistence.cache import TTLCache
from courtplan.planning.errors import PlanDocumentError
from courtplan.planning.upcast import MigrationReport, upcast_plan

UNREADABLE_PLAN_REASON = "plan document unreadable"


class PlanSource(Protocol):
    """Persistence collaborator supplying raw plan documents."""

    def fetch(self, athlete_id: str) -> Mapping[str, Any] | None: ...


@dataclass(frozen=True)
class LoadedPlan:
    """Result of loading one athlete's plan.

    Attributes:
        athlete_id: Athlete the plan belongs to
        plan: Upcast plan, or None when absent or unreadable
        unreadable_reason: Set when the stored document could not be parsed
        report: Upcast report, None when nothing was loaded
        discarded: The stored legacy plan was replaced with an all-zero plan
    """

    athlete_id: str
    plan: PercentagePlan | None
    unreadable_reason: str | None = None
    report: MigrationReport | None = None
    discarded: bool = False


class PlanLoader:
    """Loads and upcasts plans through a PlanSource, caching results.

    Args:
        source: Read-only document source
        cache: Caller-owned cache; pass None to disable caching
        schema: Category hierarchy documents are checked against
    """

    def __init__(
        self,
        source: PlanSource,
        cache: TTLCache[LoadedPlan] | None = None,
        schema: CategorySchema = DEFAULT_SCHEMA,
    ) -> None:
        self.source = source
        self.cache = cache
        self.schema = schema

    def load(self, athlete_id: str) -> LoadedPlan:
        """Load one athlete's plan.

        Raises:
            UnknownCategoryError: If the stored document names a category outside the schema
        """
        if self.cache is not None:
            cached = self.cache.get(athlete_id)
            if cached is not None:
                return cached

        loaded = self._read(athlete_id)
        if self.cache is not None:
            self.cache.set(athlete_id, loaded)
        return loaded

    def load_many(self, athlete_ids: Iterable[str]) -> dict[str, LoadedPlan]:
        return {athlete_id: self.load(athlete_id) for athlete_id in athlete_ids}

    def plans_for(self, athlete_ids: Iterable[str]) -> dict[str, PercentagePlan | None]:
        """Plans keyed by athlete id, in the shape build_recommendations expects."""
        return {athlete_id: loaded.plan for athlete_id, loaded in self.load_many(athlete_ids).items()}

    @staticmethod
    def unreadable_reasons(loaded: Mapping[str, LoadedPlan]) -> dict[str, str]:
        """Blocked reasons for plans whose stored document could not be read."""
        return {
            athlete_id: result.unreadable_reason
            for athlete_id, result in loaded.items()
            if result.unreadable_reason is not None
        }

    def _read(self, athlete_id: str) -> LoadedPlan:
        raw = self.source.fetch(athlete_id)
        if raw is None:
            return LoadedPlan(athlete_id=athlete_id, plan=None)

        try:
            plan = plan_from_document(raw, self.schema)
        except PlanDocumentError as e:
            logger.warning("Plan document unreadable", athlete_id=athlete_id, error=str(e))
            return LoadedPlan(athlete_id=athlete_id, plan=None, unreadable_reason=UNREADABLE_PLAN_REASON)

        result = upcast_plan(plan, self.schema)
        return LoadedPlan(
            athlete_id=athlete_id,
            plan=result.plan,
            report=result.report,
            discarded=result.discarded,
        )
