"""Group coincidence detection and group suggestion text.

A coincidence is a category + corrective action shared by at least
MIN_COINCIDENCE_ATHLETES athletes. The top-ranked coincidence drives the
one-line suggestion a coach sees for the whole group.
"""

from collections.abc import Iterable
from statistics import fmean

from courtplan.domains.practice_plan.hierarchy import DEFAULT_SCHEMA, CategorySchema
from courtplan.recommendations.models import AthleteHighlights, Coincidence, IndividualAnalysis, RecItem
from courtplan.recommendations.thresholds import (
    HIGH_PRIORITY_COINCIDENCE_ATHLETES,
    MIN_COINCIDENCE_ATHLETES,
    PRIORITY_ORDER,
    GapAction,
    Priority,
)

BALANCED_MESSAGE = "The group is balanced. Keep variety in the exercises."
GENERIC_ALTERNATIVE = "a different training type"

_CoincidenceKey = tuple[str, str, str]


def _key(item: RecItem) -> _CoincidenceKey:
    # Same-named categories under different Types share a key
    return (item.level.value, item.area, item.action.value)


def detect_coincidences(analyses: Iterable[IndividualAnalysis]) -> list[Coincidence]:
    """Find categories where several athletes need the same correction.

    OPTIMAL items never participate. An athlete with the same Area name
    under two Types counts once; the mean |gap| covers all their items.
    Ranking: athlete count descending, then mean |gap| descending, then
    category path for a stable order.
    """
    grouped: dict[_CoincidenceKey, dict[str, tuple[str, list[RecItem]]]] = {}
    for analysis in analyses:
        for item in analysis.items:
            if item.action == GapAction.OPTIMAL:
                continue
            members = grouped.setdefault(_key(item), {})
            members.setdefault(analysis.athlete_id, (analysis.athlete_name, []))[1].append(item)

    coincidences: list[Coincidence] = []
    for members in grouped.values():
        if len(members) < MIN_COINCIDENCE_ATHLETES:
            continue
        items = [item for _, athlete_items in members.values() for item in athlete_items]
        first = items[0]
        coincidences.append(
            Coincidence(
                level=first.level,
                parent_type=first.parent_type,
                parent_types=sorted({item.parent_type for item in items}),
                parent_area=first.parent_area,
                area=first.area,
                action=first.action,
                player_count=len(members),
                players=[name for name, _ in members.values()],
                average_gap=round(fmean(abs(item.gap) for item in items), 1),
                priority=(
                    Priority.HIGH
                    if len(members) >= HIGH_PRIORITY_COINCIDENCE_ATHLETES
                    else Priority.MEDIUM
                ),
            )
        )

    coincidences.sort(
        key=lambda c: (-c.player_count, -c.average_gap, c.level.value, c.area, c.action.value)
    )
    return coincidences


def athlete_highlights(analyses: Iterable[IndividualAnalysis]) -> list[AthleteHighlights]:
    """Top two deficits and top excess per athlete; athletes with neither are left out."""
    highlights: list[AthleteHighlights] = []
    for analysis in analyses:
        deficits = sorted(
            (i for i in analysis.items if i.action == GapAction.INCREMENT),
            key=lambda i: (-i.gap, PRIORITY_ORDER[i.priority], i.label),
        )[:2]
        excesses = sorted(
            (i for i in analysis.items if i.action == GapAction.REDUCE),
            key=lambda i: (i.gap, PRIORITY_ORDER[i.priority], i.label),
        )[:1]
        if deficits or excesses:
            highlights.append(
                AthleteHighlights(
                    athlete_id=analysis.athlete_id,
                    athlete_name=analysis.athlete_name,
                    deficits=deficits,
                    excesses=excesses,
                )
            )
    return highlights


def _alternative_type(parent_types: list[str], schema: CategorySchema) -> str:
    """The single Type outside parent_types, or a generic phrase otherwise."""
    alternatives = [t for t in schema.types if t.value not in parent_types]
    if len(alternatives) == 1:
        return alternatives[0].value
    return GENERIC_ALTERNATIVE


def group_recommendation_text(
    coincidences: list[Coincidence],
    highlights: list[AthleteHighlights],
    schema: CategorySchema = DEFAULT_SCHEMA,
) -> str:
    """One-line coaching suggestion for the whole group."""
    if coincidences:
        top = coincidences[0]
        if top.action == GapAction.REDUCE:
            alternative = _alternative_type(top.parent_types or [top.parent_type], schema)
            return (
                f"Suggestion: {top.label} is over-trained. "
                f"Start the session with {alternative} instead to rebalance training "
                f"({top.player_count} athletes, average gap {top.average_gap}%)."
            )
        return (
            f"Suggestion: start the session with {top.label} to close the gap "
            f"({top.player_count} athletes under-trained, average gap {top.average_gap}%)."
        )

    unbalanced = [h for h in highlights if h.deficits or h.excesses]
    if unbalanced:
        return (
            "Suggestion: alternate exercises according to individual deficits. "
            f"{len(unbalanced)} athlete(s) need specific work."
        )

    return BALANCED_MESSAGE
