"""Tests for group coincidence detection and the group suggestion text."""

from courtplan.domains.practice_plan.enums import TrainingArea, TrainingType
from courtplan.domains.practice_plan.hierarchy import CategorySchema
from courtplan.recommendations.coincidences import (
    BALANCED_MESSAGE,
    athlete_highlights,
    detect_coincidences,
    group_recommendation_text,
)
from courtplan.recommendations.models import BasedOn, IndividualAnalysis, IndividualSummary, RecItem
from courtplan.recommendations.thresholds import (
    GapAction,
    Priority,
    RecLevel,
    get_action_from_gap,
    get_priority_from_gap,
)


def _rec(gap: float, area: str = "Juego de red", parent_type: str = "Canasto", level: RecLevel = RecLevel.AREA) -> RecItem:
    return RecItem(
        level=level,
        parent_type=parent_type,
        area=area,
        current_percent=max(0.0, 30 - gap),
        planned_percent=30,
        gap=gap,
        action=get_action_from_gap(gap),
        priority=get_priority_from_gap(gap),
        reason="",
        based_on=BasedOn(exercises=1, minutes=10),
    )


def _analysis(athlete_id: str, *items: RecItem) -> IndividualAnalysis:
    return IndividualAnalysis(
        athlete_id=athlete_id,
        athlete_name=athlete_id.upper(),
        items=list(items),
        summary=IndividualSummary(total_exercises=1, total_minutes=10, sessions_analyzed=1, plan_granularity="AREA"),
    )


def test_two_athletes_sharing_a_reduction() -> None:
    analyses = [_analysis("a1", _rec(-12)), _analysis("a2", _rec(-20))]

    coincidences = detect_coincidences(analyses)

    assert len(coincidences) == 1
    assert coincidences[0].player_count == 2
    assert coincidences[0].players == ["A1", "A2"]
    assert coincidences[0].action == GapAction.REDUCE
    assert coincidences[0].average_gap == 16.0
    assert coincidences[0].priority == Priority.MEDIUM
    assert coincidences[0].label == "Canasto > Juego de red"


def test_opposite_action_does_not_merge() -> None:
    """Test that a third athlete needing more of the same Area stays separate."""
    analyses = [_analysis("a1", _rec(-12)), _analysis("a2", _rec(-20)), _analysis("a3", _rec(25))]

    coincidences = detect_coincidences(analyses)

    assert len(coincidences) == 1
    assert coincidences[0].player_count == 2
    assert "A3" not in coincidences[0].players


def test_single_athlete_is_not_a_coincidence() -> None:
    assert detect_coincidences([_analysis("a1", _rec(-30), _rec(30, "Juego de base"))]) == []


def test_optimal_items_never_coincide() -> None:
    assert detect_coincidences([_analysis("a1", _rec(2)), _analysis("a2", _rec(-3))]) == []


def test_same_area_name_under_different_types_merges() -> None:
    analyses = [_analysis("a1", _rec(-12, parent_type="Canasto")), _analysis("a2", _rec(-20, parent_type="Peloteo"))]

    (coincidence,) = detect_coincidences(analyses)

    assert coincidence.player_count == 2
    assert coincidence.players == ["A1", "A2"]
    assert coincidence.area == "Juego de red"
    assert coincidence.parent_types == ["Canasto", "Peloteo"]
    assert coincidence.average_gap == 16.0
    assert coincidence.label == "Juego de red (Canasto, Peloteo)"


def test_athlete_with_area_under_two_types_counts_once() -> None:
    analyses = [
        _analysis("a1", _rec(-12, parent_type="Canasto"), _rec(-20, parent_type="Peloteo")),
        _analysis("a2", _rec(-10, parent_type="Canasto")),
    ]

    (coincidence,) = detect_coincidences(analyses)

    assert coincidence.player_count == 2
    assert coincidence.players == ["A1", "A2"]
    assert coincidence.average_gap == 14.0


def test_merged_reduce_suggestion_names_type_outside_both_owners(schema) -> None:
    analyses = [_analysis("a1", _rec(-12, parent_type="Canasto")), _analysis("a2", _rec(-20, parent_type="Peloteo"))]

    text = group_recommendation_text(detect_coincidences(analyses), [], schema)

    assert text.startswith("Suggestion: Juego de red (Canasto, Peloteo) is over-trained")
    assert "Start the session with Puntos instead" in text


def test_three_athletes_are_high_priority_and_ranked_first() -> None:
    analyses = [
        _analysis("a1", _rec(-8), _rec(40, "Juego de base")),
        _analysis("a2", _rec(-8), _rec(40, "Juego de base")),
        _analysis("a3", _rec(-8)),
    ]

    coincidences = detect_coincidences(analyses)

    assert [(c.area, c.player_count, c.priority) for c in coincidences] == [
        ("Juego de red", 3, Priority.HIGH),
        ("Juego de base", 2, Priority.MEDIUM),
    ]


def test_ties_break_on_average_gap() -> None:
    analyses = [
        _analysis("a1", _rec(-8), _rec(20, "Juego de base")),
        _analysis("a2", _rec(-8), _rec(30, "Juego de base")),
    ]

    assert [c.area for c in detect_coincidences(analyses)] == ["Juego de base", "Juego de red"]


def test_highlights_pick_top_deficits_and_excess() -> None:
    analysis = _analysis(
        "a1",
        _rec(8, "Juego de base"),
        _rec(25, "Juego de red"),
        _rec(12, "Primeras pelotas"),
        _rec(-9, "Juego de base", "Peloteo"),
        _rec(-18, "Juego de red", "Peloteo"),
        _rec(1, "Primeras pelotas", "Peloteo"),
    )

    (highlights,) = athlete_highlights([analysis, _analysis("a2", _rec(1))])

    assert [i.gap for i in highlights.deficits] == [25, 12]
    assert [i.gap for i in highlights.excesses] == [-18]


def test_reduce_suggestion_names_single_alternative() -> None:
    two_types = CategorySchema(
        hierarchy={
            TrainingType.CANASTO: {TrainingArea.JUEGO_DE_RED: ()},
            TrainingType.PELOTEO: {TrainingArea.JUEGO_DE_RED: ()},
        }
    )
    coincidences = detect_coincidences([_analysis("a1", _rec(-12)), _analysis("a2", _rec(-20))])

    text = group_recommendation_text(coincidences, [], two_types)

    assert "Canasto > Juego de red is over-trained" in text
    assert "Start the session with Peloteo instead" in text
    assert "(2 athletes, average gap 16.0%)" in text


def test_reduce_suggestion_is_generic_with_several_alternatives(schema) -> None:
    coincidences = detect_coincidences([_analysis("a1", _rec(-12)), _analysis("a2", _rec(-20))])

    text = group_recommendation_text(coincidences, [], schema)

    assert "a different training type" in text


def test_increment_suggestion_names_category() -> None:
    coincidences = detect_coincidences([_analysis("a1", _rec(12)), _analysis("a2", _rec(20))])

    text = group_recommendation_text(coincidences, [])

    assert text.startswith("Suggestion: start the session with Canasto > Juego de red")


def test_individual_deficits_fallback() -> None:
    analyses = [_analysis("a1", _rec(12)), _analysis("a2", _rec(20, "Juego de base"))]

    text = group_recommendation_text(detect_coincidences(analyses), athlete_highlights(analyses))

    assert text.startswith("Suggestion: alternate exercises according to individual deficits")
    assert "2 athlete(s)" in text


def test_balanced_group() -> None:
    analyses = [_analysis("a1", _rec(2)), _analysis("a2", _rec(-3))]

    assert group_recommendation_text(detect_coincidences(analyses), athlete_highlights(analyses)) == BALANCED_MESSAGE
