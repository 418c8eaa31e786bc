"""Recommendations module - gap-based training recommendations.

This module provides:
- Gap classification (action and priority) against fixed thresholds
- Per-athlete recommendation items at Type, Area and Exercise level
- Group averages, coincidences and a one-line group suggestion
"""

from courtplan.recommendations.coincidences import (
    athlete_highlights,
    detect_coincidences,
    group_recommendation_text,
)
from courtplan.recommendations.engine import analyze_athlete, build_recommendations
from courtplan.recommendations.models import (
    BlockedAthlete,
    Coincidence,
    EngineConfig,
    EngineOutput,
    GroupAnalysis,
    IndividualAnalysis,
    RecItem,
)
from courtplan.recommendations.thresholds import (
    GapAction,
    Priority,
    RecLevel,
    get_action_from_gap,
    get_priority_from_gap,
)

__all__ = [
    "BlockedAthlete",
    "Coincidence",
    "EngineConfig",
    "EngineOutput",
    "GapAction",
    "GroupAnalysis",
    "IndividualAnalysis",
    "Priority",
    "RecItem",
    "RecLevel",
    "analyze_athlete",
    "athlete_highlights",
    "build_recommendations",
    "detect_coincidences",
    "get_action_from_gap",
    "get_priority_from_gap",
    "group_recommendation_text",
]
