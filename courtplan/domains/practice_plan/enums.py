"""Canonical enums for the practice-plan hierarchy.

All enums are string-based so plan documents keyed by them serialize
to and from JSON without translation.
"""

from enum import StrEnum


# -----------------------------
# Training Types
# -----------------------------
class TrainingType(StrEnum):
    """Top-level training category."""

    CANASTO = "Canasto"
    PELOTEO = "Peloteo"
    PUNTOS = "Puntos"


# -----------------------------
# Training Areas
# -----------------------------
class TrainingArea(StrEnum):
    """Sub-category within a training type."""

    JUEGO_DE_BASE = "Juego de base"
    JUEGO_DE_RED = "Juego de red"
    PRIMERAS_PELOTAS = "Primeras pelotas"
    PUNTOS_LIBRES = "Puntos libres"
    PUNTOS_CON_PAUTAS = "Puntos con pautas"


# -----------------------------
# Plan Granularity
# -----------------------------
class PlanGranularity(StrEnum):
    """Deepest hierarchy level at which a plan carries real data."""

    TIPO = "TIPO"
    AREA = "AREA"
    EJERCICIO = "EJERCICIO"


# -----------------------------
# Plan Status
# -----------------------------
class PlanStatus(StrEnum):
    """Coarse plan state for display and gating."""

    EMPTY = "EMPTY"
    INVALID = "INVALID"
    INCOMPLETE = "INCOMPLETE"
    COMPLETE = "COMPLETE"
