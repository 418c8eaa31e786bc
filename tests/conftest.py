"""Root conftest for all tests.

Shared plan, entry and session builders. Plans are built from the all-zero
plan so every schema node carries an explicit value.
"""

from collections.abc import Callable
from datetime import date

import pytest
from loguru import logger

from courtplan.domains.practice_plan.documents import empty_plan
from courtplan.domains.practice_plan.enums import TrainingArea, TrainingType
from courtplan.domains.practice_plan.hierarchy import DEFAULT_SCHEMA, CategorySchema
from courtplan.domains.practice_plan.models import PercentagePlan
from courtplan.domains.practice_plan.records import AthleteRef, LoggedEntry, TrainingSession

AS_OF = date(2026, 3, 31)

CANASTO = TrainingType.CANASTO
PELOTEO = TrainingType.PELOTEO
PUNTOS = TrainingType.PUNTOS
BASE = TrainingArea.JUEGO_DE_BASE
RED = TrainingArea.JUEGO_DE_RED
PRIMERAS = TrainingArea.PRIMERAS_PELOTAS
LIBRES = TrainingArea.PUNTOS_LIBRES
PAUTAS = TrainingArea.PUNTOS_CON_PAUTAS


def build_plan(
    athlete_id: str,
    types: dict[TrainingType, float],
    areas: dict[tuple[TrainingType, TrainingArea], float] | None = None,
    exercises: dict[tuple[TrainingType, TrainingArea, str], float] | None = None,
) -> PercentagePlan:
    """All-zero plan with the given values filled in."""
    plan = empty_plan(athlete_id)
    for training_type, value in types.items():
        plan.types[training_type].percent_of_whole = value
    for (training_type, area), value in (areas or {}).items():
        plan.types[training_type].areas[area].percent_of_whole = value
    for (training_type, area, name), value in (exercises or {}).items():
        plan.types[training_type].areas[area].exercises[name].percent_of_whole = value
    return plan


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep loguru output out of test runs."""
    logger.remove()
    yield


@pytest.fixture
def schema() -> CategorySchema:
    return DEFAULT_SCHEMA


@pytest.fixture
def plan_factory() -> Callable[..., PercentagePlan]:
    return build_plan


@pytest.fixture
def type_plan() -> PercentagePlan:
    """Type-level plan: Canasto 50, Peloteo 30, Puntos 20."""
    return build_plan("p-type", {CANASTO: 50, PELOTEO: 30, PUNTOS: 20})


@pytest.fixture
def area_plan() -> PercentagePlan:
    """Area-level plan: Canasto 60 (base 40, red 20), Peloteo 40 (base 40)."""
    return build_plan(
        "p-area",
        {CANASTO: 60, PELOTEO: 40, PUNTOS: 0},
        {(CANASTO, BASE): 40, (CANASTO, RED): 20, (PELOTEO, BASE): 40},
    )


@pytest.fixture
def exercise_plan() -> PercentagePlan:
    """Exercise-level plan with exempt-type area detail."""
    return build_plan(
        "p-exercise",
        {CANASTO: 40, PELOTEO: 40, PUNTOS: 20},
        {(CANASTO, BASE): 40, (PELOTEO, RED): 40, (PUNTOS, LIBRES): 20},
        {
            (CANASTO, BASE, "Estático"): 25,
            (CANASTO, BASE, "Dinámico"): 15,
            (PELOTEO, RED, "Voleas"): 20,
            (PELOTEO, RED, "Subidas"): 10,
            (PELOTEO, RED, "Smash"): 10,
        },
    )


@pytest.fixture
def entry() -> Callable[..., LoggedEntry]:
    def make(training_type: str, area: str, time_text: str, exercise: str | None = None) -> LoggedEntry:
        return LoggedEntry(training_type=training_type, area=area, exercise_name=exercise, time_text=time_text)

    return make


@pytest.fixture
def session() -> Callable[..., TrainingSession]:
    def make(athlete_id: str, entries: list[LoggedEntry], performed_on: date = AS_OF, session_id: str = "s-1") -> TrainingSession:
        return TrainingSession(
            session_id=session_id,
            athlete_id=athlete_id,
            performed_on=performed_on,
            entries=tuple(entries),
        )

    return make


@pytest.fixture
def athletes() -> list[AthleteRef]:
    return [AthleteRef("a1", "Ana"), AthleteRef("a2", "Bruno"), AthleteRef("a3", "Carla")]
