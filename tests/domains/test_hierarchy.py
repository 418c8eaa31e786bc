"""Tests for the fixed category schema."""

import pytest

from courtplan.domains.practice_plan.enums import TrainingArea, TrainingType
from courtplan.domains.practice_plan.hierarchy import DEFAULT_SCHEMA, normalize_label
from courtplan.planning.errors import UnknownCategoryError


def test_default_schema_shape() -> None:
    assert DEFAULT_SCHEMA.types == (TrainingType.CANASTO, TrainingType.PELOTEO, TrainingType.PUNTOS)
    assert DEFAULT_SCHEMA.exempt_type == TrainingType.PUNTOS
    assert DEFAULT_SCHEMA.exercises_for(TrainingType.CANASTO, TrainingArea.JUEGO_DE_BASE) == ("Estático", "Dinámico")
    assert DEFAULT_SCHEMA.exercises_for(TrainingType.PELOTEO, TrainingArea.JUEGO_DE_BASE) == (
        "Control",
        "Movilidad",
        "Jugadas",
    )
    assert DEFAULT_SCHEMA.exercises_for(TrainingType.PUNTOS, TrainingArea.PUNTOS_LIBRES) == ()


def test_only_exempt_type_skips_exercises() -> None:
    assert DEFAULT_SCHEMA.requires_exercise(TrainingType.CANASTO)
    assert DEFAULT_SCHEMA.requires_exercise(TrainingType.PELOTEO)
    assert not DEFAULT_SCHEMA.requires_exercise(TrainingType.PUNTOS)


def test_unknown_names_fail_fast() -> None:
    """Test that names outside the schema raise instead of being ignored."""
    with pytest.raises(UnknownCategoryError, match="Unknown training type"):
        DEFAULT_SCHEMA.check_type("Físico")
    with pytest.raises(UnknownCategoryError, match="not defined for type"):
        DEFAULT_SCHEMA.check_area(TrainingType.CANASTO, "Puntos libres")
    with pytest.raises(UnknownCategoryError, match="is not defined for"):
        DEFAULT_SCHEMA.check_exercise(TrainingType.CANASTO, TrainingArea.JUEGO_DE_BASE, "Control")


def test_is_valid_combination() -> None:
    assert DEFAULT_SCHEMA.is_valid_combination("Peloteo", "Juego de red", "Smash")
    assert DEFAULT_SCHEMA.is_valid_combination("Puntos", "Puntos con pautas", None)
    assert not DEFAULT_SCHEMA.is_valid_combination("Canasto", "Juego de base", "Jugadas")
    assert not DEFAULT_SCHEMA.is_valid_combination("Físico", "Fuerza", None)


def test_alternative_types() -> None:
    assert DEFAULT_SCHEMA.alternative_types(TrainingType.CANASTO) == [TrainingType.PELOTEO, TrainingType.PUNTOS]


def test_tolerant_label_matching() -> None:
    assert normalize_label("  Juego   de RED ") == "juego de red"
    assert DEFAULT_SCHEMA.match_type("peloteo") == TrainingType.PELOTEO
    assert DEFAULT_SCHEMA.match_area(TrainingType.PELOTEO, "PRIMERAS pelotas") == TrainingArea.PRIMERAS_PELOTAS
    assert DEFAULT_SCHEMA.match_type("Físico") is None
    assert DEFAULT_SCHEMA.match_area(TrainingType.PUNTOS, "Juego de base") is None


def test_exercise_label_matching() -> None:
    base = (TrainingType.CANASTO, TrainingArea.JUEGO_DE_BASE)
    assert DEFAULT_SCHEMA.match_exercise(*base, "estático") == "Estático"
    assert DEFAULT_SCHEMA.match_exercise(TrainingType.PELOTEO, TrainingArea.PRIMERAS_PELOTAS, "saque  + 1") == "Saque + 1"
    assert DEFAULT_SCHEMA.match_exercise(*base, "Voleas") is None
    assert DEFAULT_SCHEMA.match_exercise(TrainingType.PUNTOS, TrainingArea.PUNTOS_LIBRES, "Tie-break") is None
