"""Fixed category hierarchy: Types -> Areas -> Exercises.

The hierarchy is configuration owned outside the planning core. It is
passed around as an immutable CategorySchema; DEFAULT_SCHEMA is the
tennis-academy hierarchy the academy runs today.
"""

from dataclasses import dataclass

from courtplan.domains.practice_plan.enums import TrainingArea, TrainingType
from courtplan.planning.errors import UnknownCategoryError

_BASE_BASKET = ("Estático", "Dinámico")
_BASE_LIVE = ("Control", "Movilidad", "Jugadas")
_NET = ("Voleas", "Subidas", "Smash")
_FIRST_BALLS = ("Saque", "Devolución", "Saque + 1", "Devolución + 1")


def normalize_label(text: str) -> str:
    """Case- and whitespace-insensitive form of a category label."""
    return " ".join(text.split()).casefold()


@dataclass(frozen=True)
class CategorySchema:
    """Immutable category hierarchy.

    Attributes:
        hierarchy: Areas per Type, each with its closed tuple of exercise names
        exempt_type: The one Type whose Areas never require Exercise detail
    """

    hierarchy: dict[TrainingType, dict[TrainingArea, tuple[str, ...]]]
    exempt_type: TrainingType | None = None

    @property
    def types(self) -> tuple[TrainingType, ...]:
        return tuple(self.hierarchy)

    def check_type(self, value: str) -> TrainingType:
        """Resolve a Type name, failing fast on names outside the schema."""
        try:
            training_type = TrainingType(value)
        except ValueError as e:
            raise UnknownCategoryError(f"Unknown training type: {value!r}") from e
        if training_type not in self.hierarchy:
            raise UnknownCategoryError(f"Training type not in schema: {value!r}")
        return training_type

    def check_area(self, training_type: TrainingType, value: str) -> TrainingArea:
        """Resolve an Area name within a Type, failing fast on unknown names."""
        try:
            area = TrainingArea(value)
        except ValueError as e:
            raise UnknownCategoryError(f"Unknown training area: {value!r}") from e
        if area not in self.hierarchy[self.check_type(training_type)]:
            raise UnknownCategoryError(f"Area {value!r} is not defined for type {training_type!r}")
        return area

    def check_exercise(self, training_type: TrainingType, area: TrainingArea, name: str) -> str:
        """Resolve an Exercise name within a Type+Area, failing fast on unknown names."""
        if name not in self.exercises_for(training_type, area):
            raise UnknownCategoryError(
                f"Exercise {name!r} is not defined for {training_type} > {area}"
            )
        return name

    def areas_for(self, training_type: TrainingType) -> tuple[TrainingArea, ...]:
        return tuple(self.hierarchy[self.check_type(training_type)])

    def exercises_for(self, training_type: TrainingType, area: TrainingArea) -> tuple[str, ...]:
        return self.hierarchy[self.check_type(training_type)].get(self.check_area(training_type, area), ())

    def requires_exercise(self, training_type: TrainingType) -> bool:
        return self.check_type(training_type) != self.exempt_type

    def is_valid_combination(self, training_type: str, area: str, exercise: str | None) -> bool:
        """Check a logged Type/Area/Exercise triple against the schema."""
        try:
            resolved_type = self.check_type(training_type)
            resolved_area = self.check_area(resolved_type, area)
        except UnknownCategoryError:
            return False
        if not self.requires_exercise(resolved_type):
            return True
        return exercise in self.exercises_for(resolved_type, resolved_area)

    def alternative_types(self, training_type: TrainingType) -> list[TrainingType]:
        """All schema Types other than the given one, in schema order."""
        return [t for t in self.hierarchy if t != training_type]

    def match_type(self, label: str) -> TrainingType | None:
        """Tolerant lookup used for free-text labels on logged entries."""
        wanted = normalize_label(label)
        for training_type in self.hierarchy:
            if normalize_label(training_type.value) == wanted:
                return training_type
        return None

    def match_area(self, training_type: TrainingType, label: str) -> TrainingArea | None:
        wanted = normalize_label(label)
        for area in self.hierarchy[training_type]:
            if normalize_label(area.value) == wanted:
                return area
        return None

    def match_exercise(self, training_type: TrainingType, area: TrainingArea, label: str) -> str | None:
        wanted = normalize_label(label)
        for exercise in self.hierarchy[training_type].get(area, ()):
            if normalize_label(exercise) == wanted:
                return exercise
        return None


DEFAULT_SCHEMA = CategorySchema(
    hierarchy={
        TrainingType.CANASTO: {
            TrainingArea.JUEGO_DE_BASE: _BASE_BASKET,
            TrainingArea.JUEGO_DE_RED: _NET,
            TrainingArea.PRIMERAS_PELOTAS: _FIRST_BALLS,
        },
        TrainingType.PELOTEO: {
            TrainingArea.JUEGO_DE_BASE: _BASE_LIVE,
            TrainingArea.JUEGO_DE_RED: _NET,
            TrainingArea.PRIMERAS_PELOTAS: _FIRST_BALLS,
        },
        TrainingType.PUNTOS: {
            TrainingArea.PUNTOS_LIBRES: (),
            TrainingArea.PUNTOS_CON_PAUTAS: (),
        },
    },
    exempt_type=TrainingType.PUNTOS,
)
