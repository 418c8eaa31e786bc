"""Immutable records of practice already performed.

Labels on logged entries are free text from the session store; they are
matched against the category schema during aggregation, not here.
"""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class AthleteRef:
    """Athlete identity as supplied by the roster collaborator."""

    id: str
    name: str


@dataclass(frozen=True)
class LoggedEntry:
    """One logged exercise.

    Attributes:
        training_type: Type label (e.g., "Canasto")
        area: Area label (e.g., "Juego de red")
        exercise_name: Exercise label; may be empty for the exercise-exempt Type
        time_text: Free-form duration ("20", "20m", "1h", "1:15")
        intensity: Perceived intensity, 1-10
    """

    training_type: str
    area: str
    exercise_name: str | None
    time_text: str
    intensity: int = 5


@dataclass(frozen=True)
class TrainingSession:
    """A persisted practice session for one athlete."""

    session_id: str
    athlete_id: str
    performed_on: date
    entries: tuple[LoggedEntry, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class InProgressEntry:
    """An entry from the session currently being run, not yet persisted."""

    athlete_id: str
    entry: LoggedEntry
