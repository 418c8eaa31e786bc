"""Gap classification thresholds.

Action and priority are derived independently from the same signed gap
(planned% - current%) using separate thresholds. An OPTIMAL gap is always
low priority; a low-priority gap may still call for an action.
"""

from enum import StrEnum

# |gap| <= OPTIMAL_GAP => OPTIMAL
OPTIMAL_GAP = 5.0
# |gap| > MEDIUM_PRIORITY_GAP => medium
MEDIUM_PRIORITY_GAP = 10.0
# |gap| > HIGH_PRIORITY_GAP => high
HIGH_PRIORITY_GAP = 15.0

# Athletes sharing a coincidence before it is high priority
HIGH_PRIORITY_COINCIDENCE_ATHLETES = 3
# Athletes required for a coincidence at all
MIN_COINCIDENCE_ATHLETES = 2


class GapAction(StrEnum):
    INCREMENT = "INCREMENT"
    REDUCE = "REDUCE"
    OPTIMAL = "OPTIMAL"


class Priority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecLevel(StrEnum):
    TIPO = "TIPO"
    AREA = "AREA"
    EJERCICIO = "EJERCICIO"


PRIORITY_ORDER: dict[Priority, int] = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}


def get_action_from_gap(gap: float) -> GapAction:
    """Action for a signed gap; positive gap means under-trained."""
    if abs(gap) <= OPTIMAL_GAP:
        return GapAction.OPTIMAL
    return GapAction.INCREMENT if gap > 0 else GapAction.REDUCE


def get_priority_from_gap(gap: float) -> Priority:
    """Priority from gap magnitude alone."""
    magnitude = abs(gap)
    if magnitude > HIGH_PRIORITY_GAP:
        return Priority.HIGH
    if magnitude > MEDIUM_PRIORITY_GAP:
        return Priority.MEDIUM
    return Priority.LOW
