"""Free-form duration parsing for logged practice entries.

Coaches type durations by hand. Unrecognised text is not an error: it
counts as 0 minutes so one bad entry never breaks an analysis.
"""

import re

from loguru import logger

_NUMBER = r"(\d+(?:[.,]\d+)?)"
_HOURS = r"(?:h|hr|hrs|hora|horas|hour|hours)"
_MINUTES = r"(?:m|min|mins|minuto|minutos|minute|minutes)"

_PURE_NUMBER = re.compile(rf"^{_NUMBER}$")
_COLON = re.compile(r"^(\d+):([0-5]?\d)$")
_MIXED = re.compile(rf"^{_NUMBER}\s*{_HOURS}\s*{_NUMBER}\s*{_MINUTES}?$")
_HOURS_ONLY = re.compile(rf"^{_NUMBER}\s*{_HOURS}$")
_MINUTES_ONLY = re.compile(rf"^{_NUMBER}\s*{_MINUTES}$")


def _to_float(text: str) -> float:
    return float(text.replace(",", "."))


def parse_duration_minutes(text: str | None) -> float:
    """Parse a duration string into minutes.

    Accepted forms: "45", "12.5", "30m", "30 min", "1h", "1.5 horas",
    "1:30" (H:MM), "1h 30m".

    Returns:
        Minutes as float; 0.0 for empty or unrecognised text
    """
    if not text:
        return 0.0

    clean = text.strip().lower()

    if match := _PURE_NUMBER.match(clean):
        return _to_float(match.group(1))
    if match := _COLON.match(clean):
        return int(match.group(1)) * 60 + int(match.group(2))
    if match := _MIXED.match(clean):
        return _to_float(match.group(1)) * 60 + _to_float(match.group(2))
    if match := _HOURS_ONLY.match(clean):
        return _to_float(match.group(1)) * 60
    if match := _MINUTES_ONLY.match(clean):
        return _to_float(match.group(1))

    logger.debug("Unparseable duration treated as 0 minutes", time_text=text)
    return 0.0
