from __future__ import annotations

import re

from studio_desk.application.exceptions import TimeParseError
from studio_desk.domain.entities.time_slot import TimeOfDay

RANGE_DELIMITER = "-"

_TWELVE_HOUR = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*([ap])\.?m\.?$", re.IGNORECASE)
_TWENTY_FOUR_HOUR = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_time_token(token: str) -> TimeOfDay:
    """
    Parse "2:00 PM", "2:00pm", "2 pm" or 24-hour "14:00".

    12 AM is midnight (0:00) and 12 PM is noon (12:00).
    Raises TimeParseError for anything else.
    """
    text = (token or "").strip()
    if not text:
        raise TimeParseError(token, "empty time")

    match = _TWELVE_HOUR.match(text)
    if match:
        hour = int(match.group(1))
        minute = int(match.group(2) or 0)
        meridiem = match.group(3).lower()
        if not 1 <= hour <= 12:
            raise TimeParseError(token, "hour must be 1-12 with am/pm")
        if minute > 59:
            raise TimeParseError(token, "minutes must be 00-59")
        if meridiem == "a":
            hour = 0 if hour == 12 else hour
        elif hour != 12:
            hour += 12
        return TimeOfDay(hours=hour, minutes=minute)

    match = _TWENTY_FOUR_HOUR.match(text)
    if match:
        hour = int(match.group(1))
        minute = int(match.group(2))
        if hour > 23 or minute > 59:
            raise TimeParseError(token, "out of range for a 24-hour time")
        return TimeOfDay(hours=hour, minutes=minute)

    raise TimeParseError(token, "expected 'H:MM AM/PM' or 'HH:MM'")


def split_range(time_spec: str) -> tuple[str, str] | None:
    """Split "9:00 AM - 12:00 PM" into its endpoints, or None for a single time."""
    if RANGE_DELIMITER not in time_spec:
        return None
    start, _, end = time_spec.partition(RANGE_DELIMITER)
    return start.strip(), end.strip()
