"""Clock-time parsing and formatting for appointment times."""

from __future__ import annotations

import math
import re

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2})(?::(\d{2}))?\s*([AaPp]\.?[Mm]\.?)?\s*$")


def parse_time_to_minutes(text: str) -> int:
    """Convert ``"9:00 AM"``, ``"9 PM"`` or ``"14:30"`` to minutes after midnight.

    12 AM is midnight and 12 PM is noon. Raises ``ValueError`` for anything
    that is not a recognizable clock time.
    """
    if not isinstance(text, str):
        raise ValueError(f"Time must be a string, got {type(text).__name__}.")
    match = _TIME_PATTERN.match(text)
    if not match:
        raise ValueError(f"Unrecognized time '{text}'.")

    hours = int(match.group(1))
    minutes = int(match.group(2) or 0)
    period = match.group(3)
    if minutes > 59:
        raise ValueError(f"Minutes out of range in '{text}'.")

    if period:
        if not 1 <= hours <= 12:
            raise ValueError(f"Hour out of range for 12-hour time '{text}'.")
        is_pm = period[0].upper() == "P"
        hours = hours % 12 + (12 if is_pm else 0)
    elif hours > 23:
        raise ValueError(f"Hour out of range in '{text}'.")

    return hours * 60 + minutes


def time_sort_key(text: str) -> tuple[int, float]:
    """Sort key that puts unparseable times after every parseable one."""
    try:
        return (0, parse_time_to_minutes(text))
    except ValueError:
        return (1, math.inf)


def format_minutes(minutes: float) -> str:
    """Render minutes after midnight as ``"h:mm AM"``, wrapping past midnight."""
    total = int(round(minutes)) % MINUTES_PER_DAY
    hours, mins = divmod(total, 60)
    period = "AM" if hours < 12 else "PM"
    display_hour = hours % 12 or 12
    return f"{display_hour}:{mins:02d} {period}"
