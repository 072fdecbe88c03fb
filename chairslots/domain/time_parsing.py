"""
Lenient parsing of the time, duration and weekday text found in schedule data.

Time parsing fails closed (returns ``None``), duration parsing fails open
(returns a fallback) because the duration drives a generation loop.
"""

import re

from .models import TimeOfDay

DEFAULT_DURATION_MINUTES = 30

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_PM_PATTERN = re.compile(r"pm", re.IGNORECASE)
_AM_PATTERN = re.compile(r"am", re.IGNORECASE)
_NOT_TIME_CHARS = re.compile(r"[^\d:]")
_DIGITS = re.compile(r"\d+")

# Longest digit run read as a time component or a duration
MAX_DIGITS = 6


def parse_time_of_day(text: str) -> TimeOfDay | None:
    """
    Parse a time of day from loosely formatted text.

    Accepts 24-hour ("14:30", "9", "09:00:00") and 12-hour ("2:30 PM",
    "12am") forms; characters other than digits and colons are ignored once
    AM/PM markers have been detected. Seconds, if present, are dropped.

    Returns:
        The parsed TimeOfDay, or None when the text is empty, non-numeric
        or out of range. Out-of-range values are rejected, never clamped.
    """
    if not isinstance(text, str) or not text.strip():
        return None

    is_pm = bool(_PM_PATTERN.search(text))
    is_am = bool(_AM_PATTERN.search(text))

    cleaned = _NOT_TIME_CHARS.sub("", text)
    parts = cleaned.split(":")
    hours_str = parts[0]
    minutes_str = parts[1] if len(parts) > 1 else ""

    if not hours_str:
        return None

    if len(hours_str) > MAX_DIGITS or len(minutes_str) > MAX_DIGITS:
        return None

    hours = int(hours_str)
    minutes = int(minutes_str) if minutes_str else 0

    if is_pm and hours != 12:
        hours += 12
    elif is_am and hours == 12:
        hours = 0

    if not 0 <= hours <= 23 or not 0 <= minutes <= 59:
        return None

    return TimeOfDay(hours=hours, minutes=minutes)


def parse_duration_minutes(text: str, default: int = DEFAULT_DURATION_MINUTES) -> int:
    """
    Extract a slot duration from text such as "30", "45 min" or "60 minutes".

    The first run of digits wins. Missing digits, a run longer than
    MAX_DIGITS or a non-positive value yield ``default``.
    """
    if text is None:
        return default

    match = _DIGITS.search(str(text))
    if not match:
        return default

    if len(match.group()) > MAX_DIGITS:
        return default

    value = int(match.group())
    return value if value > 0 else default


def weekday_index(name: str) -> int | None:
    """Map a weekday name to 0 (Monday) .. 6 (Sunday); None if unknown."""
    if not isinstance(name, str):
        return None
    normalized = name.strip().capitalize()
    try:
        return WEEKDAYS.index(normalized)
    except ValueError:
        return None
