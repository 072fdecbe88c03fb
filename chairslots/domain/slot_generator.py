"""
Generation of candidate appointment slots for a single working day.
"""

import logging
from typing import List

from .models import MINUTES_PER_DAY, Slot, TimeInput, TimeOfDay
from .time_parsing import parse_time_of_day

logger = logging.getLogger(__name__)

# Upper bound on slots per day; keeps degenerate input (e.g. 1-minute slots) finite.
MAX_SLOTS = 50


def coerce_time(value: TimeInput) -> TimeOfDay | None:
    """Accept either a TimeOfDay or text; None when text does not parse."""
    if isinstance(value, TimeOfDay):
        return value
    return parse_time_of_day(value)


def generate_slots(
    work_start: TimeInput,
    work_end: TimeInput,
    duration_minutes: int,
    max_slots: int = MAX_SLOTS,
    diagnostics: logging.Logger | None = None,
) -> List[Slot]:
    """
    Split working hours into consecutive slots of ``duration_minutes``.

    An end at or before the start is taken to be on the next day, so
    "22:00" to "02:00" yields slots across midnight with wrapped clock
    values. Slots that would run past the end are not emitted.

    Returns:
        Slots in chronological order; empty (never raises) when the
        duration is not positive or either endpoint fails to parse.
    """
    log = diagnostics or logger

    if duration_minutes is None or duration_minutes <= 0:
        log.warning("Invalid slot duration: %r", duration_minutes)
        return []

    start = coerce_time(work_start)
    end = coerce_time(work_end)
    if start is None or end is None:
        log.warning("Failed to parse work times: %r - %r", work_start, work_end)
        return []

    current = start.total_minutes
    effective_end = end.total_minutes
    if effective_end <= current:
        effective_end += MINUTES_PER_DAY

    bound = max(1, max_slots)
    slots: List[Slot] = []

    while current + duration_minutes <= effective_end and len(slots) < bound:
        slots.append(
            Slot(
                start=TimeOfDay.from_minutes(current),
                end=TimeOfDay.from_minutes(current + duration_minutes),
            )
        )
        current += duration_minutes

    if len(slots) >= bound and current + duration_minutes <= effective_end:
        log.warning("Hit maximum slot limit of %d, remaining range dropped", bound)

    log.debug("Generated %d slots from %s to %s every %d min", len(slots), start, end, duration_minutes)
    return slots
