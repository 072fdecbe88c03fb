"""
Conversion of raw clinic backend records into domain models.

Shared by the REST client and the mock client so both produce identical
domain objects from identical JSON.
"""

import logging
from datetime import date
from typing import Any, Iterable, List, Mapping

import pendulum
from pendulum import Date, DateTime

from ..domain.models import CommittedInterval, IntervalKind
from ..domain.time_parsing import parse_time_of_day

logger = logging.getLogger(__name__)


def parse_record_date(value: Any) -> date | None:
    """
    Extract the calendar date from a date or ISO timestamp string.

    "2025-01-10" and "2025-01-10T00:00:00.000Z" both give 2025-01-10.
    """
    if not value:
        return None

    try:
        parsed = pendulum.parse(str(value))
    except (ValueError, TypeError):
        return None

    if isinstance(parsed, DateTime):
        return parsed.date()
    if isinstance(parsed, Date):
        return parsed
    return None


def _optional_id(value: Any) -> str | None:
    return None if value is None else str(value)


def appointment_from_record(record: Mapping[str, Any]) -> CommittedInterval | None:
    """
    Build a committed interval from an appointment record.

    Returns None (after logging) when the date or times are unusable.
    """
    day = parse_record_date(record.get("date"))
    start = parse_time_of_day(record.get("time_from") or "")
    end = parse_time_of_day(record.get("time_to") or "")

    if day is None or start is None or end is None:
        logger.warning("Skipping appointment with unusable date/time: %r", dict(record))
        return None

    return CommittedInterval(
        date=day,
        start=start,
        end=end,
        owner_id=_optional_id(record.get("patient_id")),
        kind=IntervalKind.APPOINTMENT,
        interval_id=_optional_id(record.get("appointment_id")),
    )


def blocked_date_from_record(record: Mapping[str, Any]) -> CommittedInterval | None:
    """
    Build a committed interval from a blocked-date record.

    Missing times mean the whole day is blocked. Times that are present but
    unparsable also block the whole day rather than silently freeing it.
    """
    day = parse_record_date(record.get("date"))
    if day is None:
        logger.warning("Skipping blocked date with unusable date: %r", dict(record))
        return None

    time_from = record.get("time_from")
    time_to = record.get("time_to")
    start = parse_time_of_day(time_from) if time_from else None
    end = parse_time_of_day(time_to) if time_to else None

    if time_from and time_to and (start is None or end is None):
        logger.warning("Blocked date %s has unparsable times, blocking the whole day", day.isoformat())

    if start is None or end is None:
        start = end = None

    return CommittedInterval(
        date=day,
        start=start,
        end=end,
        kind=IntervalKind.BLOCKED,
        interval_id=_optional_id(record.get("blocked_date_id")),
    )


def appointments_from_records(records: Iterable[Mapping[str, Any]]) -> List[CommittedInterval]:
    intervals = (appointment_from_record(record) for record in records or [])
    return [interval for interval in intervals if interval is not None]


def blocked_dates_from_records(records: Iterable[Mapping[str, Any]]) -> List[CommittedInterval]:
    intervals = (blocked_date_from_record(record) for record in records or [])
    return [interval for interval in intervals if interval is not None]
