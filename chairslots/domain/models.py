"""
Domain models for slot generation and availability classification.

All times are wall-clock values in the provider's local frame; nothing in
this module performs timezone conversion.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, List, Mapping, Union

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """
    An immutable (hours, minutes) pair on a 24-hour clock.

    Invariant: 0 <= hours <= 23 and 0 <= minutes <= 59.
    """
    hours: int
    minutes: int = 0

    def __post_init__(self):
        if not 0 <= self.hours <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {self.hours}")
        if not 0 <= self.minutes <= 59:
            raise ValueError(f"Minute must be between 0 and 59, got {self.minutes}")

    @classmethod
    def from_minutes(cls, total: int) -> "TimeOfDay":
        """Build a clock value from minutes since midnight, wrapping past 24h."""
        total %= MINUTES_PER_DAY
        return cls(hours=total // 60, minutes=total % 60)

    @property
    def total_minutes(self) -> int:
        """Minutes since midnight."""
        return self.hours * 60 + self.minutes

    def __str__(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}"


TimeInput = Union[str, TimeOfDay]


@dataclass(frozen=True)
class Slot:
    """
    One candidate appointment window.

    A slot that crosses midnight keeps wrapped clock values, so ``end`` may
    be numerically smaller than ``start``.
    """
    start: TimeOfDay
    end: TimeOfDay

    @property
    def duration_minutes(self) -> int:
        return (self.end.total_minutes - self.start.total_minutes) % MINUTES_PER_DAY or MINUTES_PER_DAY

    @property
    def start_minutes(self) -> int:
        return self.start.total_minutes

    @property
    def end_minutes(self) -> int:
        """End as minutes from the slot's own midnight (may exceed 1440)."""
        return self.start_minutes + self.duration_minutes

    def overlaps(self, interval: "CommittedInterval") -> bool:
        """Half-open overlap test against a committed interval."""
        interval_start, interval_end = interval.span_minutes()
        return self.start_minutes < interval_end and self.end_minutes > interval_start

    @property
    def label(self) -> str:
        return f"{self.start} - {self.end}"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class WorkSchedule:
    """
    A provider's recurring availability template.

    The work-day range is inclusive and may wrap across the week boundary
    (e.g. Saturday to Monday). ``work_time_to`` at or before
    ``work_time_from`` means the shift crosses midnight. Times may be given
    as text, in which case they are parsed when slots are generated.
    """
    work_day_from: str
    work_day_to: str
    work_time_from: TimeInput
    work_time_to: TimeInput
    slot_duration_minutes: int = 30

    def __post_init__(self):
        if self.slot_duration_minutes <= 0:
            raise ValueError(
                f"slot_duration_minutes must be greater than zero, got {self.slot_duration_minutes}"
            )

    @classmethod
    def from_record(cls, record: Mapping[str, Any], default_duration: int | None = None) -> "WorkSchedule":
        """
        Build a schedule from a dentist work-info record.

        Expected keys: work_days_from, work_days_to, work_time_from,
        work_time_to, appointment_duration.
        """
        from .time_parsing import DEFAULT_DURATION_MINUTES, parse_duration_minutes

        fallback = default_duration or DEFAULT_DURATION_MINUTES
        return cls(
            work_day_from=str(record.get("work_days_from") or ""),
            work_day_to=str(record.get("work_days_to") or ""),
            work_time_from=str(record.get("work_time_from") or ""),
            work_time_to=str(record.get("work_time_to") or ""),
            slot_duration_minutes=parse_duration_minutes(
                str(record.get("appointment_duration") or ""),
                default=fallback,
            ),
        )


class IntervalKind(str, Enum):
    APPOINTMENT = "appointment"
    BLOCKED = "blocked"


FULL_DAY_START = TimeOfDay(0, 0)
FULL_DAY_END = TimeOfDay(23, 59)


@dataclass(frozen=True)
class CommittedInterval:
    """
    An already-committed interval on one date: a booked appointment or a
    blocked range. Without explicit times it blocks the whole day.
    """
    date: date
    start: TimeOfDay | None = None
    end: TimeOfDay | None = None
    owner_id: str | None = None
    kind: IntervalKind = IntervalKind.APPOINTMENT
    interval_id: str | None = None

    @property
    def is_full_day(self) -> bool:
        return self.start is None or self.end is None

    def normalized(self) -> "CommittedInterval":
        """Return a copy with full-day blocks expanded to 00:00-23:59."""
        if not self.is_full_day:
            return self
        return CommittedInterval(
            date=self.date,
            start=FULL_DAY_START,
            end=FULL_DAY_END,
            owner_id=self.owner_id,
            kind=self.kind,
            interval_id=self.interval_id,
        )

    def span_minutes(self) -> tuple[int, int]:
        """
        (start, end) in minutes since midnight; an end before start runs into the next day.

        A full-day block spans the whole day, 0 to 1440.
        """
        if self.is_full_day:
            return 0, MINUTES_PER_DAY
        start = self.start.total_minutes
        end = self.end.total_minutes
        if end < start:
            end += MINUTES_PER_DAY
        return start, end

    def matches(self, slot: Slot) -> bool:
        """True when this interval covers exactly the slot's range."""
        return not self.is_full_day and self.start == slot.start and self.end == slot.end


class SlotState(str, Enum):
    AVAILABLE = "available"
    BLOCKED = "blocked"
    PAST = "past"
    BOOKED = "booked-other"
    BOOKED_SELF = "booked-self"

    @property
    def is_selectable(self) -> bool:
        return self is SlotState.AVAILABLE

    @property
    def coarse(self) -> "SlotState":
        """Collapse PAST onto BLOCKED for callers that do not tell them apart."""
        return SlotState.BLOCKED if self is SlotState.PAST else self


@dataclass(frozen=True)
class SlotAvailability:
    """A candidate slot together with its classified state."""
    slot: Slot
    state: SlotState
    owner_id: str | None = None
    interval: CommittedInterval | None = None

    @property
    def is_selectable(self) -> bool:
        return self.state.is_selectable


@dataclass
class DayAvailability:
    """
    Classified slots for one provider and date.

    ``reason`` explains an empty or fully unavailable day for display.
    """
    date: date
    slots: List[SlotAvailability] = field(default_factory=list)
    reason: str | None = None

    @property
    def available(self) -> List[SlotAvailability]:
        return [entry for entry in self.slots if entry.is_selectable]

    @property
    def has_availability(self) -> bool:
        return any(entry.is_selectable for entry in self.slots)
