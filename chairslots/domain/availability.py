"""
Core business logic for classifying appointment slots.

Pure domain logic: given a provider's schedule, a date, the intervals
already committed on that date and the current time, decide for every
candidate slot whether it can be booked. No I/O happens here; diagnostics
go through an injectable logger.
"""

import logging
from datetime import date, datetime
from typing import Iterable, List, Sequence

import pendulum
from pendulum import DateTime

from .models import (
    CommittedInterval,
    DayAvailability,
    Slot,
    SlotAvailability,
    SlotState,
    WorkSchedule,
)
from .slot_generator import MAX_SLOTS, coerce_time, generate_slots
from .time_parsing import weekday_index

logger = logging.getLogger(__name__)

REASON_NOT_WORKING_DAY = "Not a working day"
REASON_UNPARSABLE_HOURS = "Working hours could not be parsed"
REASON_NO_SLOTS = "No time slots could be generated from the schedule"
REASON_FULLY_BOOKED = "No available time slots for the selected date"


def is_working_day(day: date, schedule: WorkSchedule, diagnostics: logging.Logger | None = None) -> bool:
    """
    Check whether ``day`` falls inside the schedule's cyclic work-day range.

    Unknown weekday names fall back to treating the day as a working day.
    """
    log = diagnostics or logger

    from_index = weekday_index(schedule.work_day_from)
    to_index = weekday_index(schedule.work_day_to)
    if from_index is None or to_index is None:
        log.warning(
            "Invalid day names %r - %r, assuming %s is a working day",
            schedule.work_day_from,
            schedule.work_day_to,
            day.isoformat(),
        )
        return True

    selected = day.weekday()
    if from_index <= to_index:
        return from_index <= selected <= to_index
    # Range wraps across the end of the week
    return selected >= from_index or selected <= to_index


class AvailabilityClassifier:
    """
    Assigns an availability state to every candidate slot of a day.

    Per slot, the first matching rule wins:
    1. slot start before ``now``                      -> PAST
    2. requester's own interval with the exact range  -> BOOKED_SELF
    3. any committed interval overlapping the slot    -> BOOKED
    4. otherwise                                      -> AVAILABLE

    On a non-working day every slot is BLOCKED.
    """

    def __init__(self, max_slots: int = MAX_SLOTS, diagnostics: logging.Logger | None = None):
        self.max_slots = max_slots
        self._log = diagnostics or logger

    def classify(
        self,
        day: date,
        schedule: WorkSchedule,
        committed: Iterable[CommittedInterval],
        requester_id: str | None = None,
        now: datetime | None = None,
    ) -> DayAvailability:
        """
        Classify all slots of ``day``.

        Args:
            day: Target calendar date
            schedule: Provider's work schedule
            committed: Appointments and blocked ranges; entries for other
                dates are ignored
            requester_id: Identity of the viewer, used to spot their own bookings
            now: Current provider-local time; defaults to pendulum.now()

        Returns:
            DayAvailability whose ``reason`` is set when nothing is bookable
        """
        if coerce_time(schedule.work_time_from) is None or coerce_time(schedule.work_time_to) is None:
            self._log.warning(
                "Failed to parse work times %r - %r",
                schedule.work_time_from,
                schedule.work_time_to,
            )
            return DayAvailability(date=day, reason=REASON_UNPARSABLE_HOURS)

        slots = generate_slots(
            schedule.work_time_from,
            schedule.work_time_to,
            schedule.slot_duration_minutes,
            max_slots=self.max_slots,
            diagnostics=self._log,
        )
        if not slots:
            return DayAvailability(date=day, reason=REASON_NO_SLOTS)

        if not is_working_day(day, schedule, diagnostics=self._log):
            return DayAvailability(
                date=day,
                slots=[SlotAvailability(slot=slot, state=SlotState.BLOCKED) for slot in slots],
                reason=REASON_NOT_WORKING_DAY,
            )

        same_day = [interval for interval in committed if interval.date == day]
        # wall-clock comparison, any tzinfo on now is dropped without conversion
        current = pendulum.instance(now).naive() if now is not None else pendulum.now().naive()

        results = [self._classify_slot(day, slot, same_day, requester_id, current) for slot in slots]

        result = DayAvailability(date=day, slots=results)
        if not result.has_availability:
            result.reason = REASON_FULLY_BOOKED
        self._log.debug(
            "%s: %d of %d slots available", day.isoformat(), len(result.available), len(results)
        )
        return result

    def _classify_slot(
        self,
        day: date,
        slot: Slot,
        intervals: Sequence[CommittedInterval],
        requester_id: str | None,
        now: DateTime,
    ) -> SlotAvailability:
        slot_start = pendulum.naive(day.year, day.month, day.day, slot.start.hours, slot.start.minutes)
        if slot_start < now:
            return SlotAvailability(slot=slot, state=SlotState.PAST)

        if requester_id is not None:
            for interval in intervals:
                if interval.owner_id == requester_id and interval.matches(slot):
                    return SlotAvailability(
                        slot=slot,
                        state=SlotState.BOOKED_SELF,
                        owner_id=interval.owner_id,
                        interval=interval,
                    )

        for interval in intervals:
            if slot.overlaps(interval):
                return SlotAvailability(
                    slot=slot,
                    state=SlotState.BOOKED,
                    owner_id=interval.owner_id,
                    interval=interval,
                )

        return SlotAvailability(slot=slot, state=SlotState.AVAILABLE)


def classify_slots(
    day: date,
    schedule: WorkSchedule,
    committed: Iterable[CommittedInterval],
    requester_id: str | None = None,
    now: datetime | None = None,
    diagnostics: logging.Logger | None = None,
) -> List[SlotAvailability]:
    """Classify the slots of ``day`` and return them in chronological order."""
    classifier = AvailabilityClassifier(diagnostics=diagnostics)
    return classifier.classify(day, schedule, committed, requester_id=requester_id, now=now).slots
