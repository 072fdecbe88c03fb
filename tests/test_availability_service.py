"""
Tests for the AvailabilityService orchestration layer.
"""

import asyncio
import logging
from datetime import date, datetime
from typing import List

import pytest

from chairslots.domain.exceptions import ClinicAPIError
from chairslots.domain.models import CommittedInterval, IntervalKind, SlotState, TimeOfDay, WorkSchedule
from chairslots.domain.time_parsing import parse_time_of_day
from chairslots.services.availability_service import AvailabilityService

MONDAY = date(2030, 3, 4)
EARLY = datetime(2030, 3, 4, 0, 0)


class StubClinicClient:
    """Minimal stub matching ClinicClientProtocol."""

    def __init__(
        self,
        appointments: List[CommittedInterval] | None = None,
        blocked: List[CommittedInterval] | None = None,
        fail: tuple = (),
    ):
        self._appointments = appointments or []
        self._blocked = blocked or []
        self._fail = fail
        self.calls: List[str] = []

    def get_work_schedule(self, dentist_id):
        self.calls.append(f"schedule:{dentist_id}")
        if "schedule" in self._fail:
            raise ClinicAPIError("schedule unavailable")
        return WorkSchedule("Monday", "Friday", "09:00", "12:00", 30)

    def get_appointments(self, dentist_id):
        self.calls.append(f"appointments:{dentist_id}")
        if "appointments" in self._fail:
            raise ClinicAPIError("appointments unavailable")
        return self._appointments

    def get_blocked_dates(self, dentist_id):
        self.calls.append(f"blocked:{dentist_id}")
        if "blocked" in self._fail:
            raise ClinicAPIError("blocked dates unavailable")
        return self._blocked


def _appointment(start, end, owner="P1", day=MONDAY):
    return CommittedInterval(day, parse_time_of_day(start), parse_time_of_day(end), owner_id=owner)


def _block(start=None, end=None, day=MONDAY):
    return CommittedInterval(
        day,
        parse_time_of_day(start) if start else None,
        parse_time_of_day(end) if end else None,
        kind=IntervalKind.BLOCKED,
    )


def _states(availability):
    return {entry.slot.label: entry.state for entry in availability.slots}


def test_get_day_availability_combines_both_sources():
    """Appointments and blocked ranges should both be applied."""
    client = StubClinicClient(
        appointments=[_appointment("09:00", "09:30", owner="P1")],
        blocked=[_block("11:00", "12:00")],
    )
    service = AvailabilityService(clinic_client=client)

    availability = asyncio.run(
        service.get_day_availability(dentist_id="D1", day=MONDAY, requester_id="P1", now=EARLY)
    )

    assert _states(availability) == {
        "09:00 - 09:30": SlotState.BOOKED_SELF,
        "09:30 - 10:00": SlotState.AVAILABLE,
        "10:00 - 10:30": SlotState.AVAILABLE,
        "10:30 - 11:00": SlotState.AVAILABLE,
        "11:00 - 11:30": SlotState.BOOKED,
        "11:30 - 12:00": SlotState.BOOKED,
    }
    assert set(client.calls) == {"schedule:D1", "appointments:D1", "blocked:D1"}


def test_fetch_committed_intervals_filters_by_date():
    """Only intervals on the requested date should be kept."""
    client = StubClinicClient(
        appointments=[_appointment("09:00", "09:30"), _appointment("09:00", "09:30", day=date(2030, 3, 5))],
        blocked=[_block(day=date(2030, 3, 6))],
    )
    service = AvailabilityService(clinic_client=client)

    committed = asyncio.run(service.fetch_committed_intervals(dentist_id="D1", day=MONDAY))

    assert len(committed) == 1
    assert committed[0].date == MONDAY


def test_partial_failure_proceeds_with_remaining_data(caplog):
    """A failed blocked-date fetch should not prevent classification."""
    client = StubClinicClient(
        appointments=[_appointment("10:00", "10:30", owner="P2")],
        blocked=[_block()],
        fail=("blocked",),
    )
    service = AvailabilityService(clinic_client=client)

    with caplog.at_level(logging.WARNING):
        availability = asyncio.run(service.get_day_availability(dentist_id="D1", day=MONDAY, now=EARLY))

    states = _states(availability)
    assert states["10:00 - 10:30"] is SlotState.BOOKED
    assert states["09:00 - 09:30"] is SlotState.AVAILABLE
    assert "Error fetching blocked dates" in caplog.text


def test_both_sources_failing_still_yields_slots():
    """With no committed data every future slot is available."""
    client = StubClinicClient(fail=("appointments", "blocked"))
    service = AvailabilityService(clinic_client=client)

    availability = asyncio.run(service.get_day_availability(dentist_id="D1", day=MONDAY, now=EARLY))

    assert len(availability.slots) == 6
    assert availability.has_availability


def test_schedule_failure_raises():
    """Without a schedule there is nothing to classify."""
    service = AvailabilityService(clinic_client=StubClinicClient(fail=("schedule",)))

    with pytest.raises(ClinicAPIError):
        asyncio.run(service.get_day_availability(dentist_id="D1", day=MONDAY, now=EARLY))


def test_get_bookable_slots_returns_only_available():
    """Staff-facing listing should exclude booked, blocked and past slots."""
    client = StubClinicClient(appointments=[_appointment("09:30", "10:30", owner="P2")])
    service = AvailabilityService(clinic_client=client)

    bookable = asyncio.run(
        service.get_bookable_slots(dentist_id="D1", day=MONDAY, now=datetime(2030, 3, 4, 9, 10))
    )

    assert [entry.slot.label for entry in bookable] == ["10:30 - 11:00", "11:00 - 11:30", "11:30 - 12:00"]


def test_default_now_uses_configured_timezone():
    """Without an explicit now, a day long past has nothing bookable."""
    service = AvailabilityService(clinic_client=StubClinicClient(), timezone="Europe/Berlin")

    availability = asyncio.run(service.get_day_availability(dentist_id="D1", day=date(2020, 3, 2)))

    assert all(entry.state is SlotState.PAST for entry in availability.slots)
