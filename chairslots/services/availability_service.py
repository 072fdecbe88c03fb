"""
Application service for computing a dentist's bookable slots.

The service fetches the schedule and committed intervals through a clinic
client adapter and delegates classification to the domain-level
``AvailabilityClassifier``. The client is described by a small protocol so
the REST adapter, the mock adapter or a test stub can be plugged in.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from typing import List, Protocol

import pendulum

from ..domain.availability import AvailabilityClassifier
from ..domain.models import CommittedInterval, DayAvailability, SlotAvailability, WorkSchedule

logger = logging.getLogger(__name__)


class ClinicClientProtocol(Protocol):
    """Protocol describing the clinic client behaviour needed by the service."""

    def get_work_schedule(self, dentist_id: str) -> WorkSchedule:
        """Return the dentist's work schedule."""

    def get_appointments(self, dentist_id: str) -> List[CommittedInterval]:
        """Return the dentist's booked appointments."""

    def get_blocked_dates(self, dentist_id: str) -> List[CommittedInterval]:
        """Return the dentist's blocked ranges."""


class AvailabilityService:
    """
    Orchestrates data retrieval and slot classification for one dentist/day.

    Appointments and blocked dates are fetched concurrently. A failure of
    either fetch is logged and the computation proceeds with whatever data
    arrived, so slots can still be shown.
    """

    def __init__(
        self,
        clinic_client: ClinicClientProtocol,
        classifier: AvailabilityClassifier | None = None,
        timezone: str = "UTC",
    ) -> None:
        self._clinic_client = clinic_client
        self._classifier = classifier or AvailabilityClassifier()
        self._timezone = timezone

    async def get_day_availability(
        self,
        *,
        dentist_id: str,
        day: date,
        requester_id: str | None = None,
        now: datetime | None = None,
    ) -> DayAvailability:
        """
        Fetch collaborator data and classify every slot of ``day``.

        Raises:
            ClinicAPIError: If the dentist's schedule cannot be fetched
        """
        schedule = await asyncio.to_thread(self._clinic_client.get_work_schedule, dentist_id)
        committed = await self.fetch_committed_intervals(dentist_id=dentist_id, day=day)

        return self.classify(
            day=day,
            schedule=schedule,
            committed=committed,
            requester_id=requester_id,
            now=now,
        )

    async def get_bookable_slots(
        self,
        *,
        dentist_id: str,
        day: date,
        requester_id: str | None = None,
        now: datetime | None = None,
    ) -> List[SlotAvailability]:
        """Only the slots that can still be selected."""
        availability = await self.get_day_availability(
            dentist_id=dentist_id,
            day=day,
            requester_id=requester_id,
            now=now,
        )
        return availability.available

    async def fetch_committed_intervals(self, *, dentist_id: str, day: date) -> List[CommittedInterval]:
        """Fetch appointments and blocked ranges concurrently, keeping those on ``day``."""
        appointments, blocked = await asyncio.gather(
            asyncio.to_thread(self._clinic_client.get_appointments, dentist_id),
            asyncio.to_thread(self._clinic_client.get_blocked_dates, dentist_id),
            return_exceptions=True,
        )

        committed: List[CommittedInterval] = []
        for source, result in (("appointments", appointments), ("blocked dates", blocked)):
            if isinstance(result, Exception):
                logger.warning("Error fetching %s for dentist %s: %s", source, dentist_id, result)
                continue
            committed.extend(interval for interval in result if interval.date == day)

        return committed

    def classify(
        self,
        *,
        day: date,
        schedule: WorkSchedule,
        committed: List[CommittedInterval],
        requester_id: str | None = None,
        now: datetime | None = None,
    ) -> DayAvailability:
        """Classify slots from already-fetched data."""
        current = now if now is not None else pendulum.now(self._timezone)
        return self._classifier.classify(
            day,
            schedule,
            committed,
            requester_id=requester_id,
            now=current,
        )
