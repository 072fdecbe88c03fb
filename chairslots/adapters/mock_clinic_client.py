"""
Mock clinic client for working without a running backend.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from ..domain.exceptions import ClinicAPIError
from ..domain.models import CommittedInterval, WorkSchedule
from .records import appointments_from_records, blocked_dates_from_records

DEFAULT_DATA_FILE = Path(__file__).parent / "mock_clinic_data.json"


class MockClinicClient:
    """
    Serves dentists, appointments and blocked dates from a JSON file.

    The file has three top-level keys: "dentists" (work-info records with a
    dentist_id), "appointments" and "blocked_dates" (records with a
    dentist_id), mirroring the backend's responses.
    """

    def __init__(self, data_file: Path | None = None, default_duration: int | None = None):
        self.data_file = data_file or DEFAULT_DATA_FILE
        self.default_duration = default_duration
        self._load_data()

    def _load_data(self):
        """Load mock clinic data from the JSON file."""
        if self.data_file.exists():
            with open(self.data_file, "r", encoding="utf-8") as f:
                self.data: Dict[str, List[Dict[str, Any]]] = json.load(f)
        else:
            self.data = {}

    def _for_dentist(self, key: str, dentist_id: str) -> List[Dict[str, Any]]:
        return [
            record for record in self.data.get(key, [])
            if str(record.get("dentist_id")) == str(dentist_id)
        ]

    def get_work_schedule(self, dentist_id: str) -> WorkSchedule:
        records = self._for_dentist("dentists", dentist_id)
        if not records:
            raise ClinicAPIError(f"Dentist {dentist_id} not found in mock data")
        return WorkSchedule.from_record(records[0], default_duration=self.default_duration)

    def get_appointments(self, dentist_id: str) -> List[CommittedInterval]:
        return appointments_from_records(self._for_dentist("appointments", dentist_id))

    def get_blocked_dates(self, dentist_id: str) -> List[CommittedInterval]:
        return blocked_dates_from_records(self._for_dentist("blocked_dates", dentist_id))
