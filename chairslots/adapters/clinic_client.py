"""
REST client for the clinic backend's scheduling endpoints.
"""

import logging
from typing import Any, Dict, List

import requests

from ..domain.exceptions import ClinicAPIError
from ..domain.models import CommittedInterval, WorkSchedule
from .records import appointments_from_records, blocked_dates_from_records

logger = logging.getLogger(__name__)


class ClinicApiClient:
    """
    Client for the clinic backend.

    Endpoints used:
    - GET /dentists/getworkinfo/{dentist_id}
    - GET /appointments/fordentist/{dentist_id}
    - GET /blocked-dates/fordentist/{dentist_id}
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30,
        default_duration: int | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend root URL, e.g. http://localhost:5000
            token: Optional bearer token
            timeout: Request timeout in seconds
            default_duration: Slot length used when a dentist's duration is unparsable
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.default_duration = default_duration
        self.headers = {"Accept": "application/json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    def _get(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s", url)

        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            raise ClinicAPIError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise ClinicAPIError(f"Invalid JSON from {url}: {e}") from e

    def _get_list(self, path: str) -> List[Dict[str, Any]]:
        data = self._get(path)
        if not isinstance(data, list):
            raise ClinicAPIError(f"Expected a list from {path}, got {type(data).__name__}")
        return data

    def get_work_schedule(self, dentist_id: str) -> WorkSchedule:
        """Fetch a dentist's working days, hours and appointment duration."""
        data = self._get(f"/dentists/getworkinfo/{dentist_id}")
        if not isinstance(data, dict):
            raise ClinicAPIError(f"Unexpected work info for dentist {dentist_id}: {data!r}")
        return WorkSchedule.from_record(data, default_duration=self.default_duration)

    def get_appointments(self, dentist_id: str) -> List[CommittedInterval]:
        """Fetch all appointments booked with a dentist."""
        return appointments_from_records(self._get_list(f"/appointments/fordentist/{dentist_id}"))

    def get_blocked_dates(self, dentist_id: str) -> List[CommittedInterval]:
        """Fetch all blocked ranges for a dentist."""
        return blocked_dates_from_records(self._get_list(f"/blocked-dates/fordentist/{dentist_id}"))
