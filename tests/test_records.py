"""
Tests for backend record conversion and the mock clinic client.
"""

import json
from datetime import date

import pytest

from chairslots.adapters.mock_clinic_client import MockClinicClient
from chairslots.adapters.records import (
    appointment_from_record,
    appointments_from_records,
    blocked_date_from_record,
    parse_record_date,
)
from chairslots.domain.exceptions import ClinicAPIError
from chairslots.domain.models import IntervalKind, TimeOfDay


class TestParseRecordDate:
    """Tests for parse_record_date."""

    def test_plain_date(self):
        """Test a YYYY-MM-DD string."""
        assert parse_record_date("2030-03-04") == date(2030, 3, 4)

    def test_iso_timestamp(self):
        """Test only the date part of a timestamp is used."""
        assert parse_record_date("2030-03-04T00:00:00.000Z") == date(2030, 3, 4)

    @pytest.mark.parametrize("value", [None, "", "not a date"])
    def test_unusable_values(self, value):
        """Test unusable values give None."""
        assert parse_record_date(value) is None


class TestAppointmentRecords:
    """Tests for appointment conversion."""

    def test_appointment_from_record(self):
        """Test a full appointment record."""
        interval = appointment_from_record(
            {
                "appointment_id": 12,
                "patient_id": "P100",
                "date": "2030-03-04T00:00:00.000Z",
                "time_from": "10:00",
                "time_to": "10:30",
            }
        )

        assert interval.date == date(2030, 3, 4)
        assert interval.start == TimeOfDay(10, 0)
        assert interval.end == TimeOfDay(10, 30)
        assert interval.owner_id == "P100"
        assert interval.interval_id == "12"
        assert interval.kind is IntervalKind.APPOINTMENT

    def test_bad_records_are_skipped(self, caplog):
        """Test records with unusable times are dropped with a warning."""
        records = [
            {"date": "2030-03-04", "time_from": "10:00", "time_to": "10:30"},
            {"date": "2030-03-04", "time_from": "soon", "time_to": "10:30"},
            {"date": None, "time_from": "10:00", "time_to": "10:30"},
        ]

        intervals = appointments_from_records(records)

        assert len(intervals) == 1
        assert "Skipping appointment" in caplog.text


class TestBlockedDateRecords:
    """Tests for blocked-date conversion."""

    def test_timed_block(self):
        """Test a block with both times."""
        interval = blocked_date_from_record(
            {"blocked_date_id": 3, "date": "2030-03-04", "time_from": "15:00", "time_to": "16:00"}
        )

        assert interval.kind is IntervalKind.BLOCKED
        assert interval.start == TimeOfDay(15, 0)
        assert not interval.is_full_day
        assert interval.owner_id is None

    @pytest.mark.parametrize(
        "time_from, time_to",
        [(None, None), ("", ""), ("15:00", None), ("later", "16:00")],
    )
    def test_full_day_block(self, time_from, time_to):
        """Test missing or unparsable times block the whole day."""
        interval = blocked_date_from_record({"date": "2030-03-05", "time_from": time_from, "time_to": time_to})

        assert interval.is_full_day

    def test_unusable_date_is_skipped(self):
        """Test a block without a date is dropped."""
        assert blocked_date_from_record({"date": "", "time_from": "15:00", "time_to": "16:00"}) is None


class TestMockClinicClient:
    """Tests for MockClinicClient."""

    def test_bundled_data(self):
        """Test the bundled JSON file is served."""
        client = MockClinicClient()

        schedule = client.get_work_schedule("D001")
        assert schedule.work_day_from == "Monday"
        assert schedule.slot_duration_minutes == 30
        assert len(client.get_appointments("D001")) == 2
        assert [block.is_full_day for block in client.get_blocked_dates("D001")] == [False, True]

    def test_unknown_dentist_raises(self):
        """Test a missing dentist raises ClinicAPIError."""
        with pytest.raises(ClinicAPIError):
            MockClinicClient().get_work_schedule("nobody")

    def test_custom_data_file(self, tmp_path):
        """Test loading a custom data file with a duration fallback."""
        data_file = tmp_path / "data.json"
        data_file.write_text(
            json.dumps(
                {
                    "dentists": [
                        {
                            "dentist_id": 7,
                            "work_days_from": "Monday",
                            "work_days_to": "Friday",
                            "work_time_from": "09:00",
                            "work_time_to": "12:00",
                            "appointment_duration": "",
                        }
                    ]
                }
            ),
            encoding="utf-8",
        )

        client = MockClinicClient(data_file=data_file, default_duration=20)

        assert client.get_work_schedule("7").slot_duration_minutes == 20
        assert client.get_appointments("7") == []
        assert client.get_blocked_dates("7") == []

    def test_missing_data_file(self, tmp_path):
        """Test a missing file behaves like an empty clinic."""
        client = MockClinicClient(data_file=tmp_path / "missing.json")

        assert client.get_appointments("D001") == []
