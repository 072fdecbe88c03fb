"""
Domain layer - Pure scheduling logic without external dependencies.
"""

from .availability import AvailabilityClassifier, classify_slots, is_working_day
from .models import (
    CommittedInterval,
    DayAvailability,
    IntervalKind,
    Slot,
    SlotAvailability,
    SlotState,
    TimeOfDay,
    WorkSchedule,
)
from .slot_generator import MAX_SLOTS, generate_slots
from .time_parsing import parse_duration_minutes, parse_time_of_day

__all__ = [
    "AvailabilityClassifier",
    "CommittedInterval",
    "DayAvailability",
    "IntervalKind",
    "MAX_SLOTS",
    "Slot",
    "SlotAvailability",
    "SlotState",
    "TimeOfDay",
    "WorkSchedule",
    "classify_slots",
    "generate_slots",
    "is_working_day",
    "parse_duration_minutes",
    "parse_time_of_day",
]
