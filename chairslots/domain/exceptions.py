"""
Domain-specific exception hierarchy for the chairslots application.
"""


class ChairslotsError(Exception):
    """Base class for all application-level errors."""


class ClinicAPIError(ChairslotsError):
    """Raised when clinic data cannot be fetched or parsed."""
