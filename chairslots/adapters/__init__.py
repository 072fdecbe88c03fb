"""
Adapters layer - Clinic backend integrations.
"""

from .clinic_client import ClinicApiClient
from .mock_clinic_client import MockClinicClient

__all__ = ["ClinicApiClient", "MockClinicClient"]
