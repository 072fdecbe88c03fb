"""
Configuration management using Pydantic models loaded from YAML.
"""

import os
from pathlib import Path
from typing import List

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.slot_generator import MAX_SLOTS
from .domain.time_parsing import DEFAULT_DURATION_MINUTES

CONFIG_ENV_VAR = "CHAIRSLOTS_CONFIG"


class ApiConfig(BaseModel):
    """Clinic backend connection settings."""
    base_url: str = "http://localhost:5000"
    timeout_seconds: float = 30
    token: str | None = None

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value


class DefaultsConfig(BaseModel):
    """Fallbacks for slot generation."""
    slot_duration_minutes: int = DEFAULT_DURATION_MINUTES
    max_slots: int = MAX_SLOTS

    @field_validator("slot_duration_minutes", "max_slots")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure durations and bounds are positive."""
        if value <= 0:
            raise ValueError(f"Value must be greater than zero, got {value}")
        return value


class DentistAlias(BaseModel):
    """Short name for a dentist id."""
    name: str
    dentist_id: str


class AppConfig(BaseModel):
    """Application configuration."""
    api: ApiConfig = Field(default_factory=ApiConfig)
    timezone: str = "UTC"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    dentists: List[DentistAlias] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("dentists")
    @classmethod
    def validate_dentists(cls, value: List[DentistAlias]) -> List[DentistAlias]:
        """Ensure dentist aliases and ids are unique."""
        seen_names: set[str] = set()
        seen_ids: set[str] = set()
        for dentist in value:
            name_key = dentist.name.lower()
            if name_key in seen_names:
                raise ValueError(f"Duplicate dentist name detected: {dentist.name}")
            if dentist.dentist_id in seen_ids:
                raise ValueError(f"Duplicate dentist id detected: {dentist.dentist_id}")
            seen_names.add(name_key)
            seen_ids.add(dentist.dentist_id)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"chairslots config not found at {config_path}. "
                f"Copy config.example.yaml to config.yaml and set api.base_url and your dentist aliases."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"chairslots config {config_path} is not valid YAML: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError(f"chairslots config {config_path} must be a mapping of settings, not {type(data).__name__}.")

        return cls(**data)

    def find_dentist_by_name(self, name: str) -> DentistAlias | None:
        for dentist in self.dentists:
            if dentist.name.lower() == name.lower():
                return dentist
        return None

    def resolve_dentist(self, identifier: str) -> str:
        """
        Resolve a configured alias or a raw dentist id to a dentist id.

        Unknown identifiers are passed through unchanged as raw ids.
        """
        dentist = self.find_dentist_by_name(identifier)
        if dentist:
            return dentist.dentist_id
        if not identifier.strip():
            raise ValueError("Dentist identifier must not be empty.")
        return identifier.strip()


def get_default_config_path() -> Path:
    """
    Locate config.yaml.

    $CHAIRSLOTS_CONFIG wins; otherwise the working directory is tried before
    the checkout root next to the chairslots package.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)

    candidates = (Path.cwd() / "config.yaml", Path(__file__).parent.parent / "config.yaml")
    return next((path for path in candidates if path.exists()), candidates[0])
