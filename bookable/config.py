"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import time
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import BusinessCalendarConfig
from .domain.time_representation import resolve_timezone


class DefaultsConfig(BaseModel):
    """Default settings for slot searches."""
    duration_minutes: int = 30
    granularity_minutes: int = 15
    meridiem_case: Literal["upper", "lower"] = "upper"

    @field_validator("duration_minutes", "granularity_minutes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure minute values are positive."""
        if value <= 0:
            raise ValueError(f"Value must be greater than zero, got {value}")
        return value


class BusinessHoursConfig(BaseModel):
    """Opening hours and optional midday closure, as "HH:MM" strings."""
    work_start: time
    work_end: time
    lunch_start: Optional[time] = None
    lunch_end: Optional[time] = None
    closed_weekdays: List[int] = Field(default_factory=list)  # 0=Monday, 6=Sunday

    @field_validator("work_start", "work_end", "lunch_start", "lunch_end", mode="before")
    @classmethod
    def require_quoted_time(cls, value):
        """
        Reject bare YAML numbers: an unquoted 09:00 is read by YAML as the
        integer 540 and would otherwise become 00:09.
        """
        if value is not None and not isinstance(value, (str, time)):
            raise ValueError(f"Times must be quoted \"HH:MM\" strings, got {value!r}")
        return value

    @field_validator("work_start", "work_end", "lunch_start", "lunch_end")
    @classmethod
    def require_whole_minute(cls, value: Optional[time]) -> Optional[time]:
        """Slots start on minute boundaries, so boundaries must too."""
        if value is not None and (value.second or value.microsecond):
            raise ValueError(f"Times must be whole minutes (HH:MM), got {value}")
        return value

    @field_validator("closed_weekdays")
    @classmethod
    def validate_closed_weekdays(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"closed_weekdays must be between 0 and 6, got {invalid_days}")
        # Preserve order while removing duplicates
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def validate_windows(self) -> "BusinessHoursConfig":
        """Ensure each window opens before it closes."""
        if self.work_end <= self.work_start:
            raise ValueError("work_end must be later than work_start")
        if (self.lunch_start is None) != (self.lunch_end is None):
            raise ValueError("lunch_start and lunch_end must be set together")
        if self.lunch_start is not None and self.lunch_end <= self.lunch_start:
            raise ValueError("lunch_end must be later than lunch_start")
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "America/New_York"
    business: Optional[BusinessHoursConfig] = None
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    bookings_file: Path = Path("bookings.json")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone exists in the tz database."""
        resolve_timezone(value)
        return value

    def to_calendar_config(self) -> Optional[BusinessCalendarConfig]:
        """Build the domain calendar snapshot, or None if no hours are configured."""
        if self.business is None:
            return None

        return BusinessCalendarConfig(
            work_start=self.business.work_start,
            work_end=self.business.work_end,
            lunch_start=self.business.lunch_start,
            lunch_end=self.business.lunch_end,
            timezone=self.timezone,
            closed_weekdays=tuple(self.business.closed_weekdays),
        )

    def resolve_bookings_file(self, config_path: Path) -> Path:
        """Resolve a relative bookings file against the config file's directory."""
        if self.bookings_file.is_absolute():
            return self.bookings_file
        return config_path.parent / self.bookings_file

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
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of bookable/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
