"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator

from .adapters.holiday_store import HolidayRecord, HolidayStore
from .domain.models import DISPLAY_DATE_FORMAT, Holiday


class DefaultsConfig(BaseModel):
    """Default settings for scheduling."""
    business_days: int = 5
    date_format: str = DISPLAY_DATE_FORMAT

    @field_validator("business_days")
    @classmethod
    def validate_business_days(cls, value: int) -> int:
        """Ensure a launch spans at least one business day."""
        if value < 1:
            raise ValueError("business_days must be at least 1")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    locale: str = "en"
    holidays_file: Optional[Path] = None
    ranges_file: Optional[Path] = None
    holidays: List[HolidayRecord] = Field(default_factory=list)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, value: str) -> str:
        """Ensure pendulum can format dates in this locale."""
        try:
            pendulum.date(2000, 1, 1).format("MMMM", locale=value)
        except (ValueError, ImportError) as exc:
            raise ValueError(f"Unsupported locale: {value}") from exc
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Relative file paths in the config are resolved against the config
        file's directory.

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

        config = cls(**data)
        return config.resolve_paths(config_path.parent)

    def resolve_paths(self, base_dir: Path) -> "AppConfig":
        """Return a copy with relative data file paths anchored at base_dir."""
        updates = {}
        for field_name in ("holidays_file", "ranges_file"):
            value = getattr(self, field_name)
            if value is not None and not value.is_absolute():
                updates[field_name] = base_dir / value
        return self.model_copy(update=updates)

    def holiday_store(self) -> Optional[HolidayStore]:
        if self.holidays_file is None:
            return None
        return HolidayStore(self.holidays_file)

    def load_holidays(self) -> List[Holiday]:
        """
        Merge inline holidays with those from the holiday file.

        When both name the same day, the inline entry wins.
        """
        merged = {record.date: record.to_holiday() for record in self.holidays}

        store = self.holiday_store()
        if store is not None:
            for holiday in store.all():
                merged.setdefault(holiday.date, holiday)

        return sorted(merged.values(), key=lambda h: h.date)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
