"""
YAML-backed store of launch date ranges.

Stands in for the hosted backend when rescheduling from the command line.
"""

from __future__ import annotations

import datetime
import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pendulum import Date
from pydantic import BaseModel, ValidationError, model_validator

from ..domain.exceptions import NotFoundError, RangeStoreError
from ..domain.models import BusinessDayRange
from .yaml_file import write_yaml

logger = logging.getLogger(__name__)


class LaunchRange(BaseModel):
    """A product launch and the calendar days it occupies."""
    id: str
    name: str = ""
    start_date: datetime.date
    end_date: datetime.date

    @model_validator(mode="after")
    def validate_order(self) -> "LaunchRange":
        """Ensure the launch does not end before it starts."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    def display_name(self) -> str:
        return self.name or self.id

    def to_range(self) -> BusinessDayRange:
        return BusinessDayRange(start_date=self.start_date, end_date=self.end_date)


class RangeStore:
    """
    Launch ranges persisted as a YAML list of
    ``{id, name, start_date, end_date}`` mappings.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._launches: Dict[str, LaunchRange] = self._load()

    def _load(self) -> Dict[str, LaunchRange]:
        if not self.path.exists():
            logger.debug("Range file %s not found, starting empty", self.path)
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as file_handle:
                data = yaml.safe_load(file_handle) or []
        except (OSError, yaml.YAMLError) as exc:
            raise RangeStoreError(f"Could not read launches from {self.path}: {exc}") from exc

        if not isinstance(data, list):
            raise RangeStoreError(f"Range file {self.path} must contain a list")

        launches: Dict[str, LaunchRange] = {}
        for index, entry in enumerate(data):
            try:
                launch = LaunchRange.model_validate(entry)
            except ValidationError as exc:
                raise RangeStoreError(
                    f"Invalid launch #{index + 1} in {self.path}: {exc}"
                ) from exc
            if launch.id in launches:
                raise RangeStoreError(f"Duplicate launch id in {self.path}: {launch.id}")
            launches[launch.id] = launch

        return launches

    def _commit(self, launches: Dict[str, LaunchRange]) -> None:
        """Write launches to disk, then make them the in-memory set."""
        payload = [
            {
                "id": launch.id,
                "name": launch.name,
                "start_date": launch.start_date.isoformat(),
                "end_date": launch.end_date.isoformat(),
            }
            for launch in launches.values()
        ]
        try:
            write_yaml(self.path, payload)
        except (OSError, yaml.YAMLError) as exc:
            raise RangeStoreError(f"Could not save launches to {self.path}: {exc}") from exc
        self._launches = launches

    def all(self) -> List[LaunchRange]:
        return sorted(self._launches.values(), key=lambda launch: (launch.start_date, launch.id))

    def get(self, entity_id: str) -> Optional[LaunchRange]:
        return self._launches.get(entity_id)

    def get_range(self, entity_id: str) -> Optional[BusinessDayRange]:
        launch = self._launches.get(entity_id)
        return launch.to_range() if launch else None

    def display_name(self, entity_id: str) -> str:
        launch = self._launches.get(entity_id)
        return launch.display_name() if launch else entity_id

    async def update_range(self, entity_id: str, start_date: Date, end_date: Date) -> None:
        """
        Replace the dates of a launch and persist the file.

        Raises:
            NotFoundError: If the launch does not exist
            RangeStoreError: If the dates are invalid or cannot be saved
        """
        existing = self._launches.get(entity_id)
        if existing is None:
            raise NotFoundError("Launch", entity_id)

        try:
            updated = LaunchRange(
                id=existing.id,
                name=existing.name,
                start_date=start_date,
                end_date=end_date,
            )
        except ValidationError as exc:
            raise RangeStoreError(f"Invalid dates for {entity_id}: {exc}") from exc

        self._commit({**self._launches, entity_id: updated})

        logger.info("Updated %s to %s - %s", entity_id, start_date, end_date)
