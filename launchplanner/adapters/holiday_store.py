"""
YAML-backed holiday repository.

The holiday set is owned outside the business-day engine: this store loads
it, hands out read-only snapshots and persists edits made from the CLI.
"""

from __future__ import annotations

import datetime
import logging
import uuid
from pathlib import Path
from typing import Iterable, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..domain.business_days import DateLike, to_date
from ..domain.exceptions import HolidayStoreError, NotFoundError
from ..domain.models import Holiday
from .yaml_file import write_yaml

logger = logging.getLogger(__name__)


def _ordered(holidays: Iterable[Holiday]) -> List[Holiday]:
    return sorted(holidays, key=lambda h: (h.date, h.name))


class HolidayRecord(BaseModel):
    """On-disk shape of a holiday."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    date: datetime.date

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Ensure the holiday has a name."""
        value = value.strip()
        if not value:
            raise ValueError("Holiday name is required")
        return value

    def to_holiday(self) -> Holiday:
        return Holiday(id=self.id, name=self.name, date=self.date)


def parse_holidays(entries: Iterable[dict], source: str = "holidays") -> List[Holiday]:
    """
    Validate raw holiday mappings.

    Raises:
        HolidayStoreError: If any entry is malformed
    """
    holidays: List[Holiday] = []
    for index, entry in enumerate(entries):
        try:
            holidays.append(HolidayRecord.model_validate(entry).to_holiday())
        except ValidationError as exc:
            raise HolidayStoreError(f"Invalid holiday #{index + 1} in {source}: {exc}") from exc
    return holidays


class HolidayStore:
    """
    Holidays persisted as a YAML list of ``{id, name, date}`` mappings.

    A missing file is an empty holiday set. Every write is saved immediately.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._holidays: List[Holiday] = self._load()

    def _load(self) -> List[Holiday]:
        if not self.path.exists():
            logger.debug("Holiday file %s not found, starting empty", self.path)
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as file_handle:
                data = yaml.safe_load(file_handle) or []
        except (OSError, yaml.YAMLError) as exc:
            raise HolidayStoreError(f"Could not read holidays from {self.path}: {exc}") from exc

        if not isinstance(data, list):
            raise HolidayStoreError(f"Holiday file {self.path} must contain a list")

        return parse_holidays(data, source=str(self.path))

    def _commit(self, holidays: List[Holiday]) -> None:
        """Write holidays to disk, then make them the in-memory set."""
        payload = [
            {"id": h.id, "name": h.name, "date": h.date.isoformat()}
            for h in _ordered(holidays)
        ]
        try:
            write_yaml(self.path, payload)
        except (OSError, yaml.YAMLError) as exc:
            raise HolidayStoreError(f"Could not save holidays to {self.path}: {exc}") from exc
        self._holidays = holidays

    def reload(self) -> List[Holiday]:
        """Re-read the file, dropping any in-memory state."""
        self._holidays = self._load()
        return self.all()

    def all(self) -> List[Holiday]:
        """Return a snapshot of all holidays ordered by date."""
        return _ordered(self._holidays)

    def get_by_id(self, holiday_id: str) -> Optional[Holiday]:
        for holiday in self._holidays:
            if holiday.id == holiday_id:
                return holiday
        return None

    def get_by_date(self, day: DateLike) -> Optional[Holiday]:
        target = to_date(day)
        for holiday in self.all():
            if holiday.date == target:
                return holiday
        return None

    def get_by_date_range(self, start: DateLike, end: DateLike) -> List[Holiday]:
        """Holidays within the inclusive range [start, end]."""
        first, last = to_date(start), to_date(end)
        return [h for h in self.all() if first <= h.date <= last]

    def get_by_year(self, year: int) -> List[Holiday]:
        return [h for h in self.all() if h.date.year == year]

    def is_holiday(self, day: DateLike) -> bool:
        return self.get_by_date(day) is not None

    def create(self, name: str, day: DateLike) -> Holiday:
        """
        Add a holiday and persist it.

        Raises:
            HolidayStoreError: If the data is invalid or cannot be saved
        """
        holiday = self._validate({"name": name, "date": to_date(day)})
        self._commit(self._holidays + [holiday])
        logger.info("Added holiday %s on %s", holiday.name, holiday.date)
        return holiday

    def bulk_create(self, entries: Iterable[tuple]) -> List[Holiday]:
        """Add several ``(name, date)`` pairs in one write."""
        created = [self._validate({"name": name, "date": to_date(day)}) for name, day in entries]
        self._commit(self._holidays + created)
        return created

    def update(
        self,
        holiday_id: str,
        *,
        name: Optional[str] = None,
        day: Optional[DateLike] = None,
    ) -> Holiday:
        """
        Change the name and/or date of a holiday.

        Raises:
            NotFoundError: If no holiday has this id
        """
        existing = self.get_by_id(holiday_id)
        if existing is None:
            raise NotFoundError("Holiday", holiday_id)

        updated = self._validate({
            "id": existing.id,
            "name": existing.name if name is None else name,
            "date": existing.date if day is None else to_date(day),
        })
        self._commit([updated if h.id == holiday_id else h for h in self._holidays])
        return updated

    def delete(self, holiday_id: str) -> None:
        """
        Remove a holiday.

        Raises:
            NotFoundError: If no holiday has this id
        """
        remaining = [h for h in self._holidays if h.id != holiday_id]
        if len(remaining) == len(self._holidays):
            raise NotFoundError("Holiday", holiday_id)

        self._commit(remaining)
        logger.info("Removed holiday %s", holiday_id)

    @staticmethod
    def _validate(entry: dict) -> Holiday:
        try:
            return HolidayRecord.model_validate(entry).to_holiday()
        except ValidationError as exc:
            raise HolidayStoreError(f"Invalid holiday data: {exc}") from exc
