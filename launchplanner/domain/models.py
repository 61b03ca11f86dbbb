"""
Domain models for business-day ranges and calendar drag interactions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from pendulum import Date

from .business_days import count_business_days, to_date
from .exceptions import RescheduleError

DISPLAY_DATE_FORMAT = "D MMM YYYY"


@dataclass(frozen=True)
class Holiday:
    """
    A named non-working calendar day.

    Any time-of-day on ``date`` is dropped on construction.
    """
    id: str
    name: str
    date: Date

    def __post_init__(self):
        object.__setattr__(self, "date", to_date(self.date))


@dataclass(frozen=True)
class BusinessDayRange:
    """
    An inclusive range of calendar days.

    Invariant: start_date must not be after end_date.
    """
    start_date: Date
    end_date: Date

    def __post_init__(self):
        object.__setattr__(self, "start_date", to_date(self.start_date))
        object.__setattr__(self, "end_date", to_date(self.end_date))
        if self.start_date > self.end_date:
            raise ValueError(
                f"Start date {self.start_date} must not be after end date {self.end_date}"
            )

    def business_days(self, holidays: Iterable[Holiday] = ()) -> int:
        """Return the number of business days in the range."""
        return count_business_days(self.start_date, self.end_date, holidays)

    def format_display(
        self,
        holidays: Iterable[Holiday] = (),
        locale: str = "en",
        date_format: str = DISPLAY_DATE_FORMAT,
    ) -> str:
        """
        Format the range for display.
        Format: N business day(s), D MMM YYYY - D MMM YYYY
        """
        days = self.business_days(holidays)
        unit = "business day" if days == 1 else "business days"
        start = self.start_date.format(date_format, locale=locale)
        end = self.end_date.format(date_format, locale=locale)
        return f"{days} {unit}, {start} - {end}"

    def __str__(self) -> str:
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"


class DragAnchor(str, Enum):
    """The endpoint of a range the user grabbed."""
    FIRST = "first"
    LAST = "last"


@dataclass(frozen=True)
class DragState:
    """
    Ephemeral state of one drag gesture.

    The duration is captured before anything moves so that every preview and
    the final commit preserve it.
    """
    entity_id: str
    anchor: DragAnchor
    original_anchor_date: Date
    original_business_day_duration: int


@dataclass(frozen=True)
class PreviewRange:
    """Candidate range shown while the pointer moves over a valid day."""
    entity_id: str
    start_date: Date
    end_date: Date

    def as_range(self) -> BusinessDayRange:
        return BusinessDayRange(start_date=self.start_date, end_date=self.end_date)


@dataclass(frozen=True)
class DropOutcome:
    """
    Result of finishing a drag gesture.

    Exactly one of ``committed`` and ``error`` is set.
    """
    entity_id: str
    message: str
    committed: Optional[BusinessDayRange] = None
    error: Optional[RescheduleError] = None

    @property
    def ok(self) -> bool:
        return self.committed is not None and self.error is None


@dataclass(frozen=True)
class DayCell:
    """One day of a month view, carrying the data a drop target needs."""
    date: Date
    in_month: bool
    is_holiday: bool
    is_business_day: bool
    holiday_name: Optional[str] = None
