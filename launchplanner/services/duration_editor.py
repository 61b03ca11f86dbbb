"""
Form-side editor that keeps a launch's end date in step with its duration.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence

from pendulum import Date

from ..domain.business_days import DateLike, add_business_days, count_business_days, to_date
from ..domain.models import BusinessDayRange, Holiday


class DateInputMode(str, Enum):
    MANUAL = "manual"
    BUSINESS_DAYS = "business-days"


class DurationEditor:
    """
    Start date + N business days -> end date.

    In business-days mode, changing the start date or the count recomputes
    the end date as the (N-1)-th business day after the start. In manual mode
    the end date is set directly and the count follows it.
    """

    def __init__(
        self,
        holidays: Sequence[Holiday] = (),
        business_days: int = 1,
        mode: DateInputMode | str = DateInputMode.BUSINESS_DAYS,
    ) -> None:
        self._validate_count(business_days)
        self.holidays: List[Holiday] = list(holidays)
        self.business_days = business_days
        self.mode = DateInputMode(mode)
        self.start_date: Optional[Date] = None
        self.end_date: Optional[Date] = None

    @classmethod
    def from_range(
        cls,
        existing: BusinessDayRange,
        holidays: Sequence[Holiday] = (),
    ) -> "DurationEditor":
        """Seed an editor from an existing launch range."""
        editor = cls(holidays=holidays)
        editor.start_date = existing.start_date
        editor.end_date = existing.end_date
        editor.business_days = max(existing.business_days(holidays), 1)
        return editor

    def toggle_mode(self) -> DateInputMode:
        if self.mode is DateInputMode.MANUAL:
            self.mode = DateInputMode.BUSINESS_DAYS
        else:
            self.mode = DateInputMode.MANUAL
        return self.mode

    def set_start_date(self, day: Optional[DateLike]) -> Optional[Date]:
        """Set the start date; returns the (possibly recomputed) end date."""
        self.start_date = to_date(day) if day is not None else None
        if self.mode is DateInputMode.BUSINESS_DAYS:
            self._recompute_end()
        return self.end_date

    def set_business_days(self, count: int) -> Optional[Date]:
        """
        Set the duration in business days; returns the recomputed end date.

        Raises:
            ValueError: If count is below 1
        """
        self._validate_count(count)
        self.business_days = count
        self._recompute_end()
        return self.end_date

    def set_end_date(self, day: DateLike) -> int:
        """
        Set the end date directly; returns the resulting business-day count.

        Raises:
            ValueError: If the range from the start date holds no business day
        """
        end = to_date(day)
        if self.start_date is not None:
            count = count_business_days(self.start_date, end, self.holidays)
            if count < 1:
                raise ValueError(
                    f"Range {self.start_date} - {end} must span at least one business day"
                )
            self.business_days = count
        self.end_date = end
        return self.business_days

    def as_range(self) -> BusinessDayRange:
        if self.start_date is None or self.end_date is None:
            raise ValueError("Both start and end date must be set")
        return BusinessDayRange(start_date=self.start_date, end_date=self.end_date)

    def _recompute_end(self) -> None:
        if self.start_date is not None and self.business_days > 0:
            self.end_date = add_business_days(self.start_date, self.business_days - 1, self.holidays)

    @staticmethod
    def _validate_count(count: int) -> None:
        if count < 1:
            raise ValueError(f"business_days must be at least 1, got {count}")
