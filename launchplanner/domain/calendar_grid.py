"""
Month grid generation for calendar views.
"""

import datetime
from typing import Dict, Iterable, List

import pendulum

from .business_days import HolidayLike, _is_business_day, to_date
from .models import DayCell


def _holiday_names(holidays: Iterable[HolidayLike]) -> Dict[pendulum.Date, str]:
    names: Dict[pendulum.Date, str] = {}
    for holiday in holidays:
        if isinstance(holiday, (datetime.date, str)):
            names.setdefault(to_date(holiday), "")
        else:
            names.setdefault(to_date(holiday.date), holiday.name)
    return names


def build_month_grid(
    year: int,
    month: int,
    holidays: Iterable[HolidayLike] = ()
) -> List[List[DayCell]]:
    """
    Build the weeks shown for a month, Monday first.

    The first and last weeks are padded with days of the neighbouring months
    so that every row has seven cells.
    """
    first = pendulum.date(year, month, 1)
    current = first.start_of("week")
    last = first.end_of("month").end_of("week")

    names = _holiday_names(holidays)
    closed = frozenset(names)

    weeks: List[List[DayCell]] = []
    week: List[DayCell] = []

    while current <= last:
        week.append(
            DayCell(
                date=current,
                in_month=current.month == month,
                is_holiday=current in closed,
                is_business_day=_is_business_day(current, closed),
                holiday_name=names.get(current) or None,
            )
        )
        if len(week) == 7:
            weeks.append(week)
            week = []
        current = current.add(days=1)

    return weeks
