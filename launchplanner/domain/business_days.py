"""
Business-day arithmetic over a fixed Saturday/Sunday weekend and a holiday set.

This is the heart of the scheduler - pure domain logic without any external
dependencies (no API calls, no storage, no I/O). Every function takes the
holiday set as a read-only snapshot and keeps no state between calls.

Holidays may be given as ``Holiday`` records or as bare dates. All days are
compared by calendar day; time-of-day is ignored.
"""

import datetime
from typing import TYPE_CHECKING, FrozenSet, Iterable, List, Union

import pendulum
from pendulum import Date

if TYPE_CHECKING:
    from .models import Holiday

DateLike = Union[datetime.date, str]
HolidayLike = Union["Holiday", datetime.date]

WEEKEND_DAYS = (pendulum.SATURDAY, pendulum.SUNDAY)


def to_date(value: DateLike) -> Date:
    """Normalise a date, datetime or ISO string to a pendulum ``Date``."""
    if isinstance(value, str):
        value = pendulum.parse(value)
    if not isinstance(value, datetime.date):
        raise TypeError(f"Expected a date, got {type(value).__name__}: {value!r}")
    return pendulum.date(value.year, value.month, value.day)


def holiday_dates(holidays: Iterable[HolidayLike]) -> FrozenSet[Date]:
    """Collapse a holiday collection into a set of calendar days."""
    days = set()
    for holiday in holidays:
        if isinstance(holiday, (datetime.date, str)):
            days.add(to_date(holiday))
        else:
            days.add(to_date(holiday.date))
    return frozenset(days)


def _is_business_day(day: Date, closed: FrozenSet[Date]) -> bool:
    return day.day_of_week not in WEEKEND_DAYS and day not in closed


def is_business_day(day: DateLike, holidays: Iterable[HolidayLike] = ()) -> bool:
    """
    Check whether a day is a business day.

    Weekends are never business days; a holiday that falls on a weekend
    changes nothing.
    """
    return _is_business_day(to_date(day), holiday_dates(holidays))


def count_business_days(
    start: DateLike,
    end: DateLike,
    holidays: Iterable[HolidayLike] = (),
) -> int:
    """
    Count business days in the inclusive range [start, end].

    Returns 0 when end is before start.
    """
    current = to_date(start)
    last = to_date(end)
    closed = holiday_dates(holidays)

    count = 0
    while current <= last:
        if _is_business_day(current, closed):
            count += 1
        current = current.add(days=1)

    return count


def _shift(day: DateLike, count: int, holidays: Iterable[HolidayLike], step: int) -> Date:
    current = to_date(day)
    closed = holiday_dates(holidays)

    moved = 0
    while moved < count:
        current = current.add(days=step)
        if _is_business_day(current, closed):
            moved += 1

    return current


def add_business_days(
    day: DateLike,
    count: int,
    holidays: Iterable[HolidayLike] = (),
) -> Date:
    """
    Advance ``count`` business days from ``day``.

    ``day`` itself is step zero whether or not it is a business day, so
    ``count == 0`` returns it unchanged and ``count >= 1`` returns the
    count-th business day strictly after it.

    Raises:
        ValueError: If count is negative
    """
    if count < 0:
        raise ValueError(
            f"count must be non-negative, got {count}. Use subtract_business_days instead."
        )
    return _shift(day, count, holidays, step=1)


def subtract_business_days(
    day: DateLike,
    count: int,
    holidays: Iterable[HolidayLike] = (),
) -> Date:
    """
    Walk ``count`` business days back from ``day``.

    Mirror of ``add_business_days``.

    Raises:
        ValueError: If count is negative
    """
    if count < 0:
        raise ValueError(
            f"count must be non-negative, got {count}. Use add_business_days instead."
        )
    return _shift(day, count, holidays, step=-1)


def next_business_day(day: DateLike, holidays: Iterable[HolidayLike] = ()) -> Date:
    """Return the first business day strictly after ``day``."""
    return _shift(day, 1, holidays, step=1)


def previous_business_day(day: DateLike, holidays: Iterable[HolidayLike] = ()) -> Date:
    """Return the last business day strictly before ``day``."""
    return _shift(day, 1, holidays, step=-1)


def adjust_to_business_day(
    day: DateLike,
    holidays: Iterable[HolidayLike] = (),
    direction: str = "nearest",
) -> Date:
    """
    Roll a day onto a business day.

    Business days are returned unchanged. ``direction`` is one of
    ``forward``, ``backward`` or ``nearest``; a tie in ``nearest`` goes
    forward.
    """
    current = to_date(day)
    closed = holiday_dates(holidays)

    if _is_business_day(current, closed):
        return current

    if direction == "forward":
        return next_business_day(current, closed)
    if direction == "backward":
        return previous_business_day(current, closed)
    if direction != "nearest":
        raise ValueError(f"Unknown direction: {direction!r}")

    following = next_business_day(current, closed)
    preceding = previous_business_day(current, closed)

    days_forward = following.toordinal() - current.toordinal()
    days_back = current.toordinal() - preceding.toordinal()

    return following if days_forward <= days_back else preceding


def business_days_in_range(
    start: DateLike,
    end: DateLike,
    holidays: Iterable[HolidayLike] = (),
) -> List[Date]:
    """List every business day in the inclusive range [start, end]."""
    current = to_date(start)
    last = to_date(end)
    closed = holiday_dates(holidays)

    days: List[Date] = []
    while current <= last:
        if _is_business_day(current, closed):
            days.append(current)
        current = current.add(days=1)

    return days
