"""
Domain layer - Pure business logic without external dependencies.
"""

from .business_days import (
    add_business_days,
    count_business_days,
    is_business_day,
    subtract_business_days,
)
from .calendar_grid import build_month_grid
from .models import (
    BusinessDayRange,
    DayCell,
    DragAnchor,
    DragState,
    DropOutcome,
    Holiday,
    PreviewRange,
)

__all__ = [
    "BusinessDayRange",
    "DayCell",
    "DragAnchor",
    "DragState",
    "DropOutcome",
    "Holiday",
    "PreviewRange",
    "add_business_days",
    "build_month_grid",
    "count_business_days",
    "is_business_day",
    "subtract_business_days",
]
