"""
Adapters layer - File-backed holiday and launch range stores.
"""

from .holiday_store import HolidayRecord, HolidayStore
from .range_store import LaunchRange, RangeStore

__all__ = ["HolidayRecord", "HolidayStore", "LaunchRange", "RangeStore"]
