"""
Service layer helpers that orchestrate stores and domain logic.
"""

from .drag_reschedule import CalendarDragController, DragPhase, RangeStoreProtocol
from .duration_editor import DateInputMode, DurationEditor

__all__ = [
    "CalendarDragController",
    "DateInputMode",
    "DragPhase",
    "DurationEditor",
    "RangeStoreProtocol",
]
