"""
Domain-specific exception hierarchy for the launch planner.
"""


class LaunchPlannerError(Exception):
    """Base class for all application-level errors."""


class NotFoundError(LaunchPlannerError):
    """Raised when a stored record does not exist."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id


class HolidayStoreError(LaunchPlannerError):
    """Raised when the holiday file cannot be read, parsed or written."""


class RangeStoreError(LaunchPlannerError):
    """Raised when the launch range file cannot be read, parsed or written."""


class UnknownEntityError(LaunchPlannerError):
    """Raised when a drag starts on an entity the range store does not know."""


class DragStateError(LaunchPlannerError):
    """Raised when a drag starts while another gesture is still active."""


class RescheduleError(LaunchPlannerError):
    """Base class for gesture-level failures reported back to the user."""

    user_message = "The launch could not be rescheduled"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.user_message)


class InvalidDropTarget(RescheduleError):
    """The drop happened on a weekend, a holiday, or outside the calendar."""

    user_message = "Cannot drop on weekends or holidays"


class DegenerateDuration(RescheduleError):
    """The recomputed range would not contain a single business day."""

    user_message = "A launch must span at least one business day"


class PersistenceFailure(RescheduleError):
    """The range store rejected or failed to save the new dates."""

    user_message = "Could not update the launch dates"
