"""
Drag-to-reschedule interaction for calendar launch cards.

The controller owns the state of a single drag gesture: grabbing the first or
last day of a launch, previewing the moved range while the pointer travels,
and committing the final range through a range store. The business-day
duration captured when the drag starts is preserved by every preview and by
the commit.

The controller is single-threaded and does no queuing. It assumes at most one
in-flight commit per entity; callers serialise commits for the same entity.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence

from pendulum import Date

from ..domain.business_days import (
    DateLike,
    add_business_days,
    count_business_days,
    is_business_day,
    subtract_business_days,
    to_date,
)
from ..domain.exceptions import (
    DegenerateDuration,
    DragStateError,
    InvalidDropTarget,
    PersistenceFailure,
    RescheduleError,
    UnknownEntityError,
)
from ..domain.models import (
    DISPLAY_DATE_FORMAT,
    BusinessDayRange,
    DragAnchor,
    DragState,
    DropOutcome,
    Holiday,
    PreviewRange,
)

logger = logging.getLogger(__name__)


class RangeStoreProtocol(Protocol):
    """Protocol describing the storage behaviour the controller needs."""

    def get_range(self, entity_id: str) -> Optional[BusinessDayRange]:
        """Return the committed range of an entity, or None if unknown."""

    async def update_range(self, entity_id: str, start_date: Date, end_date: Date) -> None:
        """Persist a new range; raise on failure."""


class DragPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTING = "committing"


class CalendarDragController:
    """
    State machine for one drag gesture at a time.

    Idle -> Dragging -> (Committed | Cancelled). Drag state and preview are
    cleared on every exit path, including persistence errors. ``describe``
    maps an entity id to the name used in messages and defaults to the id.
    """

    def __init__(
        self,
        range_store: RangeStoreProtocol,
        holidays: Sequence[Holiday] = (),
        *,
        locale: str = "en",
        date_format: str = DISPLAY_DATE_FORMAT,
        describe: Optional[Callable[[str], str]] = None,
    ) -> None:
        self._range_store = range_store
        self._describe = describe or str
        self._holidays: List[Holiday] = list(holidays)
        self._locale = locale
        self._date_format = date_format
        self._phase = DragPhase.IDLE
        self._drag_state: Optional[DragState] = None
        self._preview: Optional[PreviewRange] = None

    @property
    def holidays(self) -> List[Holiday]:
        return list(self._holidays)

    @holidays.setter
    def holidays(self, holidays: Sequence[Holiday]) -> None:
        # Replacing the set mid-gesture is allowed; the commit re-validates.
        self._holidays = list(holidays)

    @property
    def phase(self) -> DragPhase:
        return self._phase

    @property
    def drag_state(self) -> Optional[DragState]:
        return self._drag_state

    @property
    def preview(self) -> Optional[PreviewRange]:
        return self._preview

    def on_drag_start(self, entity_id: str, anchor: DragAnchor | str) -> DragState:
        """
        Begin dragging one endpoint of an entity's range.

        Raises:
            ValueError: If anchor is not "first" or "last"
            UnknownEntityError: If the range store has no range for the entity
            DragStateError: If a gesture or commit is still active
        """
        anchor = DragAnchor(anchor)

        if self._phase is not DragPhase.IDLE:
            raise DragStateError(
                f"Cannot start dragging {entity_id}: a {self._phase.value} gesture "
                f"for {self._drag_state.entity_id if self._drag_state else 'another entity'} is active"
            )

        current = self._range_store.get_range(entity_id)
        if current is None:
            raise UnknownEntityError(f"Unknown entity: {entity_id}")

        anchor_date = current.start_date if anchor is DragAnchor.FIRST else current.end_date
        duration = count_business_days(current.start_date, current.end_date, self._holidays)

        self._drag_state = DragState(
            entity_id=entity_id,
            anchor=anchor,
            original_anchor_date=anchor_date,
            original_business_day_duration=duration,
        )
        self._preview = None
        self._phase = DragPhase.DRAGGING

        logger.debug(
            "Drag started on %s (%s anchor, %d business days)",
            entity_id, anchor.value, duration,
        )
        return self._drag_state

    def on_drag_move(self, target: Optional[DateLike]) -> Optional[PreviewRange]:
        """
        Recompute the preview for the day under the pointer.

        Returns None, and drops any earlier preview, when there is no gesture,
        no target, or the target is not a business day.
        """
        state = self._drag_state
        if state is None or self._phase is not DragPhase.DRAGGING:
            return None

        self._preview = None

        if target is None or not is_business_day(target, self._holidays):
            return None

        try:
            new_range = self._project(state, to_date(target))
        except DegenerateDuration:
            return None

        self._preview = PreviewRange(
            entity_id=state.entity_id,
            start_date=new_range.start_date,
            end_date=new_range.end_date,
        )
        return self._preview

    async def on_drag_end(self, target: Optional[DateLike]) -> Optional[DropOutcome]:
        """
        Finish the gesture on ``target`` and persist the moved range.

        Returns None when no gesture is active. Gesture-level failures come
        back as a rejected ``DropOutcome``; the entity keeps its prior range.
        """
        state = self._drag_state
        if state is None or self._phase is not DragPhase.DRAGGING:
            return None

        try:
            new_range = self._resolve_drop(state, target)
            self._phase = DragPhase.COMMITTING
            await self._persist(state.entity_id, new_range)
        except RescheduleError as exc:
            logger.warning("Drop rejected for %s: %s", state.entity_id, exc)
            return DropOutcome(entity_id=state.entity_id, message=str(exc), error=exc)
        finally:
            self._reset()

        logger.debug("Drag committed for %s: %s", state.entity_id, new_range)
        return DropOutcome(
            entity_id=state.entity_id,
            message=self._success_message(state.entity_id, new_range),
            committed=new_range,
        )

    def on_drag_cancel(self) -> None:
        """Discard the gesture without touching the entity."""
        if self._drag_state is not None:
            logger.debug("Drag cancelled for %s", self._drag_state.entity_id)
        self._reset()

    def _resolve_drop(self, state: DragState, target: Optional[DateLike]) -> BusinessDayRange:
        if target is None or not is_business_day(target, self._holidays):
            raise InvalidDropTarget()

        new_range = self._project(state, to_date(target))

        if count_business_days(new_range.start_date, new_range.end_date, self._holidays) < 1:
            raise DegenerateDuration()

        return new_range

    def _project(self, state: DragState, target: Date) -> BusinessDayRange:
        """Move the anchor to target and recompute the other endpoint."""
        if state.original_business_day_duration < 1:
            raise DegenerateDuration()

        span = state.original_business_day_duration - 1

        if state.anchor is DragAnchor.FIRST:
            return BusinessDayRange(
                start_date=target,
                end_date=add_business_days(target, span, self._holidays),
            )

        return BusinessDayRange(
            start_date=subtract_business_days(target, span, self._holidays),
            end_date=target,
        )

    async def _persist(self, entity_id: str, new_range: BusinessDayRange) -> None:
        try:
            await self._range_store.update_range(
                entity_id, new_range.start_date, new_range.end_date
            )
        except Exception as exc:
            logger.exception("Failed to update dates for %s", entity_id)
            raise PersistenceFailure() from exc

    def _success_message(self, entity_id: str, new_range: BusinessDayRange) -> str:
        days = new_range.business_days(self._holidays)
        unit = "business day" if days == 1 else "business days"
        start = new_range.start_date.format(self._date_format, locale=self._locale)
        end = new_range.end_date.format(self._date_format, locale=self._locale)
        return f"{self._describe(entity_id)} - {days} {unit}\nFrom {start}\nTo {end}"

    def _reset(self) -> None:
        self._drag_state = None
        self._preview = None
        self._phase = DragPhase.IDLE
