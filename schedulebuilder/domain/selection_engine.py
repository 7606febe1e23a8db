"""
Gesture interpreter that turns pointer events into schedule changes.

The engine owns the schedule of whichever entity the host currently has
selected. Each change is published to listeners as a complete new list of
slots; the host is expected to store it as a full replacement.

State machine::

    Idle --down(absent)------------> Painting(Apply)
    Idle --down(present, other)----> Painting(Apply)
    Idle --down(present, same)-----> Painting(Remove)
    Painting(*) --up / leave-------> Idle
    any --disable------------------> Idle (pointer events ignored)
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .models import (
    IDLE,
    GesturePhase,
    GestureState,
    PaintAction,
    SelectionMode,
    TimeSlot,
)

logger = logging.getLogger(__name__)

ScheduleListener = Callable[[List[TimeSlot]], None]
StateListener = Callable[[GestureState], None]


class SelectionEngine:
    """
    Click-and-drag painting of preference modes onto time slots.

    The mode is read fresh on every event, so changing it while a drag is
    held affects only the cells visited afterwards.
    """

    def __init__(
        self,
        schedule: Iterable[TimeSlot] = (),
        mode: SelectionMode = SelectionMode.AVAILABLE,
        mode_provider: Optional[Callable[[], SelectionMode]] = None,
        on_schedule_changed: Optional[ScheduleListener] = None,
    ):
        """
        Args:
            schedule: Initial schedule of the selected entity
            mode: Initial mode used when no provider is injected
            mode_provider: Accessor for the current mode; overrides ``mode``
            on_schedule_changed: Listener registered at construction time
        """
        self._slots: Dict[Tuple[int, int], TimeSlot] = {}
        self._mode = SelectionMode(mode)
        self._mode_provider = mode_provider
        self._state = IDLE
        self._disabled = False
        self._listeners: List[ScheduleListener] = []
        self._state_listeners: List[StateListener] = []

        self._replace_slots(schedule)
        if on_schedule_changed is not None:
            self.subscribe(on_schedule_changed)

    # -- observation -----------------------------------------------------

    def subscribe(self, listener: ScheduleListener) -> Callable[[], None]:
        """Register a schedule listener. Returns a callable that removes it."""
        self._listeners.append(listener)
        return lambda: self._discard(self._listeners, listener)

    def subscribe_state(self, listener: StateListener) -> Callable[[], None]:
        """Register a gesture state listener. Returns a callable that removes it."""
        self._state_listeners.append(listener)
        return lambda: self._discard(self._state_listeners, listener)

    @staticmethod
    def _discard(listeners: list, listener) -> None:
        if listener in listeners:
            listeners.remove(listener)

    @property
    def schedule(self) -> List[TimeSlot]:
        return list(self._slots.values())

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def disabled(self) -> bool:
        return self._disabled

    @property
    def mode(self) -> SelectionMode:
        if self._mode_provider is not None:
            return SelectionMode(self._mode_provider())
        return self._mode

    # -- host controls ---------------------------------------------------

    def set_mode(self, mode: SelectionMode) -> None:
        self._mode = SelectionMode(mode)

    def set_disabled(self, disabled: bool) -> None:
        """Disabling ends any gesture in progress and ignores pointer events."""
        self._disabled = bool(disabled)
        if self._disabled:
            self._set_state(IDLE)

    def load(self, schedule: Iterable[TimeSlot]) -> None:
        """
        Take over the schedule of a newly selected entity.

        Does not notify listeners. Duplicate keys collapse, the last one wins.
        """
        self._replace_slots(schedule)
        self._set_state(IDLE)

    def _replace_slots(self, schedule: Iterable[TimeSlot]) -> None:
        self._slots = {}
        for slot in schedule:
            self._slots[slot.key] = slot

    # -- pointer events --------------------------------------------------

    def pointer_down(self, day: int, time: int) -> None:
        if self._disabled:
            return

        mode = self.mode
        existing = self._slots.get((day, time))

        if existing is None:
            self._slots[(day, time)] = TimeSlot(day=day, time=time, mode=mode)
            action = PaintAction.APPLY
        elif existing.mode == mode:
            del self._slots[(day, time)]
            action = PaintAction.REMOVE
        else:
            self._slots[(day, time)] = existing.with_mode(mode)
            action = PaintAction.APPLY

        self._emit()
        self._set_state(GestureState(GesturePhase.PAINTING, action))

    def pointer_enter(self, day: int, time: int) -> None:
        if self._disabled or not self._state.is_painting:
            return

        existing = self._slots.get((day, time))

        if self._state.paint_action is PaintAction.REMOVE:
            if existing is None:
                return
            del self._slots[(day, time)]
            self._emit()
            return

        mode = self.mode
        if existing is not None and existing.mode == mode:
            return
        self._slots[(day, time)] = TimeSlot(day=day, time=time, mode=mode)
        self._emit()

    def pointer_up(self) -> None:
        self._set_state(IDLE)

    def pointer_leave(self) -> None:
        """The pointer left the grid; treated exactly like a release."""
        self._set_state(IDLE)

    # -- internals -------------------------------------------------------

    def _set_state(self, state: GestureState) -> None:
        if state == self._state:
            return
        logger.debug("Gesture %s -> %s", self._describe(self._state), self._describe(state))
        self._state = state
        for listener in list(self._state_listeners):
            listener(state)

    def _emit(self) -> None:
        snapshot = self.schedule
        logger.debug("Schedule changed: %d slot(s)", len(snapshot))
        for listener in list(self._listeners):
            listener(list(snapshot))

    @staticmethod
    def _describe(state: GestureState) -> str:
        if not state.is_painting:
            return state.phase.value
        return f"{state.phase.value}({state.paint_action.value})"
