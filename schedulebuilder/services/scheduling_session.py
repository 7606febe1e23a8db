"""
Host that connects the selection engine to the entity store.

The session decides which entity the grid paints on, keeps the grid layout
in sync with its configuration and writes every schedule change back to the
store as a full replacement.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..domain.grid import compute_grid
from ..domain.models import (
    Entity,
    GestureState,
    GridConfig,
    GridLayout,
    SelectionMode,
    TimeSlot,
)
from ..domain.selection_engine import SelectionEngine
from .entity_store import EntityStore

logger = logging.getLogger(__name__)


class SchedulingSession:
    """
    One interactive editing session over an ``EntityStore``.

    With no entity selected the grid is disabled and pointer events never
    reach the engine.
    """

    def __init__(
        self,
        store: EntityStore,
        grid_config: Optional[GridConfig] = None,
        mode: SelectionMode = SelectionMode.AVAILABLE,
    ) -> None:
        self.store = store
        self._grid_config = grid_config or GridConfig()
        self._layout = compute_grid(self._grid_config)
        self._mode = SelectionMode(mode)
        self._selected_id: Optional[str] = None
        self._host_disabled = False

        self.engine = SelectionEngine(mode_provider=lambda: self._mode)
        self.engine.subscribe(self._on_schedule_changed)
        self.engine.set_disabled(True)

    # -- selection -------------------------------------------------------

    @property
    def selected(self) -> Optional[Entity]:
        if self._selected_id is None:
            return None
        return self.store.get(self._selected_id)

    @property
    def grid_disabled(self) -> bool:
        return self._selected_id is None

    def select(self, entity_id: Optional[str]) -> None:
        """
        Point the grid at an entity, or at nothing when ``entity_id`` is None.

        Raises:
            EntityNotFoundError: If the id is unknown
        """
        if entity_id is None:
            self._selected_id = None
            self.engine.set_disabled(True)
            self.engine.load([])
            return

        entity = self.store.get(entity_id)
        self._selected_id = entity.id
        self.engine.load(entity.schedule)
        self.engine.set_disabled(self._host_disabled)
        logger.debug("Selected %s %s", entity.kind.value, entity.name)

    def delete(self, entity_id: str) -> Entity:
        """Delete an entity, dropping the selection if it was selected."""
        if entity_id == self._selected_id:
            self.select(None)
        return self.store.delete(entity_id)

    # -- mode and grid ---------------------------------------------------

    @property
    def mode(self) -> SelectionMode:
        return self._mode

    def set_mode(self, mode: SelectionMode) -> None:
        self._mode = SelectionMode(mode)

    @property
    def grid_config(self) -> GridConfig:
        return self._grid_config

    @property
    def layout(self) -> GridLayout:
        return self._layout

    def set_grid_config(self, config: GridConfig) -> GridLayout:
        """Change the grid. Stored slots outside the new grid are kept."""
        self._grid_config = config
        self._layout = compute_grid(config)
        return self._layout

    def visible_slots(self) -> List[TimeSlot]:
        """Selected schedule restricted to cells of the current grid."""
        entity = self.selected
        if entity is None:
            return []
        return [s for s in entity.schedule if self._layout.contains(s.day, s.time)]

    # -- pointer forwarding ----------------------------------------------

    def pointer_down(self, day: int, time: int) -> None:
        if self.grid_disabled:
            logger.debug("Ignoring pointer down at (%d, %d): nothing selected", day, time)
            return
        self.engine.pointer_down(day, time)

    def pointer_enter(self, day: int, time: int) -> None:
        if self.grid_disabled:
            return
        self.engine.pointer_enter(day, time)

    def pointer_up(self) -> None:
        self.engine.pointer_up()

    def pointer_leave(self) -> None:
        self.engine.pointer_leave()

    def set_disabled(self, disabled: bool) -> None:
        """Host-level disable switch; a session without selection stays disabled."""
        self._host_disabled = bool(disabled)
        self.engine.set_disabled(self._host_disabled or self.grid_disabled)

    @property
    def gesture_state(self) -> GestureState:
        return self.engine.state

    def clear_all(self) -> None:
        """Empty the selected entity's schedule."""
        if self._selected_id is None:
            return
        self.store.clear_schedule(self._selected_id)
        self.engine.load([])

    # -- reporting -------------------------------------------------------

    def generate_report(self) -> Dict[str, Any]:
        """
        Collect every entity's availability for a downstream scheduler.

        Nothing is allocated here; the payload only describes the data
        gathered so far.
        """
        report = {
            "students": [s.to_dict() for s in self.store.students()],
            "educators": [e.to_dict() for e in self.store.educators()],
        }
        logger.info(
            "Generated availability report: %d student(s), %d educator(s)",
            len(report["students"]),
            len(report["educators"]),
        )
        return report

    def _on_schedule_changed(self, slots: List[TimeSlot]) -> None:
        if self._selected_id is None:
            return
        self.store.replace_schedule(self._selected_id, slots)
