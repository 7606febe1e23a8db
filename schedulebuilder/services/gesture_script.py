"""
Replay of recorded pointer gestures.

A gesture script is a YAML document describing an initial schedule and a
sequence of pointer events. Replaying it through a real session gives the
resulting schedule, which makes scripts handy both for the CLI and for
reproducing interaction bugs.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from ..config import GridDefaults
from ..domain.exceptions import GestureScriptError
from ..domain.models import GestureState, SelectionMode, TimeSlot
from .entity_store import EntityStore
from .scheduling_session import SchedulingSession

_EVENT_KEYS = ("down", "enter", "up", "leave", "mode", "disabled", "clear")


class SlotModel(BaseModel):
    day: int = Field(ge=0, le=6)
    time: int = Field(ge=0)
    mode: SelectionMode

    def to_slot(self) -> TimeSlot:
        return TimeSlot(day=self.day, time=self.time, mode=self.mode)


class GestureEvent(BaseModel):
    """
    One scripted event. Exactly one field is set.

    ``up``, ``leave`` and ``clear`` may be written as bare strings
    (``- up``) in the YAML list.
    """
    down: Optional[Tuple[int, int]] = None
    enter: Optional[Tuple[int, int]] = None
    up: bool = False
    leave: bool = False
    mode: Optional[SelectionMode] = None
    disabled: Optional[bool] = None
    clear: bool = False

    @model_validator(mode="before")
    @classmethod
    def expand_bare_names(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {data: True}
        return data

    @model_validator(mode="after")
    def check_single_event(self) -> "GestureEvent":
        set_fields = [key for key in _EVENT_KEYS if self._is_set(key)]
        if len(set_fields) != 1:
            raise ValueError(
                f"Each event needs exactly one of {', '.join(_EVENT_KEYS)}, got {set_fields or 'none'}"
            )
        return self

    def _is_set(self, key: str) -> bool:
        value = getattr(self, key)
        if key in ("up", "leave", "clear"):
            return bool(value)
        return value is not None


class GestureScript(BaseModel):
    mode: SelectionMode = SelectionMode.AVAILABLE
    grid: GridDefaults = Field(default_factory=GridDefaults)
    slots: List[SlotModel] = Field(default_factory=list)
    events: List[GestureEvent] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GestureScript":
        """
        Raises:
            GestureScriptError: If the data does not describe a valid script
        """
        if not isinstance(data, dict):
            raise GestureScriptError("Gesture script must contain a mapping at the root level.")
        try:
            return cls(**data)
        except ValidationError as exc:
            raise GestureScriptError(f"Invalid gesture script: {exc}") from exc

    @classmethod
    def load_from_yaml(cls, script_path: Path) -> "GestureScript":
        """
        Raises:
            FileNotFoundError: If the script doesn't exist
            GestureScriptError: If the YAML or its contents are invalid
        """
        if not script_path.exists():
            raise FileNotFoundError(f"Gesture script not found: {script_path}")

        try:
            with open(script_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise GestureScriptError(f"Invalid YAML in {script_path}: {exc}") from exc

        return cls.from_dict(data)


@dataclass
class ScriptResult:
    schedule: List[TimeSlot]
    emitted: int
    final_state: GestureState
    session: SchedulingSession


def run_script(script: GestureScript) -> ScriptResult:
    """Replay a script against a fresh session with a single entity."""
    store = EntityStore()
    entity = store.add_student("Script")
    store.replace_schedule(entity.id, [slot.to_slot() for slot in script.slots])

    session = SchedulingSession(store, grid_config=script.grid.to_grid_config(), mode=script.mode)
    session.select(entity.id)

    emitted = 0

    def count(_slots: List[TimeSlot]) -> None:
        nonlocal emitted
        emitted += 1

    session.engine.subscribe(count)

    for event in script.events:
        _apply(session, event)

    return ScriptResult(
        schedule=store.get(entity.id).schedule,
        emitted=emitted,
        final_state=session.gesture_state,
        session=session,
    )


def _apply(session: SchedulingSession, event: GestureEvent) -> None:
    if event.down is not None:
        session.pointer_down(*event.down)
    elif event.enter is not None:
        session.pointer_enter(*event.enter)
    elif event.up:
        session.pointer_up()
    elif event.leave:
        session.pointer_leave()
    elif event.mode is not None:
        session.set_mode(event.mode)
    elif event.disabled is not None:
        session.set_disabled(event.disabled)
    elif event.clear:
        session.clear_all()
