"""
Domain models for availability grids, time slots and the people who own them.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple


class SelectionMode(str, Enum):
    """
    Preference level attached to a time slot.

    The string values are consumed by presentation styling and must stay
    stable.
    """
    CANNOT = "cannot"
    PREFER_NOT = "prefer-not"
    AVAILABLE = "available"
    PREFERRED = "preferred"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self][0]

    @property
    def description(self) -> str:
        return _MODE_LABELS[self][1]


_MODE_LABELS = {
    SelectionMode.CANNOT: (
        "Cannot Schedule",
        "This time is completely unavailable.",
    ),
    SelectionMode.PREFER_NOT: (
        "Prefer Not",
        "Avoid scheduling at this time if possible, but it's not strictly forbidden.",
    ),
    SelectionMode.AVAILABLE: (
        "Available",
        "This time is fine for scheduling, but not a strong preference.",
    ),
    SelectionMode.PREFERRED: (
        "Preferred",
        "This is the best time for scheduling.",
    ),
}


@dataclass(frozen=True)
class TimeSlot:
    """
    One grid cell tagged with a preference mode.

    ``day`` is 0=Sunday .. 6=Saturday, ``time`` is minutes since midnight.
    """
    day: int
    time: int
    mode: SelectionMode

    @property
    def key(self) -> Tuple[int, int]:
        return (self.day, self.time)

    def with_mode(self, mode: SelectionMode) -> "TimeSlot":
        return replace(self, mode=mode)

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire shape ``{"day", "time", "mode"}``."""
        return {"day": self.day, "time": self.time, "mode": self.mode.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimeSlot":
        """
        Build a slot from its wire shape.

        Raises:
            ValueError: If the mode is not one of the known identifiers
            KeyError: If a field is missing
        """
        return cls(
            day=int(data["day"]),
            time=int(data["time"]),
            mode=SelectionMode(data["mode"]),
        )


# Block sizes offered to users; any positive integer is accepted by the grid.
BLOCK_SIZE_CHOICES = (5, 10, 15, 20, 30, 60)


@dataclass(frozen=True)
class GridConfig:
    """
    Parameters that determine which days and rows are selectable.

    Values are normalised by ``compute_grid`` rather than validated here.
    """
    start_hour: float = 8
    end_hour: float = 16
    block_size_minutes: int = 60
    include_saturday: bool = False
    include_sunday: bool = False

    def with_changes(self, **changes: Any) -> "GridConfig":
        return replace(self, **changes)


@dataclass(frozen=True)
class GridLayout:
    """Displayable days (Sunday-first order) and row minute offsets."""
    days: Tuple[int, ...]
    rows: Tuple[int, ...]

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Yield every (day, time) cell, row by row."""
        for time in self.rows:
            for day in self.days:
                yield (day, time)

    def contains(self, day: int, time: int) -> bool:
        return day in self.days and time in self.rows


class GesturePhase(str, Enum):
    IDLE = "idle"
    PAINTING = "painting"


class PaintAction(str, Enum):
    APPLY = "apply"
    REMOVE = "remove"


@dataclass(frozen=True)
class GestureState:
    """Transient state of one pointer-down-to-up interaction."""
    phase: GesturePhase = GesturePhase.IDLE
    paint_action: PaintAction = PaintAction.APPLY

    @property
    def is_painting(self) -> bool:
        return self.phase is GesturePhase.PAINTING


IDLE = GestureState()


class EntityKind(str, Enum):
    STUDENT = "student"
    EDUCATOR = "educator"


class AttributeList:
    """
    Ordered key/value attributes of an entity.

    Editing is position based, so the order of pairs is part of the
    contract. Keys are unique; blank keys are only allowed on freshly
    appended pairs that have not been named yet.
    """

    def __init__(self, pairs: Sequence[Tuple[str, str]] = ()):
        self._pairs: List[Tuple[str, str]] = [(str(k), str(v)) for k, v in pairs]

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._pairs))

    def __getitem__(self, index: int) -> Tuple[str, str]:
        return self._pairs[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AttributeList):
            return self._pairs == other._pairs
        return NotImplemented

    def __repr__(self) -> str:
        return f"AttributeList({self._pairs!r})"

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        for existing_key, value in self._pairs:
            if existing_key == key:
                return value
        return default

    def index_of(self, key: str) -> int:
        """Return the position of ``key`` or -1."""
        for idx, (existing_key, _) in enumerate(self._pairs):
            if existing_key == key:
                return idx
        return -1

    def append(self, key: str = "", value: str = "") -> None:
        self._pairs.append((key, value))

    def set_at(self, index: int, key: str, value: str) -> None:
        self._pairs[index] = (key, value)

    def remove_at(self, index: int) -> None:
        del self._pairs[index]

    def as_pairs(self) -> List[Tuple[str, str]]:
        return list(self._pairs)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._pairs)


@dataclass(frozen=True)
class RequiredAttribute:
    """
    Attribute every new student must carry.

    ``values`` of None means free-form text; otherwise the value must be
    one of the listed options.
    """
    name: str
    values: Optional[Tuple[str, ...]] = None

    def accepts(self, value: Optional[str]) -> bool:
        if value is None or not value.strip():
            return False
        if self.values is None:
            return True
        return value in self.values


@dataclass(frozen=True)
class MeetingRequirement:
    """How often and how long a student must meet with one educator."""
    educator_id: str
    meetings_per_week: int = 1
    meeting_duration_minutes: int = 30

    def to_dict(self) -> Dict[str, Any]:
        return {
            "educator_id": self.educator_id,
            "meetings_per_week": self.meetings_per_week,
            "meeting_duration_minutes": self.meeting_duration_minutes,
        }


@dataclass
class Entity:
    """A student or educator with an independent availability schedule."""
    id: str
    kind: EntityKind
    name: str
    attributes: AttributeList = field(default_factory=AttributeList)
    schedule: List[TimeSlot] = field(default_factory=list)
    meeting_requirements: List[MeetingRequirement] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "kind": self.kind.value,
            "name": self.name,
            "attributes": [list(pair) for pair in self.attributes],
            "schedule": [slot.to_dict() for slot in self.schedule],
        }
        if self.kind is EntityKind.STUDENT:
            data["meeting_requirements"] = [
                req.to_dict() for req in self.meeting_requirements
            ]
        return data
