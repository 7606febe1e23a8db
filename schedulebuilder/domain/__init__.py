"""
Domain layer - Grid derivation and gesture handling without any I/O.
"""

from .grid import compute_grid, day_label, time_label
from .models import (
    BLOCK_SIZE_CHOICES,
    GestureState,
    GridConfig,
    GridLayout,
    SelectionMode,
    TimeSlot,
)
from .selection_engine import SelectionEngine

__all__ = [
    "BLOCK_SIZE_CHOICES",
    "GestureState",
    "GridConfig",
    "GridLayout",
    "SelectionEngine",
    "SelectionMode",
    "TimeSlot",
    "compute_grid",
    "day_label",
    "time_label",
]
