"""
Grid derivation: which days and time rows a user can paint.

Pure domain logic. Every input is normalised, nothing raises.
"""

import math
from typing import Tuple

import pendulum

from .models import GridConfig, GridLayout

# Any Sunday works; only the weekday sequence matters.
REFERENCE_WEEK_START = pendulum.datetime(2024, 1, 7)

FALLBACK_WINDOW_HOURS = 8
DEFAULT_BLOCK_SIZE_MINUTES = 60

SUNDAY = 0
SATURDAY = 6
WEEKDAYS = (1, 2, 3, 4, 5)


def clamp_hour(hour: float) -> float:
    """Clamp an hour into [0, 23]. Fractions are kept."""
    return max(0, min(23, hour))


def resolve_hours(config: GridConfig) -> Tuple[float, float]:
    """
    Return the (start, end) hours actually displayed.

    A window that would be empty or inverted is replaced by an
    eight hour window from the start hour. The end may exceed 23.
    """
    start = clamp_hour(config.start_hour)
    end = clamp_hour(config.end_hour)
    if end <= start:
        end = start + FALLBACK_WINDOW_HOURS
    return start, end


def compute_grid(config: GridConfig) -> GridLayout:
    """
    Compute the displayable days and row offsets for a grid configuration.

    Rows are minute offsets from midnight, one per block. When the window
    is not a whole number of blocks the last row overhangs the end.

    Args:
        config: Grid configuration

    Returns:
        GridLayout with days in Sunday..Saturday order and ascending rows
    """
    start_hour, end_hour = resolve_hours(config)
    block = config.block_size_minutes
    if block <= 0:
        block = DEFAULT_BLOCK_SIZE_MINUTES

    start_minutes = round(start_hour * 60)
    total_minutes = round(end_hour * 60) - start_minutes
    row_count = math.ceil(total_minutes / block)

    rows = tuple(start_minutes + i * block for i in range(row_count))
    return GridLayout(days=_visible_days(config), rows=rows)


def _visible_days(config: GridConfig) -> Tuple[int, ...]:
    days = []
    if config.include_sunday:
        days.append(SUNDAY)
    days.extend(WEEKDAYS)
    if config.include_saturday:
        days.append(SATURDAY)
    return tuple(days)


def day_label(day: int) -> str:
    """Abbreviated weekday name for a day index, e.g. 0 -> "Sun"."""
    return REFERENCE_WEEK_START.add(days=day % 7).format("ddd")


def time_label(minutes: int) -> str:
    """12-hour clock label for a minute offset, e.g. 510 -> "8:30 AM"."""
    return REFERENCE_WEEK_START.add(minutes=minutes % (24 * 60)).format("h:mm A")
