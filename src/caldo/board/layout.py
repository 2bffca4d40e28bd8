# src/caldo/board/layout.py

"""
Time -> pixel projection for the day grid.

Everything here is pure: the renderer passes in a TimeRange (from
calculate_time_range) and a LayoutConfig and gets numbers back.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from .clock import format_duration, is_same_day, split_clock
from .models import DEFAULT_LAYOUT, LayoutConfig, Task, TimeRange

logger = logging.getLogger(__name__)

RangeLike = TimeRange | Mapping[str, Any] | None


@dataclass(frozen=True, slots=True)
class TaskGeometry:
    task: Task
    top: float
    height: float  # full slot height (min-height applied)
    card_height: float  # drawn card: slot minus the buffer on both sides
    duration: int
    duration_label: str


@dataclass(frozen=True, slots=True)
class HourMarker:
    hour: int
    label: str
    label_top: float
    line_top: float


def _coerce_range(time_range: RangeLike, config: LayoutConfig) -> TimeRange | None:
    if time_range is None:
        return config.default_range
    if isinstance(time_range, TimeRange):
        return time_range
    if isinstance(time_range, Mapping):
        return TimeRange.from_dict(time_range)
    return None


def time_to_position(
    hour: int,
    minute: int,
    include_header_offset: bool = True,
    time_range: RangeLike = None,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> float:
    """
    Pixel offset of hour:minute from the top of the visible range.

    Affine in (hour * 60 + minute): config.scale pixels per minute, plus
    config.header_height when include_header_offset is set. An unusable
    range degrades to the header offset alone.
    """
    rng = _coerce_range(time_range, config)
    if rng is None:
        if config.debug:
            logger.debug("time_to_position: invalid time range %r", time_range)
        return config.header_height if include_header_offset else 0.0

    minutes_from_start = (hour - rng.start_hour) * 60 + minute - rng.start_minute_remainder
    position = minutes_from_start * config.scale
    if include_header_offset:
        position += config.header_height
    return position


def calculate_task_position(
    start: str,
    time_range: RangeLike,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> float | None:
    """Top of a task card; no header offset so cards line up with the hour lines."""
    parts = split_clock(start)
    if parts is None:
        return None
    hour, minute = parts
    return time_to_position(hour, minute, False, time_range, config)


def calculate_height(duration: float, config: LayoutConfig = DEFAULT_LAYOUT) -> float:
    # Exact duration height keeps grid alignment; the floor keeps short tasks visible.
    return max(config.min_task_height, duration * config.scale)


def calculate_current_time_position(
    now: datetime,
    time_range: RangeLike,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> float:
    return time_to_position(now.hour, now.minute, False, time_range, config)


def is_current_time_visible(
    now: datetime,
    time_range: RangeLike,
    *,
    today: date | None = None,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> bool:
    """The red "now" line is drawn only for today and only inside [start_hour, end_hour]."""
    if today is None:
        today = date.today()
    if not is_same_day(now, today):
        return False
    rng = _coerce_range(time_range, config)
    if rng is None:
        return False
    return rng.start_hour <= now.hour <= rng.end_hour


def board_height(time_range: RangeLike, config: LayoutConfig = DEFAULT_LAYOUT) -> float:
    rng = _coerce_range(time_range, config)
    hours = rng.visible_hours if rng is not None else 0
    return hours * 60 * config.scale + config.top_padding


def hour_markers(time_range: RangeLike, config: LayoutConfig = DEFAULT_LAYOUT) -> list[HourMarker]:
    """
    Hour labels and grid lines for the visible range.

    Labels are shifted up by the start remainder so the first label sits at
    the top edge; an hour that would land above the top is skipped (except
    the first one).
    """
    rng = _coerce_range(time_range, config)
    if rng is None:
        return []

    remainder_px = rng.start_minute_remainder * config.scale
    markers: list[HourMarker] = []
    for i in range(rng.visible_hours):
        hour = rng.start_hour + i
        line_top = time_to_position(hour, 0, False, rng, config)
        if line_top < 0 and i > 0:
            continue
        markers.append(
            HourMarker(
                hour=hour,
                label=f"{hour}:00",
                label_top=line_top - remainder_px,
                line_top=line_top,
            )
        )
    return markers


def task_geometry(
    tasks: Iterable[Task],
    time_range: RangeLike,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> list[TaskGeometry]:
    """Placement for every well-formed task; malformed ones are left out."""
    out: list[TaskGeometry] = []
    for task in tasks:
        duration = task.duration
        top = calculate_task_position(task.start, time_range, config)
        if duration is None or top is None:
            if config.debug:
                logger.debug("task_geometry: skipping malformed task %r", task)
            continue
        height = calculate_height(duration, config)
        out.append(
            TaskGeometry(
                task=task,
                top=top,
                height=height,
                card_height=height - 2 * config.task_buffer,
                duration=duration,
                duration_label=format_duration(duration),
            )
        )
    return out
