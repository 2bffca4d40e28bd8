# src/caldo/board/time_range.py

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from .clock import MINUTES_PER_DAY
from .models import DEFAULT_LAYOUT, LayoutConfig, Task, TimeRange

logger = logging.getLogger(__name__)


def calculate_time_range(
    tasks: Iterable[Task] | None,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> TimeRange:
    """
    Derive the visible window for a day's tasks.

    - earliest start minus config.buffer_top_minutes (not before 00:00)
    - latest end plus config.buffer_bottom_minutes (not after 24:00)
    - start is floored to the hour, the leftover minutes kept as remainder
    - end is rounded up to the next whole hour

    Tasks whose start/end do not parse are skipped; with nothing usable
    the configured default range (08:00-18:00) is returned.
    """
    task_list = list(tasks or [])
    if config.debug:
        logger.debug("calculate_time_range called with %d tasks", len(task_list))

    if not task_list:
        if config.debug:
            logger.debug("calculate_time_range -> default (no tasks): %s", config.default_range)
        return config.default_range

    earliest = MINUTES_PER_DAY
    latest = 0
    valid_found = False

    for task in task_list:
        if not isinstance(task, Task) or not task.is_well_formed():
            if config.debug:
                logger.debug("calculate_time_range: skipping task with invalid start/end: %r", task)
            continue
        valid_found = True
        earliest = min(earliest, task.start_minutes)
        latest = max(latest, task.end_minutes)

    if not valid_found:
        if config.debug:
            logger.debug("calculate_time_range -> default (no valid tasks): %s", config.default_range)
        return config.default_range

    start_minutes = max(0, earliest - config.buffer_top_minutes)
    end_minutes = min(MINUTES_PER_DAY, latest + config.buffer_bottom_minutes)

    start_hour = start_minutes // 60
    remainder = start_minutes % 60
    end_hour = max(start_hour, math.ceil(end_minutes / 60))

    result = TimeRange(start_hour=start_hour, end_hour=end_hour, start_minute_remainder=remainder)
    if config.debug:
        logger.debug("calculate_time_range -> %s", result)
    return result
