# src/caldo/board/reorder.py

from __future__ import annotations

import logging
from dataclasses import replace

from .clock import format_clock
from .models import Task
from .packing import pack_back_to_back

logger = logging.getLogger(__name__)


def move_item(tasks: list[Task], source_index: int, destination_index: int) -> list[Task]:
    """Array move: remove at source, insert at destination (clamped); others keep their order."""
    reordered = list(tasks)
    moved = reordered.pop(source_index)
    destination_index = max(0, min(destination_index, len(reordered)))
    reordered.insert(destination_index, moved)
    return reordered


def reorder(
    tasks: list[Task],
    source_index: int,
    destination_index: int | None,
) -> list[Task]:
    """
    Re-time the day after a drag from source_index to destination_index.

    The tasks are packed back-to-back in their new order. The first slot
    keeps the start time it had before the move, whichever task lands in
    it; every task keeps its own duration, so only placement shifts.

    Returns the input list unchanged when there is nothing to do (no
    destination, same index, empty list, source out of range).
    """
    if destination_index is None or destination_index == source_index:
        return tasks
    if not tasks or not 0 <= source_index < len(tasks):
        logger.debug("reorder ignored: source=%s len=%s", source_index, len(tasks))
        return tasks

    reordered = move_item(tasks, source_index, destination_index)

    anchor = tasks[0].start_minutes or 0
    # Malformed or backwards times pack as zero-length.
    durations = [max(0, t.duration or 0) for t in reordered]
    slots = pack_back_to_back(durations, anchor)

    result = [
        replace(task, start=format_clock(start), end=format_clock(end))
        for task, (start, end) in zip(reordered, slots)
    ]
    logger.debug(
        "reorder %s -> %s: %s",
        source_index,
        destination_index,
        ", ".join(f"{t.id}@{t.start}-{t.end}" for t in result),
    )
    return result
