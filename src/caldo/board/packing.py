# src/caldo/board/packing.py

"""
Forward-fill packing: place items back-to-back starting from an anchor.

Used both when a drag reorders the day (durations preserved, no window) and
by the CLI scheduler (durations clipped to a window end).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .clock import format_clock, parse_clock
from .models import Task


@dataclass(frozen=True, slots=True)
class PriorityTask:
    title: str
    duration_minutes: int


def pack_back_to_back(
    durations: Iterable[int],
    anchor_minutes: int,
    *,
    window_end_minutes: int | None = None,
) -> list[tuple[int, int]]:
    """
    Return (start, end) minute pairs: the first starts at anchor_minutes, each
    next one at the previous end. With window_end_minutes, ends are clipped
    to it (items past the window collapse to zero length at the window end).
    """
    slots: list[tuple[int, int]] = []
    cursor = anchor_minutes
    for duration in durations:
        start = cursor
        end = start + duration
        if window_end_minutes is not None:
            end = min(window_end_minutes, end)
        slots.append((start, end))
        cursor = end
    return slots


def schedule_tasks(
    priority_tasks: Sequence[PriorityTask],
    start_time: str,
    end_time: str,
) -> list[Task]:
    """
    Lay out a priority list inside [start_time, end_time].

    Ids are the 1-based position; every scheduled task starts unchecked.
    """
    start_minutes = parse_clock(start_time)
    end_minutes = parse_clock(end_time)
    if start_minutes is None or end_minutes is None:
        raise ValueError(f"Invalid time window: {start_time!r} - {end_time!r} (expected HH:MM)")

    slots = pack_back_to_back(
        (max(0, p.duration_minutes) for p in priority_tasks),
        start_minutes,
        window_end_minutes=end_minutes,
    )
    return [
        Task(
            id=str(i),
            title=p.title,
            start=format_clock(start),
            end=format_clock(end),
            checked=False,
        )
        for i, (p, (start, end)) in enumerate(zip(priority_tasks, slots), start=1)
    ]


def parse_priority_list(raw: str) -> list[PriorityTask]:
    """
    Parse "Title:minutes,Title:minutes,...".

    The duration is taken after the last colon, so titles may contain colons.
    """
    out: list[PriorityTask] = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        title, sep, minutes = chunk.rpartition(":")
        if not sep or not title.strip():
            raise ValueError(f"Invalid task entry {chunk!r}; expected 'Title:minutes'")
        try:
            duration = int(minutes.strip())
        except ValueError:
            raise ValueError(f"Invalid duration in {chunk!r}; expected whole minutes") from None
        if duration < 0:
            raise ValueError(f"Negative duration in {chunk!r}")
        out.append(PriorityTask(title=title.strip(), duration_minutes=duration))
    return out
