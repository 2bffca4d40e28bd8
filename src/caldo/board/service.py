# src/caldo/board/service.py

"""
Day board service.

Holds the in-memory copy of one date's task list and writes the whole list
back through a DayTaskRepo after every mutation:
- toggle / create / update / delete / move -> save(date, tasks)
- clear                                    -> clear(date)

The in-memory list is updated first. A failed write is logged and leaves the
in-memory state as the source of truth until the next reload; nothing is
rolled back and nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime

from ..core.ports import DayTaskRepo
from .clock import format_date_key, parse_clock
from .layout import (
    HourMarker,
    TaskGeometry,
    board_height,
    calculate_current_time_position,
    hour_markers,
    is_current_time_visible,
    task_geometry,
)
from .models import DEFAULT_LAYOUT, LayoutConfig, Task, TimeRange
from .reorder import reorder
from .time_range import calculate_time_range

logger = logging.getLogger(__name__)


def next_task_id(tasks: list[Task]) -> str:
    """Max numeric id + 1 ("1" for an empty list); non-numeric ids are ignored."""
    numeric = [int(t.id) for t in tasks if str(t.id).isdigit()]
    return str(max(numeric) + 1 if numeric else 1)


def _require_fields(title: str, start: str, end: str) -> tuple[str, str, str]:
    title = (title or "").strip()
    start = (start or "").strip()
    end = (end or "").strip()
    if not title or not start or not end:
        raise ValueError("Please fill in all fields")
    if parse_clock(start) is None or parse_clock(end) is None:
        raise ValueError("Start and end must be HH:MM (24h)")
    return title, start, end


class DayBoard:
    def __init__(
        self,
        repo: DayTaskRepo,
        *,
        date_key: str | None = None,
        layout: LayoutConfig = DEFAULT_LAYOUT,
    ) -> None:
        self._repo = repo
        self._date_key = date_key or format_date_key()
        self._layout = layout
        self._tasks: list[Task] = []
        self._reload_generation = 0
        self._saved = True

    # ---- state ----

    @property
    def date_key(self) -> str:
        return self._date_key

    @property
    def layout(self) -> LayoutConfig:
        return self._layout

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def saved(self) -> bool:
        """Whether the last write reached storage."""
        return self._saved

    def find(self, task_id: str) -> Task | None:
        key = str(task_id)
        for task in self._tasks:
            if str(task.id) == key:
                return task
        return None

    # ---- persistence ----

    async def reload(self, *, date_key: str | None = None) -> list[Task]:
        """
        Replace the in-memory list with what storage has for the date.

        If a newer reload starts while this one is waiting, this result is
        dropped. The board switches to date_key only once its list has
        loaded; on failure both the date and the cached list stay as they
        were, so a later save cannot land under the wrong date.
        """
        target = date_key or self._date_key
        self._reload_generation += 1
        generation = self._reload_generation

        try:
            loaded = await self._repo.load(target)
        except Exception:
            logger.exception(
                "Failed to load tasks for %s; staying on %s with %d cached",
                target,
                self._date_key,
                len(self._tasks),
            )
            return self.tasks

        if generation != self._reload_generation:
            logger.debug("Reload for %s superseded; discarding result", target)
            return self.tasks

        self._date_key = target
        self._tasks = list(loaded)
        logger.info("Loaded %d tasks for %s", len(self._tasks), target)
        return self.tasks

    async def _persist(self) -> bool:
        try:
            await self._repo.save(self._date_key, list(self._tasks))
        except Exception:
            logger.exception("Failed to save %d tasks for %s", len(self._tasks), self._date_key)
            self._saved = False
            return False
        self._saved = True
        return True

    # ---- mutations ----

    async def toggle_check(self, task_id: str) -> bool:
        task = self.find(task_id)
        if task is None:
            logger.warning("toggle_check: no task with id=%s", task_id)
            return False
        self._tasks = [
            replace(t, checked=not t.checked) if t is task else t for t in self._tasks
        ]
        return await self._persist()

    async def create_task(self, title: str, start: str, end: str) -> Task:
        """Append a new unchecked task. Raises ValueError on empty/invalid fields."""
        title, start, end = _require_fields(title, start, end)
        task = Task(id=next_task_id(self._tasks), title=title, start=start, end=end, checked=False)
        self._tasks = [*self._tasks, task]
        logger.info("Created task id=%s %s-%s %r", task.id, start, end, title)
        await self._persist()
        return task

    async def update_task(self, task_id: str, title: str, start: str, end: str) -> bool:
        """Replace title/start/end of an existing task; id and checked are kept."""
        title, start, end = _require_fields(title, start, end)
        task = self.find(task_id)
        if task is None:
            logger.warning("update_task: no task with id=%s", task_id)
            return False
        updated = replace(task, title=title, start=start, end=end)
        self._tasks = [updated if t is task else t for t in self._tasks]
        return await self._persist()

    async def delete_task(self, task_id: str) -> bool:
        key = str(task_id)
        remaining = [t for t in self._tasks if str(t.id) != key]
        if len(remaining) == len(self._tasks):
            logger.warning("delete_task: no task with id=%s", task_id)
            return False
        self._tasks = remaining
        logger.info("Deleted task id=%s", key)
        return await self._persist()

    async def clear(self) -> bool:
        self._tasks = []
        try:
            await self._repo.clear(self._date_key)
        except Exception:
            logger.exception("Failed to clear tasks for %s", self._date_key)
            self._saved = False
            return False
        self._saved = True
        logger.info("Cleared all tasks for %s", self._date_key)
        return True

    async def move_task(self, source_index: int, destination_index: int | None) -> list[Task]:
        """Apply a drag: re-time the list in memory, then write it back."""
        new_tasks = reorder(self._tasks, source_index, destination_index)
        if new_tasks is self._tasks:
            return self.tasks
        self._tasks = new_tasks
        await self._persist()
        return self.tasks

    # ---- layout ----

    def time_range(self) -> TimeRange:
        return calculate_time_range(self._tasks, self._layout)

    def geometry(self) -> list[TaskGeometry]:
        return task_geometry(self._tasks, self.time_range(), self._layout)

    def grid(self) -> list[HourMarker]:
        return hour_markers(self.time_range(), self._layout)

    def height(self) -> float:
        return board_height(self.time_range(), self._layout)

    def current_time_marker(self, now: datetime | None = None, *, today: date | None = None) -> float | None:
        """Pixel offset of the "now" line, or None when it is not shown."""
        now = now or datetime.now()
        rng = self.time_range()
        if not is_current_time_visible(now, rng, today=today, config=self._layout):
            return None
        return calculate_current_time_position(now, rng, self._layout)
