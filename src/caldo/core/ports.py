# src/caldo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the board.

The board depends on Protocols instead of concrete implementations.
This keeps the storage backend (local SQLite vs. the task HTTP API) swappable
and makes testing easier.
"""

from typing import Protocol

from ..board.models import Task


class DayTaskRepo(Protocol):
    """
    Date-keyed, whole-list task storage.

    - load:  GET    tasks for date -> full list ([] when the date has none)
    - save:  POST   tasks for date <- full list (replaces what was stored)
    - clear: DELETE tasks for date

    Implementations raise StorageError on failure. There is no partial update
    and no versioning: the last save wins.
    """

    async def load(self, date_key: str) -> list[Task]: ...

    async def save(self, date_key: str, tasks: list[Task]) -> None: ...

    async def clear(self, date_key: str) -> None: ...

    async def aclose(self) -> None: ...
