# src/caldo/core/state.py

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any, TypeVar

from ..board.service import DayBoard
from .ports import DayTaskRepo

T = TypeVar("T")


def _deny(_prompt: str) -> bool:
    return False


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    repo: DayTaskRepo
    board: DayBoard

    # Asks the user to confirm destructive actions (delete, clear-all).
    # Connectors replace it; the default refuses.
    confirm: Callable[[str], bool] = _deny

    runner: asyncio.Runner = field(default_factory=asyncio.Runner)

    def run(self, coro: Coroutine[Any, Any, T]) -> T:
        """Run a board coroutine to completion from synchronous connector code."""
        return self.runner.run(coro)

    def close(self) -> None:
        try:
            self.runner.run(self.repo.aclose())
        finally:
            self.runner.close()
