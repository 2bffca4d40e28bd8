# src/caldo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the storage backend (local SQLite or the task HTTP API),
- wires the repo and the day board into AppState.
"""

from __future__ import annotations

import logging

from ..board.models import LayoutConfig
from ..board.service import DayBoard
from ..config import get_settings
from ..core.ports import DayTaskRepo
from ..core.state import AppState
from ..storage.api_client import HttpTaskApi
from ..storage.task_store import SqliteTaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_repo(settings) -> DayTaskRepo:
    backend = str(getattr(settings, "storage_backend", "sqlite")).lower()
    if backend == "http":
        logger.info("Using task API at %s", settings.server_url)
        return HttpTaskApi(
            settings.server_url,
            timeout_seconds=float(getattr(settings, "http_timeout_seconds", 10.0)),
        )
    logger.info("Using local task store at %s", settings.tasks_db_path)
    return SqliteTaskStore(settings.tasks_db_path)


def create_initial_state(*, settings=None, repo: DayTaskRepo | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the repo) injectable makes the app easier to test and
    avoids hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if repo is None:
        _ensure_local_dirs(settings)
        repo = create_repo(settings)

    board = DayBoard(repo, layout=LayoutConfig.from_settings(settings))
    return AppState(settings=settings, repo=repo, board=board)
