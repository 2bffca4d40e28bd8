# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from caldo.board.service import DayBoard
from caldo.core.state import AppState

from .fakes import FakeDayTaskRepo, make_task

DATE_KEY = "26-10-18"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="caldo-test",
        log_level="DEBUG",
        storage_backend="sqlite",
        server_url="http://tasks.test",
        http_timeout_seconds=2.0,
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        debug_layout=True,
    )


@pytest.fixture()
def sample_tasks():
    return [
        make_task("1", "09:00", "09:30", "A"),
        make_task("2", "09:30", "10:15", "B"),
        make_task("3", "10:15", "10:30", "C"),
    ]


@pytest.fixture()
def repo(sample_tasks) -> FakeDayTaskRepo:
    return FakeDayTaskRepo(days={DATE_KEY: list(sample_tasks)})


@pytest.fixture()
def state(settings: SimpleNamespace, repo: FakeDayTaskRepo) -> Iterator[AppState]:
    """
    AppState wired with the in-memory repo and an already loaded board.

    Destructive commands are auto-confirmed; tests that check the refusal
    path replace state.confirm.
    """
    board = DayBoard(repo, date_key=DATE_KEY)
    st = AppState(settings=settings, repo=repo, board=board, confirm=lambda _prompt: True)
    st.run(board.reload())
    yield st
    st.close()
