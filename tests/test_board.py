# tests/test_board.py

from __future__ import annotations

import asyncio
import logging
import re
from datetime import date, datetime

import pytest

from caldo.board.service import DayBoard, next_task_id

from .conftest import DATE_KEY
from .fakes import FailingRepo, FakeDayTaskRepo, GatedRepo, make_task


def test_next_task_id_uses_max_numeric_id() -> None:
    assert next_task_id([]) == "1"
    assert next_task_id([make_task("1", "09:00", "10:00"), make_task("7", "10:00", "11:00")]) == "8"
    assert next_task_id([make_task("abc", "09:00", "10:00"), make_task("2", "10:00", "11:00")]) == "3"


@pytest.mark.asyncio
async def test_reload_reads_the_board_date(repo: FakeDayTaskRepo, sample_tasks) -> None:
    board = DayBoard(repo, date_key=DATE_KEY)
    assert board.tasks == []

    loaded = await board.reload()
    assert loaded == sample_tasks
    assert repo.calls == [("load", DATE_KEY)]

    await board.reload(date_key="26-10-19")
    assert board.date_key == "26-10-19"
    assert board.tasks == []


@pytest.mark.asyncio
async def test_toggle_check_persists_whole_list(repo: FakeDayTaskRepo) -> None:
    board = DayBoard(repo, date_key=DATE_KEY)
    await board.reload()

    assert await board.toggle_check("2") is True
    assert [t.checked for t in board.tasks] == [False, True, False]
    assert [t.checked for t in repo.days[DATE_KEY]] == [False, True, False]

    assert await board.toggle_check("2") is True
    assert repo.days[DATE_KEY][1].checked is False

    assert await board.toggle_check("404") is False
    assert repo.calls.count(("save", DATE_KEY)) == 2


@pytest.mark.asyncio
async def test_create_update_delete(repo: FakeDayTaskRepo) -> None:
    board = DayBoard(repo, date_key=DATE_KEY)
    await board.reload()

    task = await board.create_task("  Write report ", "13:00", "14:00")
    assert task.id == "4"
    assert task.title == "Write report"
    assert task.checked is False
    assert repo.days[DATE_KEY][-1] == task

    await board.toggle_check("4")
    assert await board.update_task("4", "Write summary", "13:30", "14:15") is True
    updated = board.find("4")
    assert updated is not None
    assert (updated.title, updated.start, updated.end, updated.checked) == ("Write summary", "13:30", "14:15", True)

    assert await board.update_task("99", "Nope", "09:00", "10:00") is False

    assert await board.delete_task("1") is True
    assert [t.id for t in repo.days[DATE_KEY]] == ["2", "3", "4"]
    assert await board.delete_task("1") is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("title", "start", "end", "message"),
    [
        ("", "09:00", "10:00", "Please fill in all fields"),
        ("Lunch", "", "13:00", "Please fill in all fields"),
        ("Lunch", "12:00", "   ", "Please fill in all fields"),
        ("Lunch", "noon", "13:00", "Start and end must be HH:MM (24h)"),
        ("Lunch", "12:00", "25:00", "Start and end must be HH:MM (24h)"),
    ],
)
async def test_create_rejects_missing_or_invalid_fields(
    repo: FakeDayTaskRepo, title: str, start: str, end: str, message: str
) -> None:
    board = DayBoard(repo, date_key=DATE_KEY)
    await board.reload()

    with pytest.raises(ValueError, match=re.escape(message)):
        await board.create_task(title, start, end)
    assert len(board.tasks) == 3
    assert ("save", DATE_KEY) not in repo.calls


@pytest.mark.asyncio
async def test_move_task_retimes_and_persists(repo: FakeDayTaskRepo) -> None:
    board = DayBoard(repo, date_key=DATE_KEY)
    await board.reload()

    moved = await board.move_task(2, 0)
    assert [(t.title, t.start, t.end) for t in moved] == [
        ("C", "09:00", "09:15"),
        ("A", "09:15", "09:45"),
        ("B", "09:45", "10:30"),
    ]
    assert repo.days[DATE_KEY] == moved


@pytest.mark.asyncio
async def test_move_task_noop_does_not_write(repo: FakeDayTaskRepo) -> None:
    board = DayBoard(repo, date_key=DATE_KEY)
    await board.reload()

    await board.move_task(1, 1)
    await board.move_task(0, None)
    await board.move_task(9, 0)
    assert ("save", DATE_KEY) not in repo.calls


@pytest.mark.asyncio
async def test_clear_uses_repo_clear(repo: FakeDayTaskRepo) -> None:
    board = DayBoard(repo, date_key=DATE_KEY)
    await board.reload()

    assert await board.clear() is True
    assert board.tasks == []
    assert DATE_KEY not in repo.days
    assert repo.calls[-1] == ("clear", DATE_KEY)


@pytest.mark.asyncio
async def test_failed_writes_keep_memory_state(caplog: pytest.LogCaptureFixture) -> None:
    repo = FailingRepo()
    board = DayBoard(repo, date_key=DATE_KEY)

    with caplog.at_level(logging.ERROR, logger="caldo.board.service"):
        assert await board.reload() == []
        task = await board.create_task("Offline task", "09:00", "09:30")
        assert await board.toggle_check(task.id) is False

    assert [(t.title, t.checked) for t in board.tasks] == [("Offline task", True)]
    assert repo.attempts == 3
    assert "Failed to save" in caplog.text

    assert await board.clear() is False
    assert board.tasks == []


@pytest.mark.asyncio
async def test_failed_reload_keeps_cached_tasks(sample_tasks) -> None:
    repo = FakeDayTaskRepo(days={DATE_KEY: list(sample_tasks)})
    board = DayBoard(repo, date_key=DATE_KEY)
    await board.reload()

    board._repo = FailingRepo()
    assert await board.reload() == sample_tasks


@pytest.mark.asyncio
async def test_superseded_reload_is_discarded() -> None:
    repo = GatedRepo(
        days={
            "26-10-17": [make_task("1", "07:00", "08:00", "Yesterday")],
            "26-10-18": [make_task("1", "09:00", "10:00", "Today")],
        }
    )
    board = DayBoard(repo, date_key="26-10-18")
    repo.gate("26-10-17")

    slow = asyncio.create_task(board.reload(date_key="26-10-17"))
    await asyncio.sleep(0)
    await board.reload(date_key="26-10-18")

    repo.release("26-10-17")
    await slow

    assert board.date_key == "26-10-18"
    assert [t.title for t in board.tasks] == ["Today"]


@pytest.mark.asyncio
async def test_layout_helpers_follow_tasks(repo: FakeDayTaskRepo) -> None:
    board = DayBoard(repo, date_key=DATE_KEY)
    await board.reload()

    rng = board.time_range()
    assert (rng.start_hour, rng.end_hour, rng.start_minute_remainder) == (8, 11, 58)
    assert board.height() == 3 * 60 * 2 + 5
    assert [m.label for m in board.grid()] == ["8:00", "9:00", "10:00"]
    assert [g.task.id for g in board.geometry()] == ["1", "2", "3"]

    today = date(2026, 10, 18)
    assert board.current_time_marker(datetime(2026, 10, 18, 9, 0), today=today) is not None
    assert board.current_time_marker(datetime(2026, 10, 18, 12, 0), today=today) is None
    assert board.current_time_marker(datetime(2026, 10, 17, 9, 0), today=today) is None


@pytest.mark.asyncio
async def test_failed_date_switch_stays_on_current_day() -> None:
    repo = FakeDayTaskRepo(
        days={
            "26-10-18": [make_task("1", "09:00", "10:00", "Today")],
            "26-10-19": [make_task("1", "11:00", "12:00", "Tomorrow")],
        },
        unreadable={"26-10-19"},
    )
    board = DayBoard(repo, date_key="26-10-18")
    await board.reload()

    await board.reload(date_key="26-10-19")
    assert board.date_key == "26-10-18"
    assert [t.title for t in board.tasks] == ["Today"]

    await board.toggle_check("1")
    assert [(t.title, t.checked) for t in repo.days["26-10-18"]] == [("Today", True)]
    assert [(t.title, t.start) for t in repo.days["26-10-19"]] == [("Tomorrow", "11:00")]


@pytest.mark.asyncio
async def test_failed_move_keeps_new_order(sample_tasks, caplog: pytest.LogCaptureFixture) -> None:
    repo = FakeDayTaskRepo(days={DATE_KEY: list(sample_tasks)})
    board = DayBoard(repo, date_key=DATE_KEY)
    await board.reload()
    board._repo = FailingRepo()

    with caplog.at_level(logging.ERROR, logger="caldo.board.service"):
        moved = await board.move_task(2, 0)

    expected = [("C", "09:00", "09:15"), ("A", "09:15", "09:45"), ("B", "09:45", "10:30")]
    assert [(t.title, t.start, t.end) for t in moved] == expected
    assert [(t.title, t.start, t.end) for t in board.tasks] == expected
    assert board.saved is False
    assert "Failed to save" in caplog.text
