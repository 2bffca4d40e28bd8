# tests/test_reorder.py

from __future__ import annotations

from collections import Counter

from caldo.board.clock import format_clock
from caldo.board.reorder import move_item, reorder

from .fakes import make_task


def _times(tasks):
    return [(t.id, t.start, t.end) for t in tasks]


def test_moving_last_task_to_front_repacks_from_first_slot(sample_tasks) -> None:
    out = reorder(sample_tasks, 2, 0)
    assert _times(out) == [
        ("3", "09:00", "09:15"),
        ("1", "09:15", "09:45"),
        ("2", "09:45", "10:30"),
    ]


def test_moving_first_task_down_keeps_sequence_start(sample_tasks) -> None:
    out = reorder(sample_tasks, 0, 2)
    assert _times(out) == [
        ("2", "09:00", "09:45"),
        ("3", "09:45", "10:00"),
        ("1", "10:00", "10:30"),
    ]


def test_gaps_are_closed() -> None:
    tasks = [
        make_task("a", "08:00", "08:30"),
        make_task("b", "11:00", "12:00"),
        make_task("c", "15:00", "15:10"),
    ]
    out = reorder(tasks, 1, 2)
    assert _times(out) == [
        ("a", "08:00", "08:30"),
        ("c", "08:30", "08:40"),
        ("b", "08:40", "09:40"),
    ]


def test_same_index_and_missing_destination_are_noops(sample_tasks) -> None:
    assert reorder(sample_tasks, 1, 1) is sample_tasks
    assert reorder(sample_tasks, 1, None) is sample_tasks
    assert _times(reorder(sample_tasks, 1, 1)) == _times(sample_tasks)


def test_empty_list_and_bad_source_are_noops(sample_tasks) -> None:
    assert reorder([], 0, 1) == []
    assert reorder(sample_tasks, 7, 0) is sample_tasks
    assert reorder(sample_tasks, -1, 0) is sample_tasks


def test_reorder_preserves_ids_count_and_durations(sample_tasks) -> None:
    for source in range(3):
        for destination in range(3):
            out = reorder(sample_tasks, source, destination)
            assert len(out) == len(sample_tasks)
            assert Counter(t.id for t in out) == Counter(t.id for t in sample_tasks)
            before = {t.id: t.duration for t in sample_tasks}
            assert {t.id: t.duration for t in out} == before


def test_only_times_and_order_change() -> None:
    tasks = [
        make_task("1", "09:00", "09:30", "Write", checked=True),
        make_task("2", "10:00", "10:20", "Read"),
    ]
    out = reorder(tasks, 1, 0)
    assert [(t.id, t.title, t.checked) for t in out] == [("2", "Read", False), ("1", "Write", True)]
    # Input is not mutated
    assert _times(tasks) == [("1", "09:00", "09:30"), ("2", "10:00", "10:20")]


def test_destination_past_the_end_appends(sample_tasks) -> None:
    out = move_item(sample_tasks, 0, 99)
    assert [t.id for t in out] == ["2", "3", "1"]


def test_times_wrap_at_midnight() -> None:
    tasks = [make_task("1", "23:30", "23:50"), make_task("2", "08:00", "09:00")]
    out = reorder(tasks, 1, 0)
    assert _times(out) == [("2", "23:30", "00:30"), ("1", "00:30", "00:50")]


def test_malformed_task_packs_as_zero_length() -> None:
    tasks = [make_task("1", "09:00", "09:30"), make_task("2", "??", "10:00"), make_task("3", "10:00", "10:15")]
    out = reorder(tasks, 2, 1)
    assert _times(out) == [
        ("1", "09:00", "09:30"),
        ("3", "09:30", "09:45"),
        ("2", "09:45", "09:45"),
    ]


def test_format_clock_clamps_and_wraps() -> None:
    assert format_clock(-5) == "00:00"
    assert format_clock(float("nan")) == "00:00"
    assert format_clock(None) == "00:00"
    assert format_clock(1440 + 75) == "01:15"
    assert format_clock(615) == "10:15"


def test_backwards_task_does_not_pull_cursor_back() -> None:
    tasks = [make_task("a", "09:00", "10:00"), make_task("b", "11:00", "10:30")]
    moved = reorder(tasks, 1, 0)
    assert [(t.id, t.start, t.end) for t in moved] == [("b", "09:00", "09:00"), ("a", "09:00", "10:00")]
