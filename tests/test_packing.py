# tests/test_packing.py

from __future__ import annotations

import pytest

from caldo.board.packing import PriorityTask, pack_back_to_back, parse_priority_list, schedule_tasks


def test_schedule_packs_from_window_start() -> None:
    tasks = schedule_tasks(parse_priority_list("Call:15,Plan:30"), "09:00", "17:00")
    assert [(t.id, t.title, t.start, t.end, t.checked) for t in tasks] == [
        ("1", "Call", "09:00", "09:15", False),
        ("2", "Plan", "09:15", "09:45", False),
    ]


def test_schedule_clips_to_window_end() -> None:
    tasks = schedule_tasks(
        [PriorityTask("Long", 90), PriorityTask("Overflow", 30)],
        "14:45",
        "16:00",
    )
    assert [(t.start, t.end) for t in tasks] == [("14:45", "16:00"), ("16:00", "16:00")]


def test_schedule_rejects_bad_window() -> None:
    with pytest.raises(ValueError):
        schedule_tasks([PriorityTask("x", 10)], "9am", "17:00")


def test_pack_back_to_back_without_window() -> None:
    assert pack_back_to_back([30, 0, 45], 600) == [(600, 630), (630, 630), (630, 675)]
    assert pack_back_to_back([], 600) == []


def test_parse_priority_list() -> None:
    parsed = parse_priority_list(" Apply to job #1:15, Call: the store:20 ,,Rest:45")
    assert parsed == [
        PriorityTask("Apply to job #1", 15),
        PriorityTask("Call: the store", 20),
        PriorityTask("Rest", 45),
    ]


@pytest.mark.parametrize("raw", ["NoDuration", "Title:abc", ":15", "Back:-5"])
def test_parse_priority_list_rejects_bad_entries(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_priority_list(raw)
