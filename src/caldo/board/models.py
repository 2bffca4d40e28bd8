# src/caldo/board/models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .clock import calculate_duration, parse_clock


@dataclass(slots=True)
class Task:
    """
    One titled time interval on a single day.

    start/end are "HH:MM" strings exactly as stored; they are not validated here
    because the board must tolerate (and skip) malformed records from storage.
    """

    id: str
    title: str
    start: str
    end: str
    checked: bool = False

    @property
    def start_minutes(self) -> int | None:
        return parse_clock(self.start)

    @property
    def end_minutes(self) -> int | None:
        return parse_clock(self.end)

    @property
    def duration(self) -> int | None:
        return calculate_duration(self.start, self.end)

    def is_well_formed(self) -> bool:
        return self.start_minutes is not None and self.end_minutes is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "start": self.start,
            "end": self.end,
            "checked": self.checked,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], *, default_id: str = "") -> Task:
        raw_id = raw.get("id")
        task_id = default_id if raw_id is None or str(raw_id) == "" else str(raw_id)
        return cls(
            id=task_id,
            title=str(raw.get("title") or ""),
            start=str(raw.get("start") or ""),
            end=str(raw.get("end") or ""),
            checked=bool(raw.get("checked", False)),
        )


def tasks_from_payload(payload: Any) -> list[Task]:
    """Decode a stored/wire JSON array; non-object entries are dropped."""
    if not isinstance(payload, list):
        return []
    return [Task.from_dict(item) for item in payload if isinstance(item, Mapping)]


def tasks_to_payload(tasks: list[Task]) -> list[dict[str, Any]]:
    return [t.to_dict() for t in tasks]


@dataclass(frozen=True, slots=True)
class TimeRange:
    """Visible window of the day grid: whole hours plus a sub-hour start offset."""

    start_hour: int
    end_hour: int
    start_minute_remainder: int = 0

    @property
    def start_minutes(self) -> int:
        return self.start_hour * 60 + self.start_minute_remainder

    @property
    def visible_hours(self) -> int:
        return max(0, self.end_hour - self.start_hour)

    def to_dict(self) -> dict[str, int]:
        return {
            "startHour": self.start_hour,
            "endHour": self.end_hour,
            "startMinuteRemainder": self.start_minute_remainder,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> TimeRange | None:
        """Accept the camelCase wire shape; None when a required field is missing."""
        try:
            start_hour = int(raw["startHour"])
            end_hour = int(raw["endHour"])
            remainder = int(raw.get("startMinuteRemainder") or 0)
        except (KeyError, TypeError, ValueError):
            return None
        return cls(start_hour=start_hour, end_hour=end_hour, start_minute_remainder=remainder)


DEFAULT_TIME_RANGE = TimeRange(start_hour=8, end_hour=18, start_minute_remainder=0)


@dataclass(frozen=True, slots=True)
class LayoutConfig:
    """
    Pixel/time constants for the day grid.

    debug enables verbose tracing of range/position computations
    (logged at DEBUG under caldo.board.*).
    """

    scale: float = 2.0  # pixels per minute
    header_height: float = 35.0
    top_padding: float = 5.0
    min_task_height: float = 32.0
    task_buffer: float = 2.0
    buffer_top_minutes: int = 2
    buffer_bottom_minutes: int = 10
    default_range: TimeRange = field(default=DEFAULT_TIME_RANGE)
    debug: bool = False

    @classmethod
    def from_settings(cls, settings: object) -> LayoutConfig:
        return cls(debug=bool(getattr(settings, "debug_layout", False)))


DEFAULT_LAYOUT = LayoutConfig()
