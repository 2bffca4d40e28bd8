# src/caldo/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..board.clock import format_duration
from ..core.state import AppState

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _split_title_and_times(args: list[str]) -> tuple[str, str, str] | None:
    # "/add Deep work 09:00 10:30" -> ("Deep work", "09:00", "10:30")
    if len(args) < 3:
        return None
    return " ".join(args[:-2]), args[-2], args[-1]


def _parse_index(raw: str) -> int | None:
    try:
        return int(raw)
    except ValueError:
        return None


def render_tasks(state: AppState, now: datetime | None = None) -> str:
    board = state.board
    tasks = board.tasks
    if not tasks:
        return f"No tasks for {board.date_key}"

    lines = [f"Tasks for {board.date_key}:"]
    for i, task in enumerate(tasks):
        mark = "x" if task.checked else " "
        duration = task.duration
        dur = f" ({format_duration(duration)})" if duration is not None and duration >= 0 else ""
        lines.append(f"  {i}. [{mark}] {task.start}-{task.end}{dur} {task.title}  (id={task.id})")

    marker = board.current_time_marker(now)
    if marker is not None:
        now = now or datetime.now()
        lines.append(f"  -- now {now:%H:%M} --")
    return "\n".join(lines)


def render_layout(state: AppState, now: datetime | None = None) -> str:
    board = state.board
    rng = board.time_range()
    lines = [
        f"Range {rng.start_hour}:00-{rng.end_hour}:00 (+{rng.start_minute_remainder}m), "
        f"board height {board.height():.0f}px"
    ]
    for marker in board.grid():
        lines.append(f"  {marker.label:>6} line@{marker.line_top:.0f}px")
    for geo in board.geometry():
        lines.append(
            f"  task {geo.task.id}: top={geo.top:.0f}px height={geo.height:.0f}px "
            f"({geo.duration_label}) {geo.task.title}"
        )
    marker = board.current_time_marker(now)
    if marker is not None:
        lines.append(f"  now: top={marker:.0f}px")
    return "\n".join(lines)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_show(state: AppState, args: list[str]) -> str:
    return render_tasks(state)


def cmd_layout(state: AppState, args: list[str]) -> str:
    return render_layout(state)


def cmd_reload(state: AppState, args: list[str]) -> str:
    state.run(state.board.reload())
    return render_tasks(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title...> <start> <end>"""
    parsed = _split_title_and_times(args)
    if parsed is None:
        return "Usage: /add <title> <HH:MM> <HH:MM>"
    title, start, end = parsed
    try:
        task = state.run(state.board.create_task(title, start, end))
    except ValueError as e:
        return str(e)
    reply = f"Added task {task.id}: {task.start}-{task.end} {task.title}"
    return reply if state.board.saved else f"{reply} (not saved, see log)"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <id> <title...> <start> <end>"""
    if not args:
        return "Usage: /edit <id> <title> <HH:MM> <HH:MM>"
    parsed = _split_title_and_times(args[1:])
    if parsed is None:
        return "Usage: /edit <id> <title> <HH:MM> <HH:MM>"
    title, start, end = parsed
    if state.board.find(args[0]) is None:
        return f"No task with id={args[0]}."
    try:
        ok = state.run(state.board.update_task(args[0], title, start, end))
    except ValueError as e:
        return str(e)
    return f"Updated task {args[0]}." if ok else f"Updated task {args[0]} (not saved, see log)."


def cmd_check(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /check <id>"
    task = state.board.find(args[0])
    if task is None:
        return f"No task with id={args[0]}."
    ok = state.run(state.board.toggle_check(args[0]))
    reply = f"Task {args[0]} {'checked' if not task.checked else 'unchecked'}."
    return reply if ok else f"{reply[:-1]} (not saved, see log)."


def cmd_del(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /del <id>"
    task = state.board.find(args[0])
    if task is None:
        return f"No task with id={args[0]}."
    if not state.confirm(f"Are you sure you want to delete '{task.title}'?"):
        return "Cancelled."
    ok = state.run(state.board.delete_task(args[0]))
    return f"Deleted task {args[0]}." if ok else f"Deleted task {args[0]} (not saved, see log)."


def cmd_move(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/move <from> <to>  (positions as shown by /show, 0-based)"""
    if len(args) != 2:
        return "Usage: /move <from> <to>"
    source, destination = _parse_index(args[0]), _parse_index(args[1])
    if source is None or destination is None:
        return "Usage: /move <from> <to> (whole numbers)"
    if not 0 <= source < len(state.board.tasks):
        return f"No task at position {source}."
    if emit:
        emit(f"Moving {source} -> {destination}...")
    state.run(state.board.move_task(source, destination))
    return render_tasks(state)


def cmd_clear(state: AppState, args: list[str]) -> str:
    if not state.confirm(f"Clear all tasks for {state.board.date_key}?"):
        return "Cancelled."
    ok = state.run(state.board.clear())
    return "All tasks cleared." if ok else "Cleared locally; storage did not confirm (see log)."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("show", cmd_show, help_text="List today's tasks.", aliases=["ls"])
registry.register("layout", cmd_layout, help_text="Show time range and pixel geometry.")
registry.register("reload", cmd_reload, help_text="Reload tasks from storage.", aliases=["refresh"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> <HH:MM> <HH:MM>.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> <title> <HH:MM> <HH:MM>.")
registry.register("check", cmd_check, help_text="Toggle a task's checkbox: /check <id>.")
registry.register("del", cmd_del, help_text="Delete a task: /del <id>.", aliases=["rm"])
registry.register("move", cmd_move, help_text="Drag a task and re-time the day: /move <from> <to>.")
registry.register("clear", cmd_clear, help_text="Delete all tasks for today.")
