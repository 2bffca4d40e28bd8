# src/caldo/cli/update_tasks.py

"""
Task updater CLI (`caldo-tasks`).

Writes a whole day's task list through the configured storage backend:

  caldo-tasks schedule --start 14:45 --end 16:30 --tasks "Apply to job #1:15,Call the glasses store:15,Rest:45"
  caldo-tasks set --tasks '[{"title":"Task 1","start":"09:00","end":"10:00"}]'
  caldo-tasks clear

Every command takes --date yy-mm-dd (default: today).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from dataclasses import replace

from ..board.clock import format_date_key, is_date_key
from ..board.models import Task
from ..board.packing import parse_priority_list, schedule_tasks
from ..config import get_settings
from ..core.ports import DayTaskRepo
from ..logging_setup import setup_logging
from ..storage.errors import StorageError
from .bootstrap import create_repo

logger = logging.getLogger(__name__)


class CliError(Exception):
    """Invalid command-line input; reported to the user, exit status 1."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="caldo-tasks",
        description="Update the tasks shown on the caldo day board.",
    )
    parser.add_argument("--storage", choices=("sqlite", "http"), help="Override CALDO_STORAGE.")
    parser.add_argument("--server", help="Task API base URL (implies --storage http).")

    sub = parser.add_subparsers(dest="command", required=True)

    p_schedule = sub.add_parser("schedule", help="Pack a priority list back-to-back inside a window.")
    p_schedule.add_argument("--start", default="09:00", help="Window start HH:MM (default 09:00).")
    p_schedule.add_argument("--end", default="17:00", help="Window end HH:MM (default 17:00).")
    p_schedule.add_argument("--tasks", required=True, help='"Title:minutes,Title:minutes,..."')

    p_set = sub.add_parser("set", help="Replace the day's tasks with a JSON array.")
    p_set.add_argument("--tasks", required=True, help='[{"title": ..., "start": "HH:MM", "end": "HH:MM"}, ...]')

    sub.add_parser("clear", help="Delete all tasks for the day.")

    for p in (p_schedule, p_set, sub.choices["clear"]):
        p.add_argument("--date", help="Target day as yy-mm-dd (default: today).")

    return parser


def tasks_from_json(raw: str) -> list[Task]:
    """
    Decode the `set --tasks` payload.

    Missing ids become the 1-based position; missing `checked` becomes False.
    """
    try:
        payload = json.loads(raw)
    except ValueError as e:
        raise CliError(f"Error parsing tasks JSON: {e}") from e
    if not isinstance(payload, list):
        raise CliError("Tasks must be a JSON array")

    out: list[Task] = []
    for i, item in enumerate(payload, start=1):
        if not isinstance(item, dict):
            raise CliError(f"Task #{i} is not a JSON object")
        out.append(Task.from_dict(item, default_id=str(i)))
    return out


def _print_summary(action: str, date_key: str, tasks: list[Task]) -> None:
    print(f"Successfully {action} {len(tasks)} tasks for {date_key}")
    print("Tasks:")
    for task in tasks:
        print(f"- {task.title}: {task.start} - {task.end}")


async def _execute(args: argparse.Namespace, repo: DayTaskRepo, date_key: str) -> None:
    if args.command == "schedule":
        try:
            priorities = parse_priority_list(args.tasks)
            scheduled = schedule_tasks(priorities, args.start, args.end)
        except ValueError as e:
            raise CliError(str(e)) from e
        if not scheduled:
            raise CliError('Please provide tasks in the format: "Task 1:15,Task 2:30"')
        await repo.save(date_key, scheduled)
        _print_summary("scheduled", date_key, scheduled)

    elif args.command == "set":
        tasks = tasks_from_json(args.tasks)
        await repo.save(date_key, tasks)
        _print_summary("set", date_key, tasks)

    elif args.command == "clear":
        await repo.clear(date_key)
        print(f"Successfully cleared all tasks for {date_key}")


async def _run_async(args: argparse.Namespace, repo: DayTaskRepo, date_key: str) -> None:
    try:
        await _execute(args, repo, date_key)
    finally:
        await repo.aclose()


def _with_overrides(settings, args: argparse.Namespace):
    if args.server:
        return replace(settings, storage_backend="http", server_url=args.server.rstrip("/"))
    if args.storage:
        return replace(settings, storage_backend=args.storage)
    return settings


def run(argv: Sequence[str] | None = None, *, settings=None, repo: DayTaskRepo | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    date_key = args.date or format_date_key()
    if not is_date_key(date_key):
        print(f"Invalid --date {date_key!r}; expected yy-mm-dd", file=sys.stderr)
        return 1

    try:
        if repo is None:
            repo = create_repo(_with_overrides(settings or get_settings(), args))
        asyncio.run(_run_async(args, repo, date_key))
    except CliError as e:
        print(str(e), file=sys.stderr)
        return 1
    except StorageError as e:
        logger.debug("Storage failure", exc_info=True)
        print(f"Storage error: {e}", file=sys.stderr)
        return 1
    return 0


def main() -> None:
    settings = get_settings()
    setup_logging(log_dir=settings.data_dir, console_level=logging.WARNING)
    sys.exit(run())


if __name__ == "__main__":
    main()
