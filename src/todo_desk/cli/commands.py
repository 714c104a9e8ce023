# src/todo_desk/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import date, datetime
from typing import Union, cast

from ..core.state import AppState
from ..tasks.errors import TaskLoadError, TaskSaveError
from ..tasks.task_models import DateFilter, Task

CommandEmitter = Callable[[str], None]
CommandResult = Union[str, Awaitable[str]]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console shell (/help, /add, ...)."""

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

    async def handle(
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
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            result = await result
        return cast(str, result)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing helpers ----


def parse_due(raw: str) -> datetime | None:
    """'2026-10-20' -> datetime; 'none'/'-' -> None; anything else -> ValueError."""
    text = raw.strip().lower()
    if text in ("", "none", "-"):
        return None
    if text == "today":
        return datetime.combine(date.today(), datetime.min.time())
    return datetime.combine(date.fromisoformat(text), datetime.min.time())


def split_task_args(args: list[str]) -> tuple[str, str | None, str | None, bool | None]:
    """
    Split "/add" style arguments into (title, tags, due, completed).

    Tokens: #a,b -> tags, @YYYY-MM-DD -> due date, !done / !todo -> completed flag.
    Everything else is the title. None means "not given".
    """
    title_words: list[str] = []
    tags: list[str] = []
    due: str | None = None
    completed: bool | None = None
    tags_given = False

    for tok in args:
        if tok.startswith("#"):
            tags_given = True
            if tok[1:]:
                tags.append(tok[1:])
        elif tok.startswith("@") and len(tok) > 1:
            due = tok[1:]
        elif tok.lower() in ("!done", "!todo"):
            completed = tok.lower() == "!done"
        else:
            title_words.append(tok)

    return " ".join(title_words), (",".join(tags) if tags_given else None), due, completed


def resolve_task(state: AppState, ref: str) -> Task | None:
    """
    A 1-based index into the current view, or an id prefix.

    All-digit refs outside the view range are tried as an id prefix.
    """
    view = state.service.view
    if ref.isdigit() and 1 <= int(ref) <= len(view):
        return view[int(ref) - 1]

    matches = [t for t in state.service.collection if t.id.startswith(ref)]
    return matches[0] if len(matches) == 1 else None


def format_task(index: int, task: Task) -> str:
    mark = "x" if task.is_completed else " "
    line = f"{index:>3}. [{mark}] {task.title}"
    if task.tag_list:
        line += f"  #{','.join(task.tag_list)}"
    if task.due_date is not None:
        line += f"  due {task.due_date_display}"
    if task.is_overdue:
        line += "  (overdue)"
    return line + f"  <{task.id[:8]}>"


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    svc = state.service
    view = svc.view
    head = f"Tasks ({len(view)}/{len(svc.collection)}, filter={svc.filtered.date_filter.value}"
    if svc.filtered.tag_filter:
        head += f", tag~{svc.filtered.tag_filter!r}"
    head += "):"
    if not view:
        return head + "\n  (none)"
    return "\n".join([head] + [format_task(i, t) for i, t in enumerate(view, start=1)])


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add Buy milk #groceries,home @2026-10-20
    """
    title, tags, due_raw, _ = split_task_args(args)
    if not title.strip():
        return "Usage: /add <title> [#tag,tag] [@YYYY-MM-DD]"
    try:
        due = parse_due(due_raw) if due_raw else None
    except ValueError:
        return f"Invalid date: {due_raw} (use YYYY-MM-DD)."

    task = state.service.add_task(title, tags or "", due)
    return f"Added: {task.title}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit 2 New title #tags @2026-10-20 !done
    Omitted parts keep their current value; "@none" clears the due date.
    """
    if not args:
        return "Usage: /edit <n|id> [title] [#tag,tag] [@YYYY-MM-DD|@none] [!done|!todo]"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No such task: {args[0]}"

    title, tags, due_raw, completed = split_task_args(args[1:])
    try:
        due = parse_due(due_raw) if due_raw is not None else task.due_date
    except ValueError:
        return f"Invalid date: {due_raw} (use YYYY-MM-DD)."

    state.service.edit_task(
        task.id,
        title or task.title,
        task.tags if tags is None else tags,
        due,
        task.is_completed if completed is None else completed,
    )
    return f"Updated: {task.title}"


def _set_completed(state: AppState, args: list[str], completed: bool) -> str:
    if not args:
        return "Usage: /done <n|id> (or /undone <n|id>)"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No such task: {args[0]}"
    state.service.set_completed(task.id, completed)
    return f"{'Completed' if completed else 'Reopened'}: {task.title}"


def cmd_done(state: AppState, args: list[str]) -> str:
    return _set_completed(state, args, True)


def cmd_undone(state: AppState, args: list[str]) -> str:
    return _set_completed(state, args, False)


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /del <n|id>"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No such task: {args[0]}"
    state.service.delete_task(task.id)
    return f"Deleted: {task.title}"


def cmd_complete_all(state: AppState, args: list[str]) -> str:
    n = state.service.complete_all()
    return f"Marked {n} task(s) completed."


def cmd_clear_completed(state: AppState, args: list[str]) -> str:
    n = state.service.clear_completed()
    return f"Removed {n} completed task(s)."


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter             -> show current filter
    /filter all|today|week|overdue
    """
    if not args:
        return f"Date filter: {state.service.filtered.date_filter.value}. Use /filter all|today|week|overdue."
    raw = args[0].lower()
    if raw not in {f.value for f in DateFilter}:
        return "Usage: /filter all|today|week|overdue."
    state.service.set_date_filter(raw)
    return cmd_list(state, [])


def cmd_tag(state: AppState, args: list[str]) -> str:
    """/tag <text> filters by tag text; /tag alone clears it."""
    state.service.set_tag_filter(" ".join(args))
    return cmd_list(state, [])


def cmd_status(state: AppState, args: list[str]) -> str:
    svc = state.service
    return (
        "Status:\n"
        f"  Save: {svc.status.message} ({svc.autosave.state.value})\n"
        f"  File: {state.repository.path}\n"
        f"  Auto-save delay: {svc.autosave.delay:.2f}s\n"
        f"  Tasks: {len(svc.collection)}"
    )


async def cmd_export(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /export <path>"
    path = " ".join(args)
    if emit:
        with contextlib.suppress(Exception):
            emit(f"[EXPORT] Writing {path}...")
    try:
        n = await state.service.export_tasks(path)
    except TaskSaveError as e:
        return f"Export failed: {e.reason}"
    return f"Exported {n} task(s) to {path}."


async def cmd_import(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /import <path>"
    path = " ".join(args)
    if emit:
        with contextlib.suppress(Exception):
            emit(f"[IMPORT] Reading {path}...")
    try:
        n = await state.service.import_tasks(path)
    except TaskLoadError as e:
        return f"Import failed: {e}"
    return f"Imported {n} task(s) from {path}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the filtered task list.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> [#tag,tag] [@YYYY-MM-DD].")
registry.register(
    "edit",
    cmd_edit,
    help_text="Edit a task: /edit <n|id> [title] [#tags] [@date|@none] [!done|!todo].",
)
registry.register("done", cmd_done, help_text="Mark a task completed: /done <n|id>.")
registry.register("undone", cmd_undone, help_text="Mark a task not completed: /undone <n|id>.")
registry.register("del", cmd_delete, help_text="Delete a task: /del <n|id>.", aliases=["rm"])
registry.register("completeall", cmd_complete_all, help_text="Mark every task completed.")
registry.register("clearcompleted", cmd_clear_completed, help_text="Remove completed tasks.")
registry.register("filter", cmd_filter, help_text="Date filter: /filter all|today|week|overdue.")
registry.register("tag", cmd_tag, help_text="Tag filter: /tag <text> (empty clears).")
registry.register("status", cmd_status, help_text="Show save status and storage settings.")
registry.register("export", cmd_export, help_text="Save a copy of all tasks: /export <path>.")
registry.register("import", cmd_import, help_text="Replace tasks from a file: /import <path>.")
