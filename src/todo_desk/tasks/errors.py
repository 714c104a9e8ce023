# src/todo_desk/tasks/errors.py

from __future__ import annotations


class TodoError(Exception):
    """Base class for task persistence errors."""


class TaskLoadError(TodoError):
    """Raised by the strict (manual import) load path."""


class TaskSaveError(TodoError):
    """
    Raised when the task file cannot be written.

    `reason` is short and user-facing, e.g. "Permission denied".
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason
