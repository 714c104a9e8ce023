# tests/fakes.py

from __future__ import annotations

import threading
from collections.abc import Iterable
from pathlib import Path

from todo_desk.tasks.errors import TaskLoadError
from todo_desk.tasks.task_models import SaveStatus, Task


class RecordingRepo:
    """
    In-memory TaskRepo used for auto-save and service tests.

    - Records every save (the task list it was given)
    - Can be told to fail, or to block until released
    """

    def __init__(self, initial: list[Task] | None = None) -> None:
        self.initial = list(initial or [])
        self.saves: list[list[Task]] = []
        self.exports: dict[str, list[Task]] = {}
        self.load_calls = 0
        self.fail_with: Exception | None = None
        self.load_error: Exception | None = None
        self.gate: threading.Event | None = None
        self.save_started = threading.Event()

    def load(self) -> list[Task]:
        self.load_calls += 1
        if self.load_error is not None:
            raise self.load_error
        return list(self.initial)

    def load_strict(self, path: str | Path | None = None) -> list[Task]:
        key = str(path)
        if key not in self.exports:
            raise TaskLoadError(f"File not found: {key}")
        return list(self.exports[key])

    def save(self, tasks: Iterable[Task], path: str | Path | None = None) -> None:
        items = list(tasks)
        self.save_started.set()
        if self.gate is not None:
            self.gate.wait(timeout=5.0)
        if self.fail_with is not None:
            raise self.fail_with
        if path is not None:
            self.exports[str(path)] = items
            return
        self.saves.append(items)


class StatusRecorder:
    """Collects published SaveStatus values."""

    def __init__(self) -> None:
        self.statuses: list[SaveStatus] = []

    def __call__(self, status: SaveStatus) -> None:
        self.statuses.append(status)

    @property
    def messages(self) -> list[str]:
        return [s.message for s in self.statuses]
