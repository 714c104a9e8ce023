# src/todo_desk/tasks/task_store.py

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum

from .task_models import Task

logger = logging.getLogger(__name__)


class ChangeKind(StrEnum):
    ADD = "add"
    REMOVE = "remove"
    CLEAR = "clear"
    RESET = "reset"
    UPDATE = "update"


@dataclass(slots=True, frozen=True)
class CollectionChange:
    kind: ChangeKind
    tasks: tuple[Task, ...] = ()


ChangeListener = Callable[[CollectionChange], None]


class TaskCollection:
    """
    In-memory ordered task list that publishes a change event on every mutation.

    Threading:
    - single writer: mutate only from the foreground (event loop) thread
    - background readers must use snapshot()
    """

    def __init__(self, tasks: Iterable[Task] | None = None) -> None:
        self._tasks: list[Task] = []
        self._listeners: list[ChangeListener] = []
        for task in tasks or ():
            self._ensure_unique(task)
            self._tasks.append(task)

    # ---- observers ----

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, kind: ChangeKind, tasks: Iterable[Task] = ()) -> None:
        change = CollectionChange(kind=kind, tasks=tuple(tasks))
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("Collection listener failed kind=%s", kind.value)

    # ---- mutation ----

    def _ensure_unique(self, task: Task) -> None:
        if self.get(task.id) is not None:
            raise ValueError(f"duplicate task id: {task.id}")

    def add(self, task: Task) -> None:
        self._ensure_unique(task)
        self._tasks.append(task)
        self._publish(ChangeKind.ADD, (task,))

    def remove(self, task: Task) -> bool:
        """Remove the task; a missing task is a no-op (no event)."""
        for i, existing in enumerate(self._tasks):
            if existing is task or existing.id == task.id:
                del self._tasks[i]
                self._publish(ChangeKind.REMOVE, (existing,))
                return True
        return False

    def remove_by_id(self, task_id: str) -> bool:
        task = self.get(task_id)
        if task is None:
            return False
        return self.remove(task)

    def clear(self) -> None:
        removed = tuple(self._tasks)
        self._tasks.clear()
        self._publish(ChangeKind.CLEAR, removed)

    def reset(self, tasks: Iterable[Task]) -> None:
        """Replace the whole content (load/import); publishes a single event."""
        fresh: list[Task] = []
        seen: set[str] = set()
        for task in tasks:
            if task.id in seen:
                logger.warning("Skipping duplicate task id=%s", task.id)
                continue
            seen.add(task.id)
            fresh.append(task)
        self._tasks = fresh
        self._publish(ChangeKind.RESET, fresh)

    def notify_changed(self, *tasks: Task) -> None:
        """Publish an update event for tasks edited in place."""
        self._publish(ChangeKind.UPDATE, tasks)

    # ---- enumeration ----

    def get(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def items(self) -> list[Task]:
        return list(self._tasks)

    def snapshot(self) -> list[Task]:
        """Deep copy of the current content, safe to hand to another thread."""
        return copy.deepcopy(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task: object) -> bool:
        if not isinstance(task, Task):
            return False
        return self.get(task.id) is not None
