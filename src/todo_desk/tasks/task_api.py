# src/todo_desk/tasks/task_api.py

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from pathlib import Path

from ..core.ports import CancelableTimer, StatusListener, TaskRepo
from .autosave import DEFAULT_DEBOUNCE_SECONDS, AutoSaveCoordinator
from .task_filter import FilteredView
from .task_models import DateFilter, SaveStatus, Task
from .task_store import TaskCollection

logger = logging.getLogger(__name__)


class TodoService:
    """
    Application service: the calls a shell (console, GUI) makes on user intent.

    All methods must run on the event loop thread; saves are scheduled by the
    auto-save coordinator and executed on worker threads.
    """

    def __init__(
        self,
        repository: TaskRepo,
        *,
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        collection: TaskCollection | None = None,
        timer: CancelableTimer | None = None,
    ) -> None:
        self.repository = repository
        self.collection = collection if collection is not None else TaskCollection()
        self.autosave = AutoSaveCoordinator(self.collection, repository, delay=delay, timer=timer)
        self.filtered = FilteredView(self.collection)

    # ---- startup / shutdown ----

    async def start(self) -> list[Task]:
        """
        Load persisted tasks with auto-save off, then enable auto-save once.

        Load failures are not reported to the user: the list just starts empty.
        """
        try:
            tasks = await asyncio.to_thread(self.repository.load)
            if tasks:
                self.collection.reset(tasks)
        except Exception:
            logger.exception("Startup load failed; starting with an empty list")
        finally:
            self.autosave.enable()

        return self.view

    async def close(self, *, flush: bool = True) -> None:
        if flush:
            await self.autosave.flush()
        self.autosave.close()
        self.filtered.close()

    # ---- reads ----

    @property
    def view(self) -> list[Task]:
        return self.filtered.items

    @property
    def status(self) -> SaveStatus:
        return self.autosave.status

    def subscribe_status(self, listener: StatusListener) -> None:
        self.autosave.subscribe_status(listener)

    def get(self, task_id: str) -> Task | None:
        return self.collection.get(task_id)

    # ---- intents ----

    def add_task(
        self,
        title: str,
        tags: str = "",
        due_date: datetime | date | None = None,
    ) -> Task:
        if not title or not title.strip():
            raise ValueError("title is required")

        task = Task(title=title, tags=tags, due_date=due_date)
        self.collection.add(task)
        logger.debug("Task added id=%s due=%s", task.id, task.due_date)
        return task

    def delete_task(self, task_id: str) -> bool:
        removed = self.collection.remove_by_id(task_id)
        if removed:
            logger.debug("Task deleted id=%s", task_id)
        return removed

    def edit_task(
        self,
        task_id: str,
        title: str,
        tags: str,
        due_date: datetime | date | None,
        completed: bool,
    ) -> Task:
        task = self.collection.get(task_id)
        if task is None:
            raise KeyError(task_id)

        task.title = title
        task.tags = tags
        task.due_date = due_date
        task.is_completed = completed
        self.collection.notify_changed(task)
        return task

    def set_completed(self, task_id: str, completed: bool = True) -> Task:
        task = self.collection.get(task_id)
        if task is None:
            raise KeyError(task_id)
        return self.edit_task(task_id, task.title, task.tags, task.due_date, completed)

    def complete_all(self) -> int:
        tasks = self.collection.items()
        for task in tasks:
            task.is_completed = True
        self.collection.notify_changed(*tasks)
        return len(tasks)

    def clear_completed(self) -> int:
        done = [t for t in self.collection if t.is_completed]
        for task in done:
            self.collection.remove(task)
        return len(done)

    def set_date_filter(self, kind: DateFilter | str) -> list[Task]:
        self.filtered.set_date_filter(kind)
        return self.view

    def set_tag_filter(self, text: str | None) -> list[Task]:
        self.filtered.set_tag_filter(text)
        return self.view

    # ---- manual export / import ----

    async def export_tasks(self, path: str | Path) -> int:
        """Write the current tasks to `path`; raises TaskSaveError."""
        snapshot = self.collection.snapshot()
        await asyncio.to_thread(self.repository.save, snapshot, path)
        logger.info("Exported %d tasks to %s", len(snapshot), path)
        return len(snapshot)

    async def import_tasks(self, path: str | Path) -> int:
        """Replace the current tasks with the content of `path`; raises TaskLoadError."""
        tasks = await asyncio.to_thread(self.repository.load_strict, path)
        self.collection.reset(tasks)
        return len(self.collection)
