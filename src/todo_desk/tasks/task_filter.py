# src/todo_desk/tasks/task_filter.py

from __future__ import annotations

"""
Task view filtering.

compute_view() is a pure function over a task sequence:
- date filter: all / today / week (today..today+7 inclusive) / overdue
- tag filter: case-insensitive substring match on the raw tags text
Both filters apply together; input order is kept.

FilteredView keeps the current criteria and recomputes on every collection
change or criteria change.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import date, timedelta

from .task_models import DateFilter, Task
from .task_store import CollectionChange, TaskCollection

logger = logging.getLogger(__name__)

WEEK_DAYS = 7


def _matches_date(task: Task, date_filter: DateFilter, today: date) -> bool:
    if date_filter == DateFilter.ALL:
        return True
    if date_filter == DateFilter.OVERDUE:
        return task.overdue_on(today)

    due = task.due_day
    if due is None:
        return False
    if date_filter == DateFilter.TODAY:
        return due == today
    if date_filter == DateFilter.WEEK:
        return today <= due <= today + timedelta(days=WEEK_DAYS)
    return True


def normalize_tag_filter(tag_filter: str | None) -> str:
    return (tag_filter or "").strip().lower()


def compute_view(
    tasks: Iterable[Task],
    date_filter: DateFilter | str = DateFilter.ALL,
    tag_filter: str | None = "",
    *,
    today: date | None = None,
) -> list[Task]:
    day = today or date.today()
    kind = DateFilter.parse(date_filter)
    needle = normalize_tag_filter(tag_filter)

    out: list[Task] = []
    for task in tasks:
        if not _matches_date(task, kind, day):
            continue
        if needle and needle not in task.tags.lower():
            continue
        out.append(task)
    return out


ViewListener = Callable[[list[Task]], None]


class FilteredView:
    """Live projection of a TaskCollection under the current filter criteria."""

    def __init__(
        self,
        collection: TaskCollection,
        *,
        date_filter: DateFilter = DateFilter.ALL,
        tag_filter: str = "",
        today: Callable[[], date] = date.today,
    ) -> None:
        self._collection = collection
        self._date_filter = date_filter
        self._tag_filter = normalize_tag_filter(tag_filter)
        self._today = today
        self._items: list[Task] = []
        self._listeners: list[ViewListener] = []
        self._unsubscribe = collection.subscribe(self._on_collection_change)
        self.refresh()

    @property
    def items(self) -> list[Task]:
        return list(self._items)

    @property
    def date_filter(self) -> DateFilter:
        return self._date_filter

    @property
    def tag_filter(self) -> str:
        return self._tag_filter

    def subscribe(self, listener: ViewListener) -> None:
        self._listeners.append(listener)

    def set_date_filter(self, kind: DateFilter | str) -> None:
        self._date_filter = DateFilter.parse(kind)
        self.refresh()

    def set_tag_filter(self, text: str | None) -> None:
        self._tag_filter = normalize_tag_filter(text)
        self.refresh()

    def refresh(self) -> list[Task]:
        self._items = compute_view(
            self._collection,
            self._date_filter,
            self._tag_filter,
            today=self._today(),
        )
        for listener in list(self._listeners):
            try:
                listener(self.items)
            except Exception:
                logger.exception("View listener failed")
        return self.items

    def close(self) -> None:
        self._unsubscribe()

    def _on_collection_change(self, _change: CollectionChange) -> None:
        self.refresh()
