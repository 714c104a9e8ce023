# tests/test_task_filter.py

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from todo_desk.tasks.task_filter import FilteredView, compute_view
from todo_desk.tasks.task_models import DateFilter, Task
from todo_desk.tasks.task_store import TaskCollection

TODAY = date(2026, 10, 19)


def _due(days: int, hour: int = 12) -> datetime:
    return datetime.combine(TODAY + timedelta(days=days), datetime.min.time()).replace(hour=hour)


@pytest.fixture()
def tasks() -> list[Task]:
    return [
        Task(id="today", title="today", tags="Work", due_date=_due(0, hour=23)),
        Task(id="week", title="in a week", tags="home, Groceries", due_date=_due(7)),
        Task(id="later", title="in 8 days", tags="work", due_date=_due(8)),
        Task(id="late", title="overdue", tags="milk", due_date=_due(-1)),
        Task(id="nodate", title="no date", tags="MILK,bread"),
        Task(id="done", title="done late", tags="work", due_date=_due(-3), is_completed=True),
    ]


def _ids(view: list[Task]) -> list[str]:
    return [t.id for t in view]


def test_all_keeps_everything_in_order(tasks: list[Task]) -> None:
    assert compute_view(tasks, DateFilter.ALL, "", today=TODAY) == tasks


def test_today(tasks: list[Task]) -> None:
    assert _ids(compute_view(tasks, DateFilter.TODAY, "", today=TODAY)) == ["today"]


def test_week_is_inclusive_of_both_ends(tasks: list[Task]) -> None:
    assert _ids(compute_view(tasks, DateFilter.WEEK, "", today=TODAY)) == ["today", "week"]


def test_overdue_excludes_completed(tasks: list[Task]) -> None:
    assert _ids(compute_view(tasks, DateFilter.OVERDUE, "", today=TODAY)) == ["late"]


def test_tag_filter_is_case_insensitive_substring_of_raw_text(tasks: list[Task]) -> None:
    assert _ids(compute_view(tasks, "all", "milk", today=TODAY)) == ["late", "nodate"]
    assert _ids(compute_view(tasks, "all", "  WORK ", today=TODAY)) == ["today", "later", "done"]
    # raw text, not the parsed tag list: the separator is part of the match
    assert _ids(compute_view(tasks, "all", "home, gro", today=TODAY)) == ["week"]


def test_blank_tag_filter_matches_everything(tasks: list[Task]) -> None:
    assert compute_view(tasks, "all", "   ", today=TODAY) == tasks
    assert compute_view(tasks, "all", None, today=TODAY) == tasks


def test_filters_are_conjunctive(tasks: list[Task]) -> None:
    assert _ids(compute_view(tasks, DateFilter.WEEK, "work", today=TODAY)) == ["today"]
    assert compute_view(tasks, DateFilter.OVERDUE, "work", today=TODAY) == []


def test_filtered_view_recomputes_on_changes() -> None:
    coll = TaskCollection()
    view = FilteredView(coll, today=lambda: TODAY)
    pushed: list[list[Task]] = []
    view.subscribe(pushed.append)

    a = Task(title="a", tags="x", due_date=_due(0))
    b = Task(title="b", tags="y")
    coll.add(a)
    coll.add(b)
    assert view.items == [a, b]

    view.set_date_filter("today")
    assert view.items == [a]

    view.set_tag_filter("Y")
    assert view.items == []

    view.set_date_filter(DateFilter.ALL)
    assert view.items == [b]

    coll.remove(b)
    assert view.items == []
    assert len(pushed) == 6

    view.close()
    coll.add(Task(title="c", tags="y"))
    assert view.items == []
