# tests/test_task_api.py

from __future__ import annotations

import asyncio
from datetime import date, timedelta
from pathlib import Path

import pytest

from todo_desk.tasks.errors import TaskLoadError
from todo_desk.tasks.task_api import TodoService
from todo_desk.tasks.task_models import DateFilter, SaveState, Task
from todo_desk.tasks.task_persistence import TaskFileRepository

from .conftest import FAST_DELAY
from .fakes import RecordingRepo

SETTLE = FAST_DELAY * 4


async def _settle(service: TodoService) -> None:
    await asyncio.sleep(SETTLE)
    await service.autosave.drain()


@pytest.mark.asyncio
async def test_buy_milk_scenario(repository: TaskFileRepository) -> None:
    service = TodoService(repository, delay=FAST_DELAY)
    assert await service.start() == []

    task = service.add_task("Buy milk", "", None)
    assert service.view == [task]
    assert task.is_overdue is False

    yesterday = date.today() - timedelta(days=1)
    service.edit_task(task.id, task.title, task.tags, yesterday, False)
    assert task.is_overdue is True

    service.set_completed(task.id, True)
    assert task.is_overdue is False

    assert service.set_date_filter(DateFilter.OVERDUE) == []

    service.set_date_filter(DateFilter.ALL)
    # the tag filter looks at the tags text, which is empty here
    assert service.set_tag_filter("milk") == []

    service.edit_task(task.id, task.title, "Milk,dairy", yesterday, True)
    assert service.view == [task]

    await _settle(service)
    assert service.autosave.state == SaveState.IDLE
    assert TaskFileRepository(repository.path).load() == [task]


@pytest.mark.asyncio
async def test_start_loads_without_saving(fake_repo: RecordingRepo) -> None:
    fake_repo.initial = [Task(title="a"), Task(title="b")]
    service = TodoService(fake_repo, delay=FAST_DELAY)

    view = await service.start()
    assert [t.title for t in view] == ["a", "b"]
    assert service.autosave.enabled
    assert service.status.message == "All changes saved"

    await _settle(service)
    assert fake_repo.saves == []


@pytest.mark.asyncio
async def test_start_survives_load_exception(fake_repo: RecordingRepo) -> None:
    fake_repo.load_error = OSError("disk on fire")
    service = TodoService(fake_repo, delay=FAST_DELAY)

    assert await service.start() == []
    assert service.autosave.enabled

    service.add_task("first")
    await _settle(service)
    assert len(fake_repo.saves) == 1


@pytest.mark.asyncio
async def test_add_rejects_blank_title(fake_repo: RecordingRepo) -> None:
    service = TodoService(fake_repo, delay=FAST_DELAY)
    await service.start()
    with pytest.raises(ValueError):
        service.add_task("   ")
    assert service.view == []


@pytest.mark.asyncio
async def test_delete_and_edit_unknown(fake_repo: RecordingRepo) -> None:
    service = TodoService(fake_repo, delay=FAST_DELAY)
    await service.start()
    assert service.delete_task("missing") is False
    with pytest.raises(KeyError):
        service.edit_task("missing", "t", "", None, False)

    task = service.add_task("x")
    assert service.delete_task(task.id) is True
    assert service.view == []


@pytest.mark.asyncio
async def test_complete_all_and_clear_completed_save_once(fake_repo: RecordingRepo) -> None:
    service = TodoService(fake_repo, delay=FAST_DELAY)
    await service.start()

    a = service.add_task("a")
    service.add_task("b")
    service.set_completed(a.id, True)
    assert service.clear_completed() == 1
    assert [t.title for t in service.view] == ["b"]

    assert service.complete_all() == 1
    assert service.clear_completed() == 1
    assert service.view == []

    await _settle(service)
    assert fake_repo.saves == [[]]


@pytest.mark.asyncio
async def test_export_then_import(tmp_path: Path, repository: TaskFileRepository) -> None:
    service = TodoService(repository, delay=FAST_DELAY)
    await service.start()
    service.add_task("one", "x")
    service.add_task("two", "y")

    backup = tmp_path / "backup.json"
    assert await service.export_tasks(backup) == 2

    service.clear_completed()
    service.complete_all()
    service.clear_completed()
    assert service.view == []

    assert await service.import_tasks(backup) == 2
    assert [t.title for t in service.view] == ["one", "two"]

    with pytest.raises(TaskLoadError):
        await service.import_tasks(tmp_path / "nope.json")

    await service.close()
    assert [t.title for t in repository.load()] == ["one", "two"]
