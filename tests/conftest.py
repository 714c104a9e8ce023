# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_desk.cli.bootstrap import create_initial_state
from todo_desk.core.state import AppState
from todo_desk.tasks.task_persistence import TaskFileRepository
from todo_desk.tasks.task_store import TaskCollection

from .fakes import RecordingRepo

FAST_DELAY = 0.05


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    data_dir = tmp_path / "data"
    return SimpleNamespace(
        app_name="todo-desk-test",
        log_level="DEBUG",
        log_dir=tmp_path / "logs",
        log_to_file=False,
        data_dir=data_dir,
        tasks_path=data_dir / "tasks.json",
        autosave_delay=FAST_DELAY,
    )


@pytest.fixture()
def repository(settings: SimpleNamespace) -> TaskFileRepository:
    return TaskFileRepository(settings.tasks_path)


@pytest.fixture()
def fake_repo() -> RecordingRepo:
    return RecordingRepo()


@pytest.fixture()
def collection() -> TaskCollection:
    return TaskCollection()


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired like the real app.

    NOTE: We keep the real file repository here because its behaviour
    (tmp file + rename under a lock) is part of what we want to test.
    """
    return create_initial_state(settings=settings)
