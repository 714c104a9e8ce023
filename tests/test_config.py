# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from todo_desk import config
from todo_desk.config import Settings


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    for name in (
        "TODO_APP_NAME",
        "TODO_LOG_LEVEL",
        "TODO_LOG_DIR",
        "TODO_LOG_TO_FILE",
        "TODO_DATA_DIR",
        "TODO_TASKS_FILE",
        "TODO_AUTOSAVE_DELAY",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda **_kw: False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_defaults_match_classic_layout(clean_env: Path) -> None:
    s = Settings.from_env()
    assert s.tasks_path == clean_env / "data" / "tasks.json"
    assert s.autosave_delay == 1.0
    assert s.log_to_file is True


def test_env_overrides(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TODO_DATA_DIR", str(clean_env / "elsewhere"))
    monkeypatch.setenv("TODO_AUTOSAVE_DELAY", "0.25")
    monkeypatch.setenv("TODO_LOG_TO_FILE", "no")
    s = Settings.from_env()
    assert s.tasks_path == clean_env / "elsewhere" / "tasks.json"
    assert s.autosave_delay == 0.25
    assert s.log_to_file is False

    monkeypatch.setenv("TODO_TASKS_FILE", str(clean_env / "mine.json"))
    monkeypatch.setenv("TODO_AUTOSAVE_DELAY", "soon")
    s = Settings.from_env()
    assert s.tasks_path == clean_env / "mine.json"
    assert s.autosave_delay == 1.0
