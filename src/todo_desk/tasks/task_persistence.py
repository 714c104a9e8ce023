# src/todo_desk/tasks/task_persistence.py

from __future__ import annotations

import contextlib
import json
import logging
import os
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .errors import TaskLoadError, TaskSaveError
from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_TASKS_PATH = Path("data") / "tasks.json"


def encode_tasks(tasks: Iterable[Task]) -> str:
    """Indented JSON text for a task sequence (deterministic for equal input)."""
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, indent=2) + "\n"


def decode_tasks(raw: str) -> list[Task]:
    """
    Parse file content into tasks.

    Raises ValueError for malformed JSON or a non-list root.
    Empty/whitespace content means "no tasks".
    """
    if not raw.strip():
        return []
    data: Any = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")

    out: list[Task] = []
    for item in data:
        if not isinstance(item, dict):
            logger.debug("Skipping non-object task entry: %r", item)
            continue
        out.append(Task.from_dict(item))
    return out


def _save_error_reason(err: Exception) -> str:
    if isinstance(err, PermissionError):
        return "Permission denied"
    if isinstance(err, OSError):
        return err.strerror or str(err) or "I/O error"
    return "unexpected failure"


class TaskFileRepository:
    """
    JSON file task repository.

    File access (load and every save) goes through one lock, so a save never
    interleaves with another save or with the startup load. Writes go to a
    temp file that is then renamed over the destination.

    Thread-safety:
    - load()/save() may be called from worker threads
    - callers must pass a snapshot, not the live collection
    """

    def __init__(self, path: str | Path = DEFAULT_TASKS_PATH) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Task]:
        """Best-effort load: missing, empty, corrupt or unreadable file -> []."""
        with self._lock:
            path = self._path
            try:
                tasks = decode_tasks(path.read_text("utf-8"))
            except FileNotFoundError:
                logger.info("No task file at %s; starting empty", path)
                return []
            except ValueError as e:
                logger.warning("Task file %s is corrupt (%s); starting empty", path, e)
                return []
            except Exception:
                logger.exception("Failed to read task file %s; starting empty", path)
                return []

        logger.info("Loaded %d tasks from %s", len(tasks), path)
        return tasks

    def load_strict(self, path: str | Path | None = None) -> list[Task]:
        """Load for an explicit import; failures raise TaskLoadError."""
        src = Path(path) if path is not None else self._path
        with self._lock:
            try:
                raw = src.read_text("utf-8")
            except FileNotFoundError:
                raise TaskLoadError(f"File not found: {src}") from None
            except OSError as e:
                raise TaskLoadError(f"Cannot read {src}: {e.strerror or e}") from e
            try:
                tasks = decode_tasks(raw)
            except ValueError as e:
                raise TaskLoadError(f"Invalid task file {src}: {e}") from e

        logger.info("Imported %d tasks from %s", len(tasks), src)
        return tasks

    def save(self, tasks: Iterable[Task], path: str | Path | None = None) -> None:
        """Write all tasks; failures raise TaskSaveError with a short reason."""
        dst = Path(path) if path is not None else self._path
        tmp = dst.with_name(dst.name + ".tmp")

        with self._lock:
            try:
                payload = encode_tasks(tasks)
                dst.parent.mkdir(parents=True, exist_ok=True)
                with open(tmp, "w", encoding="utf-8", newline="\n") as fh:
                    fh.write(payload)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp, dst)
            except Exception as e:
                with contextlib.suppress(OSError):
                    tmp.unlink(missing_ok=True)
                logger.warning("Failed to save tasks to %s: %s", dst, e)
                raise TaskSaveError(_save_error_reason(e)) from e

        logger.debug("Saved tasks to %s", dst)
