# src/todo_desk/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the storage backend and the shell swappable and makes testing easier.
"""

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, Protocol

from ..tasks.task_models import SaveStatus, Task

StatusListener = Callable[[SaveStatus], None]


class TaskRepo(Protocol):
    """Persistence port used by the auto-save coordinator and the service."""

    def load(self) -> list[Task]: ...

    def save(self, tasks: Iterable[Task], path: str | Path | None = None) -> None: ...

    def load_strict(self, path: str | Path | None = None) -> list[Task]: ...


class CancelableTimer(Protocol):
    """Delayed callback with cancellation; re-arming cancels the previous one."""

    def arm(self, delay: float, callback: Callable[[], None]) -> Any: ...

    def cancel(self, handle: Any = None) -> None: ...

    @property
    def pending(self) -> bool: ...
