# src/todo_desk/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_api import TodoService
from ..tasks.task_persistence import TaskFileRepository


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    repository: TaskFileRepository
    service: TodoService
