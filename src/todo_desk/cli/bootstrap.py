# src/todo_desk/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- wires the file repository, collection and auto-save into AppState,
- runs the startup load (auto-save stays off until it completes).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_api import TodoService
from ..tasks.task_persistence import TaskFileRepository

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().

    A failure here is fatal: it is logged and re-raised.
    """
    if settings is None:
        settings = get_settings()

    try:
        repository = TaskFileRepository(settings.tasks_path)
        service = TodoService(repository, delay=settings.autosave_delay)
    except Exception:
        logger.exception("Failed to construct application state")
        raise

    return AppState(settings=settings, repository=repository, service=service)


async def start_state(state: AppState) -> None:
    """Load persisted tasks into the state; never raises for load errors."""
    tasks = await state.service.start()
    logger.info("Ready: %d tasks, file=%s", len(tasks), state.repository.path)
