# src/todo_desk/tasks/autosave.py

from __future__ import annotations

"""
Debounced auto-save.

Every collection change (re)arms a debounce timer on the event loop. When the
timer elapses without another change, the collection is snapshotted on the
loop thread and written by the repository on a worker thread.

States:
- idle          -> nothing pending, last save succeeded
- pending_save  -> debounce window open
- saving        -> write in progress
- error         -> last save failed; the next change re-arms normally

A running save is never cancelled; a newer save waits behind it.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from ..core.ports import CancelableTimer, StatusListener, TaskRepo
from .errors import TaskSaveError
from .task_models import SaveState, SaveStatus, Task
from .task_store import CollectionChange, TaskCollection

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 1.0


class DebounceTimer:
    """
    Cancelable delayed callback on the running asyncio loop.

    arm() always cancels the previous un-elapsed callback first.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None and not self._handle.cancelled()

    def arm(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()

        def fire() -> None:
            self._handle = None
            callback()

        self._handle = loop.call_later(max(0.0, float(delay)), fire)
        return self._handle

    def cancel(self, handle: asyncio.TimerHandle | None = None) -> None:
        target = handle if handle is not None else self._handle
        if target is None:
            return
        target.cancel()
        if target is self._handle:
            self._handle = None


class AutoSaveCoordinator:
    """Listens to a TaskCollection and saves it after a quiet period."""

    def __init__(
        self,
        collection: TaskCollection,
        repository: TaskRepo,
        *,
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        timer: CancelableTimer | None = None,
    ) -> None:
        self._collection = collection
        self._repo = repository
        self._delay = max(0.0, float(delay))
        self._timer: CancelableTimer = timer or DebounceTimer()

        self._enabled = False
        self._state = SaveState.IDLE
        self._status = SaveStatus.saved()
        self._status_listeners: list[StatusListener] = []

        # Bumped on every arm; a save only reports if nothing newer was requested.
        self._generation = 0
        self._inflight: set[asyncio.Task[Any]] = set()
        self._write_order: asyncio.Lock | None = None

        self._unsubscribe = collection.subscribe(self._on_change)

    # ---- read-only state ----

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def state(self) -> SaveState:
        return self._state

    @property
    def status(self) -> SaveStatus:
        return self._status

    @property
    def pending(self) -> bool:
        return self._timer.pending or bool(self._inflight)

    @property
    def delay(self) -> float:
        return self._delay

    def subscribe_status(self, listener: StatusListener) -> None:
        self._status_listeners.append(listener)

    # ---- lifecycle ----

    def enable(self) -> None:
        """Turn auto-save on. Only the first call has an effect."""
        if self._enabled:
            return
        self._enabled = True
        logger.info("Auto-save enabled (delay=%.2fs)", self._delay)
        self._set_state(SaveState.IDLE, SaveStatus.saved())

    def close(self) -> None:
        self._timer.cancel()
        self._unsubscribe()

    async def drain(self) -> None:
        """Wait for saves that are already running."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    async def flush(self) -> None:
        """Save a pending change now instead of waiting for the debounce."""
        if self._timer.pending:
            self._timer.cancel()
            self._start_save()
        await self.drain()

    # ---- internals ----

    def _set_state(self, state: SaveState, status: SaveStatus) -> None:
        self._state = state
        self._status = status
        for listener in list(self._status_listeners):
            try:
                listener(status)
            except Exception:
                logger.exception("Status listener failed")

    def _on_change(self, change: CollectionChange) -> None:
        if not self._enabled:
            logger.debug("Auto-save disabled; ignoring %s", change.kind.value)
            return
        self.request_save()

    def request_save(self) -> None:
        self._generation += 1
        self._timer.arm(self._delay, self._on_debounce_elapsed)
        self._set_state(SaveState.PENDING_SAVE, SaveStatus.saving())

    def _on_debounce_elapsed(self) -> None:
        self._start_save()

    def _start_save(self) -> asyncio.Task[Any]:
        generation = self._generation
        snapshot = self._collection.snapshot()
        self._set_state(SaveState.SAVING, SaveStatus.saving())

        task = asyncio.get_running_loop().create_task(self._run_save(snapshot, generation))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _run_save(self, snapshot: list[Task], generation: int) -> None:
        if self._write_order is None:
            self._write_order = asyncio.Lock()

        error: str | None = None
        async with self._write_order:
            try:
                await asyncio.to_thread(self._repo.save, snapshot)
            except TaskSaveError as e:
                error = e.reason
            except Exception:
                logger.exception("Unexpected auto-save failure")
                error = "unexpected failure"

        if generation != self._generation:
            logger.debug("Save gen=%s superseded by gen=%s", generation, self._generation)
            return

        if error is None:
            logger.debug("Auto-save complete (%d tasks)", len(snapshot))
            self._set_state(SaveState.IDLE, SaveStatus.saved())
        else:
            logger.warning("Auto-save failed: %s", error)
            self._set_state(SaveState.ERROR, SaveStatus.error(error))
