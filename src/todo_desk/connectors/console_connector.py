# src/todo_desk/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.ports import StatusListener
from ..core.state import AppState
from ..tasks.task_models import SaveSeverity, SaveStatus

logger = logging.getLogger(__name__)

_SEVERITY_TAG = {
    SaveSeverity.SAVED: "ok",
    SaveSeverity.SAVING: "..",
    SaveSeverity.ERROR: "!!",
}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _status_printer() -> StatusListener:
    """
    Print save status transitions, skipping repeats.

    "Saving..." is printed once per burst; errors are always shown.
    """
    last: dict[str, SaveStatus | None] = {"status": None}

    def on_status(status: SaveStatus) -> None:
        prev = last["status"]
        last["status"] = status
        if prev == status and status.severity != SaveSeverity.ERROR:
            return
        tag = _SEVERITY_TAG.get(status.severity, "  ")
        _print_ts(f"[SAVE {tag}] {status.message}")

    return on_status


async def run_console_loop(state: AppState) -> None:
    """
    Interactive shell on stdin/stdout.

    Input is read on a worker thread so the event loop (debounce timers,
    background saves) keeps running while the prompt waits.
    """
    logger.info("Console connector started (file=%s).", state.repository.path)
    _print_ts("[CONSOLE] Type /help for commands, /list to show tasks, /exit to quit.\n")

    state.service.subscribe_status(_status_printer())

    def emit(text: str) -> None:
        # Immediate user-visible feedback for long operations (export/import).
        _print_ts(text)

    while True:
        try:
            user_input = (await asyncio.to_thread(input, ">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        # Plain text is a shortcut for /add.
        line = user_input if user_input.startswith("/") else f"/add {user_input}"

        try:
            response = await command_registry.handle(state, line, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            _print_ts(response)

    logger.info("Console connector finished.")
