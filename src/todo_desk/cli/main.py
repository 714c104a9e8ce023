# src/todo_desk/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the task file, then runs the
console shell on the asyncio loop that also drives debounced auto-save.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, start_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _shutdown(state: AppState) -> None:
    """Best-effort shutdown: save a pending change, no exceptions should escape."""
    try:
        await state.service.close(flush=True)
    except Exception:
        logger.exception("Failed to flush tasks on shutdown.")


async def _run(state: AppState) -> None:
    await start_state(state)
    try:
        await run_console_loop(state)
    finally:
        await _shutdown(state)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(
        log_dir=settings.log_dir,
        console_level=console_level,
        to_file=settings.log_to_file,
    )
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logger.info("Starting %s...", settings.app_name)

    # Construction failures propagate and end the process.
    state = create_initial_state(settings=settings)

    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
