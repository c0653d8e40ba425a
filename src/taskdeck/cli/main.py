# src/taskdeck/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (restoring the saved session), starts the
background loop that runs auth operations, then hands over to the console REPL.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.async_runner import start_background_loop
from ..connectors.console_connector import ConsoleNotifier, run_console_loop
from ..core.state import shutdown_state
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    log_dir = getattr(settings, "data_dir", ".local/taskdeck")
    log_file = setup_logging(log_dir=log_dir, console_level=getattr(settings, "log_level", "INFO"))
    logger.debug("Full log at %s", log_file)

    logger.info("Starting %s...", getattr(settings, "app_name", "taskdeck"))

    if not settings.console_enabled:
        logger.info("Console disabled; nothing to run.")
        return

    state = create_initial_state(settings=settings, notifier=ConsoleNotifier())
    state.background = start_background_loop()

    user = state.auth.user
    if user is not None:
        logger.info("Welcome back, %s (%d tasks).", user.name, len(state.task_store))

    try:
        run_console_loop(state)
    finally:
        if state.background is not None:
            state.background.stop()
            state.background.join(timeout=5.0)

        shutdown_state(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
