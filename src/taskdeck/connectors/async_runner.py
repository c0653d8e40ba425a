# src/taskdeck/connectors/async_runner.py

from __future__ import annotations

import asyncio
import concurrent.futures
import contextlib
import logging
import threading
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class BackgroundLoop:
    """
    An asyncio loop running in a daemon thread.

    Why a thread: the console REPL blocks on input(), while auth operations
    are coroutines that must keep running after the prompt comes back.
    """

    thread: threading.Thread
    loop: asyncio.AbstractEventLoop

    def submit(self, coro: Coroutine[Any, Any, Any]) -> concurrent.futures.Future:
        """Schedule `coro` on the loop and return immediately."""
        fut = asyncio.run_coroutine_threadsafe(coro, self.loop)
        fut.add_done_callback(_log_failure)
        return fut

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.loop.stop)
        except Exception:
            logger.debug("Failed to signal background loop stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def _log_failure(fut: concurrent.futures.Future) -> None:
    if fut.cancelled():
        return
    exc = fut.exception()
    if exc is not None:
        logger.error("Background operation failed.", exc_info=exc)


def start_background_loop() -> BackgroundLoop | None:
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        holder["loop"] = loop
        ready.set()

        try:
            loop.run_forever()
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="taskdeck-async", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")

    if not isinstance(loop, asyncio.AbstractEventLoop):
        logger.error("Background loop thread did not initialize properly.")
        return None

    logger.debug("Background loop thread started.")
    return BackgroundLoop(thread=t, loop=loop)
