# src/taskdeck/core/state.py

from __future__ import annotations

import contextlib
import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..auth.auth_models import Session
from .ports import KeyValueStore, Notifier

if TYPE_CHECKING:
    from ..auth.session import SessionManager
    from ..connectors.async_runner import BackgroundLoop
    from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """
    Everything the app holds at runtime, passed explicitly to consumers.

    Lifecycle: built (and restored) by cli.bootstrap.create_initial_state,
    torn down by shutdown_state.
    """

    # Settings object (real Settings or a test SimpleNamespace).
    settings: object

    storage: KeyValueStore
    notifier: Notifier
    auth: SessionManager
    task_store: TaskStore

    # Set by the console shell; None means "run auth coroutines inline".
    background: BackgroundLoop | None = None
    # Guards task_store between the console thread and the auth loop thread.
    lock: threading.RLock = field(default_factory=threading.RLock)


def bind_task_store(
    session: SessionManager,
    task_store: TaskStore,
    lock: threading.RLock | None = None,
) -> None:
    """
    Keep the task store pointed at the session user.

    A different user -> load that user's list fresh; no user -> drop the list.
    """

    def _on_session(s: Session) -> None:
        user_id = s.user.id if s.user is not None else None
        with lock if lock is not None else contextlib.nullcontext():
            if user_id == task_store.user_id:
                return
            if user_id is None:
                logger.debug("Session ended; unloading tasks.")
                task_store.unload()
                return
            task_store.load(user_id)

    session.add_listener(_on_session)


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.task_store.unload()
    except Exception:
        logger.debug("Task store unload failed.", exc_info=True)

    close = getattr(state.storage, "close", None)
    if close is not None:
        with contextlib.suppress(Exception):
            close()
