# src/taskdeck/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage/notifier/session/tasks),
- restores the persisted session before anything else runs.
"""

from __future__ import annotations

import logging
import threading

from ..auth.session import SessionManager
from ..config import get_settings
from ..core.notifications import LoggingNotifier
from ..core.ports import KeyValueStore, Notifier
from ..core.state import AppState, bind_task_store
from ..storage.kv_store import open_kv_store
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    data_dir = getattr(settings, "data_dir", None)
    if data_dir is not None:
        data_dir.mkdir(parents=True, exist_ok=True)
    storage_path = getattr(settings, "storage_path", None)
    if storage_path is not None:
        storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    storage: KeyValueStore | None = None,
    notifier: Notifier | None = None,
) -> AppState:
    """
    Create AppState from the provided settings and restore the session.

    Keeping settings/storage/notifier injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = open_kv_store(settings)

    if notifier is None:
        notifier = LoggingNotifier()

    session = SessionManager(
        storage,
        notifier=notifier,
        auth_delay_seconds=float(getattr(settings, "auth_delay_seconds", 1.0)),
        social_auth_delay_seconds=float(getattr(settings, "social_auth_delay_seconds", 1.5)),
    )
    task_store = TaskStore(storage)
    lock = threading.RLock()
    bind_task_store(session, task_store, lock)

    state = AppState(
        settings=settings,
        storage=storage,
        notifier=notifier,
        auth=session,
        task_store=task_store,
        lock=lock,
    )

    session.restore()
    return state
