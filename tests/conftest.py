# tests/conftest.py

from __future__ import annotations

import asyncio
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdeck.cli.bootstrap import create_initial_state
from taskdeck.core.state import AppState
from taskdeck.storage.kv_store import MemoryKVStore

from .fakes import CollectingNotifier


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic (no auth delay).
    """
    return SimpleNamespace(
        app_name="taskdeck-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path,
        storage_backend="memory",
        storage_path=tmp_path / "storage.json",
        auth_delay_seconds=0.0,
        social_auth_delay_seconds=0.0,
    )


@pytest.fixture()
def storage() -> MemoryKVStore:
    return MemoryKVStore()


@pytest.fixture()
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.fixture()
def state(settings: SimpleNamespace, storage: MemoryKVStore, notifier: CollectingNotifier) -> AppState:
    """
    AppState wired with an in-memory store and a collecting notifier.

    The session is restored (anonymous) but nobody is signed in.
    """
    return create_initial_state(settings=settings, storage=storage, notifier=notifier)


@pytest.fixture()
def signed_in(state: AppState) -> AppState:
    """Same as `state`, with ann@example.com signed in via email."""
    asyncio.run(state.auth.login("ann@example.com", "secret"))
    assert state.auth.user is not None
    return state
