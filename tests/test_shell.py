# tests/test_shell.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from taskdeck.config import Settings
from taskdeck.connectors.async_runner import start_background_loop
from taskdeck.connectors.console_connector import ConsoleNotifier, run_console_loop
from taskdeck.core.notifications import Notice, NoticeKind
from taskdeck.core.state import shutdown_state
from taskdeck.logging_setup import _ConsoleNoiseFilter, parse_level, setup_logging
from taskdeck.tasks.task_store import NotAuthenticatedError


def test_settings_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKDECK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKDECK_STORAGE_BACKEND", "SQLITE")
    monkeypatch.setenv("TASKDECK_AUTH_DELAY_SECONDS", "-3")
    monkeypatch.setenv("TASKDECK_SOCIAL_AUTH_DELAY_SECONDS", "not a number")
    monkeypatch.setenv("TASKDECK_CONSOLE_ENABLED", "no")
    monkeypatch.delenv("TASKDECK_STORAGE_PATH", raising=False)

    s = Settings.from_env()

    assert s.storage_backend == "sqlite"
    assert s.storage_path == tmp_path / "storage.sqlite3"
    assert s.auth_delay_seconds == 0.0
    assert s.social_auth_delay_seconds == 1.5
    assert s.console_enabled is False


def test_settings_unknown_backend_falls_back_to_json(monkeypatch) -> None:
    monkeypatch.setenv("TASKDECK_STORAGE_BACKEND", "redis")
    assert Settings.from_env().storage_backend == "json"


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers)
    saved_level = root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs", console_level="warning")
        logging.getLogger("taskdeck.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert log_file == tmp_path / "logs" / "taskdeck.log"
        assert "hello file" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)


def test_parse_level() -> None:
    assert parse_level("debug") == logging.DEBUG
    assert parse_level(" Warning ") == logging.WARNING
    assert parse_level(logging.ERROR) == logging.ERROR
    assert parse_level("loud") == logging.INFO
    assert parse_level(None, logging.DEBUG) == logging.DEBUG


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("taskdeck.auth.session", logging.INFO, True),
        ("taskdeck.storage.kv_store", logging.INFO, False),
        ("taskdeck.storage.kv_store", logging.WARNING, True),
        ("taskdeck.connectors.async_runner", logging.DEBUG, False),
        ("py.warnings", logging.WARNING, False),
        ("urllib3", logging.WARNING, False),
        ("urllib3", logging.ERROR, True),
    ],
)
def test_console_noise_filter(name: str, level: int, shown: bool) -> None:
    record = logging.LogRecord(name, level, __file__, 1, "msg", None, None)
    assert _ConsoleNoiseFilter().filter(record) is shown


def test_console_notifier_prints(capsys) -> None:
    ConsoleNotifier().notify(Notice(NoticeKind.LOGOUT, "Signed out", "See you soon"))
    assert "[logout] Signed out: See you soon" in capsys.readouterr().out


def test_background_loop_runs_auth_without_blocking(state) -> None:
    runner = start_background_loop()
    assert runner is not None
    state.background = runner
    try:
        fut = runner.submit(state.auth.login("ann@example.com", "pw"))
        session = fut.result(timeout=5.0)
        assert session.user is not None
        assert state.task_store.user_id == session.user.id
    finally:
        runner.stop()
        runner.join(timeout=5.0)


def test_console_loop_handles_commands_until_exit(state, monkeypatch, capsys) -> None:
    lines = iter(["", "/login ann@example.com pw", "buy milk", "/list", "/nope", "/exit"])
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(lines))

    run_console_loop(state)

    out = capsys.readouterr().out
    assert "Signed in as ann" in out
    assert "Added:" in out
    assert "buy milk" in out
    assert "Unknown command: /nope" in out
    assert [t.title for t in state.task_store.tasks] == ["buy milk"]


def test_console_loop_stops_on_eof(state, monkeypatch) -> None:
    def _eof(_prompt: str = "") -> str:
        raise EOFError

    monkeypatch.setattr("builtins.input", _eof)
    run_console_loop(state)


def test_shutdown_state_unloads_tasks(signed_in) -> None:
    signed_in.task_store.create(title="x")
    shutdown_state(signed_in)
    assert signed_in.task_store.user_id is None
    with pytest.raises(NotAuthenticatedError):
        signed_in.task_store.create(title="y")
