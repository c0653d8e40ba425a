# src/taskdeck/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Everything local lives under data_dir (gitignored).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKDECK"

STORAGE_BACKENDS = ("memory", "json", "sqlite")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Shell ----
    console_enabled: bool

    # ---- Storage ----
    data_dir: Path
    storage_backend: str
    storage_path: Path

    # ---- Simulated auth latency ----
    auth_delay_seconds: float
    social_auth_delay_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskdeck").strip() or "taskdeck"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        backend = _env(_k("STORAGE_BACKEND"), "json").strip().lower()
        if backend not in STORAGE_BACKENDS:
            backend = "json"

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskdeck"))
        default_store = data_dir / ("storage.sqlite3" if backend == "sqlite" else "storage.json")
        storage_path = _env_path(_k("STORAGE_PATH"), default_store)

        auth_delay = max(0.0, _env_float(_k("AUTH_DELAY_SECONDS"), 1.0))
        social_delay = max(0.0, _env_float(_k("SOCIAL_AUTH_DELAY_SECONDS"), 1.5))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            storage_backend=backend,
            storage_path=storage_path,
            auth_delay_seconds=auth_delay,
            social_auth_delay_seconds=social_delay,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
