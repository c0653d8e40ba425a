# src/taskdeck/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "taskdeck.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s [%(threadName)s]: %(message)s"

# Minimum level shown on the console, first matching prefix wins.
# Storage logs every write; the background loop logs from its own thread.
_CONSOLE_FLOORS: tuple[tuple[str, int], ...] = (
    ("taskdeck.storage.", logging.WARNING),
    ("taskdeck.connectors.async_runner", logging.WARNING),
    ("taskdeck.", logging.NOTSET),
    ("py.warnings", logging.ERROR),
)
_THIRD_PARTY_FLOOR = logging.ERROR


def parse_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Accept 'debug', 'INFO', 20, ... and fall back to `default` for anything else."""
    if isinstance(value, int):
        return value
    if not value:
        return default
    level = logging.getLevelName(str(value).strip().upper())
    return level if isinstance(level, int) else default


class _ConsoleNoiseFilter(logging.Filter):
    """Keep the prompt readable while the auth loop and storage log in the background."""

    def filter(self, record: logging.LogRecord) -> bool:
        for prefix, floor in _CONSOLE_FLOORS:
            if record.name.startswith(prefix):
                return record.levelno >= floor
        return record.levelno >= _THIRD_PARTY_FLOOR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskdeck",
    console_level: str | int = logging.INFO,
    file_level: str | int = logging.DEBUG,
) -> Path:
    """
    Install a filtered stderr handler plus a full file log under `log_dir`.

    Replaces whatever handlers the root logger had. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(parse_level(console_level))
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(parse_level(file_level, logging.DEBUG))
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    # asyncio debug chatter from the background loop is not useful even in the file.
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.captureWarnings(True)
    return log_file
