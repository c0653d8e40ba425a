# src/taskdeck/storage/keys.py

"""Stable persistence keys. Changing these orphans existing local data."""

from __future__ import annotations

SESSION_KEY = "user"
TASKS_KEY_PREFIX = "tasks_"


def tasks_key(user_id: str) -> str:
    if not user_id:
        raise ValueError("user_id is required")
    return f"{TASKS_KEY_PREFIX}{user_id}"
