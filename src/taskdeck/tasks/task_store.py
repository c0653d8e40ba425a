# src/taskdeck/tasks/task_store.py

from __future__ import annotations

import json
import logging
import time
import uuid
from dataclasses import replace
from datetime import date
from typing import Any

from ..core.ports import KeyValueStore
from ..storage.keys import tasks_key
from .task_models import (
    Task,
    TaskCategory,
    TaskPriority,
    clean_title,
    parse_due_date,
)

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class NotAuthenticatedError(RuntimeError):
    """Task mutation attempted with no signed-in user."""


class TaskStore:
    """
    In-memory task list of the signed-in user, mirrored to a key/value store.

    Ordering: newest first. create() prepends; nothing else reorders.

    Persistence:
    - one key per user (see storage.keys.tasks_key)
    - every mutation rewrites the whole list (no deltas). Fine for a personal
      list of a few hundred items; it is the scaling limit of this store.
    """

    def __init__(self, storage: KeyValueStore) -> None:
        self._storage = storage
        self._user_id: str | None = None
        self._tasks: list[Task] = []

    # ---- state ----

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def _require_user(self) -> str:
        if self._user_id is None:
            raise NotAuthenticatedError("Sign in to manage tasks.")
        return self._user_id

    # ---- load / persist ----

    def load(self, user_id: str) -> tuple[Task, ...]:
        """Discard whatever is in memory and read `user_id`'s list."""
        key = tasks_key(user_id)
        self._user_id = user_id
        self._tasks = []

        raw = self._storage.get(key)
        if raw is None:
            logger.info("No stored tasks for user_id=%s", user_id)
            return self.tasks

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError("task collection must be a list")
            self._tasks = [Task.from_dict(item) for item in data]
        except (ValueError, KeyError, TypeError):
            logger.warning("Stored tasks for user_id=%s are malformed; discarding them.", user_id, exc_info=True)
            self._tasks = []
            self._storage.delete(key)
            return self.tasks

        logger.info("Loaded %d tasks for user_id=%s", len(self._tasks), user_id)
        return self.tasks

    def unload(self) -> None:
        """Forget the in-memory list (storage is left alone)."""
        self._user_id = None
        self._tasks = []

    def _persist(self) -> None:
        user_id = self._require_user()
        payload = json.dumps([t.to_dict() for t in self._tasks], ensure_ascii=False)
        self._storage.set(tasks_key(user_id), payload)
        logger.debug("Persisted %d tasks for user_id=%s", len(self._tasks), user_id)

    # ---- mutations ----

    def create(
        self,
        *,
        title: str,
        description: str = "",
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        category: TaskCategory | str = TaskCategory.PERSONAL,
        due_date: date | str | None = None,
    ) -> Task:
        self._require_user()

        task = Task(
            id=uuid.uuid4().hex,
            title=clean_title(title),
            description=str(description or "").strip(),
            priority=TaskPriority.parse(priority),
            category=TaskCategory.parse(category),
            due_date=parse_due_date(due_date),
            is_completed=False,
            created_at=time.time(),
        )

        self._tasks.insert(0, task)
        self._persist()
        logger.debug("Task created id=%s priority=%s category=%s", task.id, task.priority, task.category)
        return task

    def update(
        self,
        task_id: str,
        *,
        title: Any = _UNSET,
        description: Any = _UNSET,
        priority: Any = _UNSET,
        category: Any = _UNSET,
        due_date: Any = _UNSET,
        is_completed: Any = _UNSET,
    ) -> Task | None:
        """
        Replace the given fields of one task. id and created_at never change.

        Returns the updated task, or None when no task has `task_id`.
        Passing due_date=None clears the due date.
        """
        self._require_user()

        idx = self._index_of(task_id)
        if idx is None:
            return None
        old = self._tasks[idx]

        # Validate everything first so a bad field leaves the task untouched.
        new = Task(
            id=old.id,
            title=old.title if title is _UNSET else clean_title(title),
            description=old.description if description is _UNSET else str(description or "").strip(),
            priority=old.priority if priority is _UNSET else TaskPriority.parse(priority),
            category=old.category if category is _UNSET else TaskCategory.parse(category),
            due_date=old.due_date if due_date is _UNSET else parse_due_date(due_date),
            is_completed=old.is_completed if is_completed is _UNSET else bool(is_completed),
            created_at=old.created_at,
        )

        self._tasks[idx] = new
        self._persist()
        return new

    def toggle_complete(self, task_id: str) -> Task | None:
        self._require_user()

        idx = self._index_of(task_id)
        if idx is None:
            return None
        old = self._tasks[idx]
        new = replace(old, is_completed=not old.is_completed)
        self._tasks[idx] = new
        self._persist()
        return new

    def delete(self, task_id: str) -> bool:
        self._require_user()

        idx = self._index_of(task_id)
        if idx is None:
            return False
        del self._tasks[idx]
        self._persist()
        return True

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None
