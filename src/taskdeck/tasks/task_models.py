# src/taskdeck/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Any


class TaskValidationError(ValueError):
    """Rejected task input. Raised before anything is mutated or persisted."""


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: Any) -> TaskPriority:
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise TaskValidationError(f"Unknown priority: {raw!r}") from None


class TaskCategory(StrEnum):
    WORK = "work"
    PERSONAL = "personal"
    STUDY = "study"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: Any) -> TaskCategory:
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise TaskValidationError(f"Unknown category: {raw!r}") from None


class TaskFilter(StrEnum):
    """Named views over the task list."""

    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"
    HIGH = "high"
    WORK = "work"
    PERSONAL = "personal"
    STUDY = "study"

    @classmethod
    def parse(cls, raw: Any) -> TaskFilter:
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw or "").strip().lower())
        except ValueError:
            return cls.ALL


def clean_title(raw: Any) -> str:
    title = str(raw or "").strip()
    if not title:
        raise TaskValidationError("Task title must not be empty")
    return title


def parse_due_date(raw: Any) -> date | None:
    """Accept a date, an ISO 'YYYY-MM-DD' string, or nothing."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, date):
        return raw
    try:
        return date.fromisoformat(str(raw).strip())
    except ValueError:
        raise TaskValidationError(f"Invalid due date: {raw!r} (expected YYYY-MM-DD)") from None


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str
    priority: TaskPriority
    category: TaskCategory
    due_date: date | None
    is_completed: bool
    created_at: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "category": self.category.value,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "is_completed": self.is_completed,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Task:
        """Raises ValueError/KeyError/TypeError on a malformed record."""
        if not isinstance(data, dict):
            raise TypeError("task record must be an object")

        task_id = data["id"]
        if not isinstance(task_id, str) or not task_id:
            raise ValueError("task id must be a non-empty string")

        return cls(
            id=task_id,
            title=clean_title(data["title"]),
            description=str(data.get("description") or ""),
            priority=TaskPriority.parse(data.get("priority", TaskPriority.MEDIUM)),
            category=TaskCategory.parse(data.get("category", TaskCategory.PERSONAL)),
            due_date=parse_due_date(data.get("due_date")),
            is_completed=bool(data.get("is_completed", False)),
            created_at=float(data["created_at"]),
        )
