# src/taskdeck/tasks/task_query.py

"""
Read-only views over a task list: filter + search, and summary numbers.

Nothing here mutates or persists. Results keep the input order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date

from .task_models import Task, TaskCategory, TaskFilter, TaskPriority

TaskPredicate = Callable[[Task], bool]

_FILTERS: dict[TaskFilter, TaskPredicate] = {
    TaskFilter.ALL: lambda t: True,
    TaskFilter.COMPLETED: lambda t: t.is_completed,
    TaskFilter.PENDING: lambda t: not t.is_completed,
    TaskFilter.HIGH: lambda t: t.priority == TaskPriority.HIGH,
    TaskFilter.WORK: lambda t: t.category == TaskCategory.WORK,
    TaskFilter.PERSONAL: lambda t: t.category == TaskCategory.PERSONAL,
    TaskFilter.STUDY: lambda t: t.category == TaskCategory.STUDY,
}


def matches_search(task: Task, search_term: str) -> bool:
    """Case-insensitive substring match on title or description."""
    term = (search_term or "").lower()
    if not term:
        return True
    return term in task.title.lower() or term in task.description.lower()


def filter_tasks(
    tasks: Iterable[Task],
    task_filter: TaskFilter | str = TaskFilter.ALL,
    search_term: str = "",
) -> list[Task]:
    predicate = _FILTERS[TaskFilter.parse(task_filter)]
    return [t for t in tasks if predicate(t) and matches_search(t, search_term)]


def is_overdue(task: Task, today: date | None = None) -> bool:
    if task.is_completed or task.due_date is None:
        return False
    if today is None:
        today = date.today()
    return task.due_date < today


@dataclass(frozen=True, slots=True)
class TaskStats:
    total_count: int
    completed_count: int
    pending_count: int
    overdue_count: int

    @property
    def progress_percentage(self) -> float:
        if self.total_count <= 0:
            return 0
        return self.completed_count / self.total_count * 100


def task_stats(tasks: Iterable[Task], today: date | None = None) -> TaskStats:
    items = list(tasks)
    completed = sum(1 for t in items if t.is_completed)
    overdue = sum(1 for t in items if is_overdue(t, today))
    return TaskStats(
        total_count=len(items),
        completed_count=completed,
        pending_count=len(items) - completed,
        overdue_count=overdue,
    )
