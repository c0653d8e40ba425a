# src/taskdeck/tasks/task_api.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.state import AppState
from .task_models import Task, TaskFilter
from .task_query import TaskStats, filter_tasks, task_stats


@dataclass(frozen=True, slots=True)
class TaskView:
    """What a presentation layer needs to draw the task list."""

    tasks: list[Task]
    stats: TaskStats
    task_filter: TaskFilter
    search_term: str

    @property
    def is_filtered(self) -> bool:
        # Lets a shell tell "no matches" apart from "no tasks yet".
        return bool(self.search_term) or self.task_filter != TaskFilter.ALL


def build_task_view(
    state: AppState,
    task_filter: TaskFilter | str = TaskFilter.ALL,
    search_term: str = "",
    *,
    today: date | None = None,
) -> TaskView:
    """
    Filtered list + stats for the signed-in user.

    Stats always describe the whole list, not the filtered subset.
    """
    selected = TaskFilter.parse(task_filter)
    term = search_term or ""
    everything = state.task_store.tasks
    return TaskView(
        tasks=filter_tasks(everything, selected, term),
        stats=task_stats(everything, today),
        task_filter=selected,
        search_term=term,
    )


def resolve_task_id(state: AppState, ref: str) -> str | None:
    """
    Accept a full task id or a unique prefix of one.

    Returns None when nothing (or more than one task) matches.
    """
    ref = (ref or "").strip()
    if not ref:
        return None
    if state.task_store.get(ref) is not None:
        return ref
    hits = [t.id for t in state.task_store.tasks if t.id.startswith(ref)]
    return hits[0] if len(hits) == 1 else None
