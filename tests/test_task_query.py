# tests/test_task_query.py

from __future__ import annotations

from datetime import date

import pytest

from taskdeck.tasks.task_api import build_task_view, resolve_task_id
from taskdeck.tasks.task_models import Task, TaskCategory, TaskFilter, TaskPriority
from taskdeck.tasks.task_query import filter_tasks, is_overdue, matches_search, task_stats


def _task(
    tid: str,
    title: str,
    *,
    description: str = "",
    priority: TaskPriority = TaskPriority.MEDIUM,
    category: TaskCategory = TaskCategory.OTHER,
    done: bool = False,
    due: date | None = None,
) -> Task:
    return Task(
        id=tid,
        title=title,
        description=description,
        priority=priority,
        category=category,
        due_date=due,
        is_completed=done,
        created_at=1.0,
    )


A = _task("a", "Alpha report", priority=TaskPriority.HIGH, category=TaskCategory.WORK)
B = _task("b", "Buy milk", description="and eggs", priority=TaskPriority.LOW, category=TaskCategory.PERSONAL, done=True)
C = _task("c", "Read chapter 3", category=TaskCategory.STUDY, priority=TaskPriority.HIGH, done=True)
D = _task("d", "Gym", description="leg day", category=TaskCategory.PERSONAL)

ALL = [A, B, C, D]


def test_scenario_work_completed_and_search() -> None:
    tasks = [A, B]
    assert filter_tasks(tasks, "work") == [A]
    assert filter_tasks(tasks, "completed") == [B]
    assert filter_tasks(tasks, "all", "Alpha") == [A]


@pytest.mark.parametrize(
    ("selector", "expected"),
    [
        (TaskFilter.ALL, [A, B, C, D]),
        (TaskFilter.COMPLETED, [B, C]),
        (TaskFilter.PENDING, [A, D]),
        (TaskFilter.HIGH, [A, C]),
        (TaskFilter.WORK, [A]),
        (TaskFilter.PERSONAL, [B, D]),
        (TaskFilter.STUDY, [C]),
    ],
)
def test_each_filter(selector: TaskFilter, expected: list[Task]) -> None:
    assert filter_tasks(ALL, selector) == expected


def test_search_is_case_insensitive_over_title_and_description() -> None:
    assert filter_tasks(ALL, search_term="MILK") == [B]
    assert filter_tasks(ALL, search_term="Eggs") == [B]
    assert filter_tasks(ALL, search_term="day") == [D]
    assert filter_tasks(ALL, search_term="nothing like this") == []
    assert filter_tasks(ALL, search_term="") == ALL


def test_filter_and_search_combine() -> None:
    assert filter_tasks(ALL, TaskFilter.PERSONAL, "gym") == [D]
    assert filter_tasks(ALL, TaskFilter.COMPLETED, "gym") == []


def test_matches_search_empty_term() -> None:
    assert matches_search(A, "")


@pytest.mark.parametrize("selector", list(TaskFilter))
@pytest.mark.parametrize("term", ["", "a", "e", "zzz"])
def test_result_is_ordered_subsequence(selector: TaskFilter, term: str) -> None:
    out = filter_tasks(ALL, selector, term)
    positions = [ALL.index(t) for t in out]
    assert positions == sorted(positions)


def test_unknown_filter_falls_back_to_all() -> None:
    assert TaskFilter.parse("bogus") == TaskFilter.ALL
    assert TaskFilter.parse(None) == TaskFilter.ALL
    assert filter_tasks(ALL, "bogus") == ALL


def test_stats_empty_is_zero() -> None:
    stats = task_stats([])
    assert stats.total_count == 0
    assert stats.completed_count == 0
    assert stats.progress_percentage == 0


def test_stats_half_done() -> None:
    stats = task_stats(ALL)
    assert stats.total_count == 4
    assert stats.completed_count == 2
    assert stats.pending_count == 2
    assert stats.progress_percentage == 50


def test_overdue() -> None:
    today = date(2026, 10, 19)
    late = _task("x", "late", due=date(2026, 10, 18))
    due_today = _task("y", "today", due=today)
    late_but_done = _task("z", "done", due=date(2026, 1, 1), done=True)

    assert is_overdue(late, today)
    assert not is_overdue(due_today, today)
    assert not is_overdue(late_but_done, today)
    assert not is_overdue(A, today)
    assert task_stats([late, due_today, late_but_done], today).overdue_count == 1


def test_build_task_view(signed_in) -> None:
    store = signed_in.task_store
    a = store.create(title="Alpha", category="work", priority="high")
    b = store.create(title="Beta", category="personal")
    store.toggle_complete(b.id)

    view = build_task_view(signed_in, "work")
    assert [t.id for t in view.tasks] == [a.id]
    assert view.is_filtered
    # stats describe the whole list, not the filtered view
    assert view.stats.total_count == 2
    assert view.stats.progress_percentage == 50

    plain = build_task_view(signed_in)
    assert not plain.is_filtered
    assert [t.id for t in plain.tasks] == [b.id, a.id]


def test_resolve_task_id_by_prefix(signed_in) -> None:
    t = signed_in.task_store.create(title="Alpha")
    assert resolve_task_id(signed_in, t.id) == t.id
    assert resolve_task_id(signed_in, t.id[:6]) == t.id
    assert resolve_task_id(signed_in, "") is None
    assert resolve_task_id(signed_in, "no-such-id") is None
