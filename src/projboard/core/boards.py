# src/projboard/core/boards.py

"""View-model helpers: grouping and lookups used by the dashboard and the boards."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TypeVar

from .models import Issue, IssueStatus, Project, ProjectStatus, Task, TaskStatus

UNKNOWN_PROJECT = "Unknown project"

T = TypeVar("T", Project, Task, Issue)


@dataclass(slots=True)
class Dashboard:
    active: list[Project] = field(default_factory=list)
    planned: list[Project] = field(default_factory=list)
    completed: list[Project] = field(default_factory=list)


@dataclass(slots=True)
class TaskBoard:
    todo: list[Task] = field(default_factory=list)
    in_progress: list[Task] = field(default_factory=list)
    done: list[Task] = field(default_factory=list)


@dataclass(slots=True)
class IssueBoard:
    open: list[Issue] = field(default_factory=list)
    in_progress: list[Issue] = field(default_factory=list)
    # resolved + closed share one column
    closed: list[Issue] = field(default_factory=list)


def group_projects_by_status(projects: Iterable[Project]) -> Dashboard:
    out = Dashboard()
    for p in projects:
        if p.status == ProjectStatus.ACTIVE:
            out.active.append(p)
        elif p.status == ProjectStatus.COMPLETED:
            out.completed.append(p)
        else:
            out.planned.append(p)
    return out


def task_board(tasks: Iterable[Task]) -> TaskBoard:
    out = TaskBoard()
    for t in tasks:
        if t.status == TaskStatus.DONE:
            out.done.append(t)
        elif t.status == TaskStatus.IN_PROGRESS:
            out.in_progress.append(t)
        else:
            out.todo.append(t)
    return out


def issue_board(issues: Iterable[Issue]) -> IssueBoard:
    out = IssueBoard()
    for i in issues:
        if i.status in (IssueStatus.RESOLVED, IssueStatus.CLOSED):
            out.closed.append(i)
        elif i.status == IssueStatus.IN_PROGRESS:
            out.in_progress.append(i)
        else:
            out.open.append(i)
    return out


def for_project(items: Iterable[T], project_id: str) -> list[T]:
    return [x for x in items if x.project_id == project_id]


def find_by_id(items: Iterable[T], entity_id: str) -> T | None:
    for x in items:
        if x.id == entity_id:
            return x
    return None


def project_name(projects: Sequence[Project], project_id: str) -> str:
    # Dangling project references are not enforced client-side.
    p = find_by_id(projects, project_id)
    return p.name if p is not None else UNKNOWN_PROJECT


def _parse_day(raw: str) -> date | None:
    try:
        return datetime.fromisoformat(raw.strip().replace("Z", "+00:00")).date()
    except ValueError:
        return None


def is_overdue(task: Task, today: date | None = None) -> bool:
    if not task.due_date or task.status == TaskStatus.DONE:
        return False
    due = _parse_day(task.due_date)
    if due is None:
        return False
    return due < (today or date.today())


def parse_list(raw: str | None) -> list[str]:
    """Split a comma separated form value: "a, b,,c" -> ["a", "b", "c"]."""
    if not raw:
        return []
    return [p.strip() for p in raw.split(",") if p.strip()]
