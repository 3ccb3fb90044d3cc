# src/projboard/cli/render.py

"""Plain-text rendering of entities for the console."""

from __future__ import annotations

from collections.abc import Sequence

from ..core.boards import (
    for_project,
    group_projects_by_status,
    is_overdue,
    issue_board,
    project_name,
    task_board,
)
from ..core.models import CustomSection, Issue, Project, Task


def _chips(values: Sequence[str], limit: int) -> str:
    if not values:
        return ""
    shown = ", ".join(values[:limit])
    extra = len(values) - limit
    return f"{shown} +{extra}" if extra > 0 else shown


def project_line(p: Project) -> str:
    parts = [f"[{p.id}] {p.name} ({p.status})"]
    if p.due_date:
        parts.append(f"due {p.due_date}")
    if p.tech_stack:
        parts.append(f"tech: {_chips(p.tech_stack, 3)}")
    if p.tags:
        parts.append(f"tags: {_chips(p.tags, 2)}")
    return " | ".join(parts)


def task_line(t: Task) -> str:
    line = f"[{t.id}] {t.title}"
    if t.due_date:
        line += f" (due {t.due_date})"
    if is_overdue(t):
        line += " OVERDUE"
    return line


def issue_line(i: Issue) -> str:
    line = f"[{i.id}] {i.title} ({i.status})"
    if i.labels:
        line += f" [{', '.join(i.labels)}]"
    return line


def _column(title: str, lines: list[str], empty: str) -> list[str]:
    out = [f"  {title} ({len(lines)})"]
    if lines:
        out.extend(f"    {ln}" for ln in lines)
    elif empty:
        out.append(f"    {empty}")
    return out


def dashboard(projects: Sequence[Project]) -> str:
    if not projects:
        return "No projects yet. Create one with /new-project name=..."
    groups = group_projects_by_status(projects)
    lines = [f"Projects ({len(projects)}):"]
    lines += _column("Active", [project_line(p) for p in groups.active], "No active projects")
    lines += _column("Planned", [project_line(p) for p in groups.planned], "No planned projects")
    if groups.completed:
        lines += _column("Completed", [project_line(p) for p in groups.completed], "")
    return "\n".join(lines)


def tasks_block(tasks: Sequence[Task]) -> list[str]:
    board = task_board(tasks)
    lines: list[str] = []
    lines += _column("To Do", [task_line(t) for t in board.todo], "No tasks")
    lines += _column("In Progress", [task_line(t) for t in board.in_progress], "No tasks")
    lines += _column("Done", [task_line(t) for t in board.done], "No tasks")
    return lines


def issues_block(issues: Sequence[Issue]) -> list[str]:
    board = issue_board(issues)
    lines: list[str] = []
    lines += _column("Open", [issue_line(i) for i in board.open], "No open issues")
    lines += _column("In Progress", [issue_line(i) for i in board.in_progress], "No issues")
    lines += _column("Resolved / Closed", [issue_line(i) for i in board.closed], "No issues")
    return lines


def section_block(s: CustomSection) -> list[str]:
    lines = [f"  [{s.id}] {s.title} ({s.type})"]
    lines.extend(f"    {ln}" for ln in s.content.splitlines() or [""])
    return lines


def project_detail(p: Project, tasks: Sequence[Task], issues: Sequence[Issue]) -> str:
    lines = [f"{p.name} [{p.id}] ({p.status})"]
    if p.description:
        lines.append(p.description)
    if p.due_date:
        lines.append(f"Due: {p.due_date}")
    if p.completion_date:
        lines.append(f"Completed: {p.completion_date}")
    if p.tech_stack:
        lines.append(f"Tech stack: {', '.join(p.tech_stack)}")
    if p.tags:
        lines.append(f"Tags: {', '.join(p.tags)}")

    own_tasks = for_project(tasks, p.id)
    own_issues = for_project(issues, p.id)
    lines.append(f"Tasks ({len(own_tasks)}):")
    lines += tasks_block(own_tasks)
    lines.append(f"Issues ({len(own_issues)}):")
    lines += issues_block(own_issues)

    lines.append(f"Custom sections ({len(p.custom_sections)}):")
    for s in p.custom_sections:
        lines += section_block(s)
    return "\n".join(lines)


def per_project(
    projects: Sequence[Project],
    items: Sequence[Task] | Sequence[Issue],
    *,
    noun: str,
    block,
) -> str:
    if not items:
        return f"No {noun} yet."
    lines: list[str] = []
    seen: list[str] = []
    for item in items:
        if item.project_id not in seen:
            seen.append(item.project_id)
    for pid in seen:
        own = for_project(items, pid)
        lines.append(f"{project_name(projects, pid)} [{pid}] - {len(own)} {noun}")
        lines += block(own)
    return "\n".join(lines)
