# tests/test_boards.py

from __future__ import annotations

from datetime import date

from projboard.core.boards import (
    UNKNOWN_PROJECT,
    for_project,
    group_projects_by_status,
    is_overdue,
    issue_board,
    parse_list,
    project_name,
    task_board,
)
from projboard.core.mapper import map_issue, map_project, map_task

from .fakes import issue_row, project_row, task_row


def test_group_projects_by_status() -> None:
    projects = [
        map_project(project_row("a", "A", status="active")),
        map_project(project_row("b", "B", status="planned")),
        map_project(project_row("c", "C", status="completed")),
        map_project(project_row("d", "D", status="active")),
    ]
    dash = group_projects_by_status(projects)
    assert [p.id for p in dash.active] == ["a", "d"]
    assert [p.id for p in dash.planned] == ["b"]
    assert [p.id for p in dash.completed] == ["c"]


def test_task_board_columns() -> None:
    tasks = [
        map_task(task_row("1", "p", "a", status="todo")),
        map_task(task_row("2", "p", "b", status="in-progress")),
        map_task(task_row("3", "p", "c", status="done")),
    ]
    board = task_board(tasks)
    assert [t.id for t in board.todo] == ["1"]
    assert [t.id for t in board.in_progress] == ["2"]
    assert [t.id for t in board.done] == ["3"]


def test_issue_board_merges_resolved_and_closed() -> None:
    issues = [
        map_issue(issue_row("1", "p", "a", status="open")),
        map_issue(issue_row("2", "p", "b", status="resolved")),
        map_issue(issue_row("3", "p", "c", status="closed")),
        map_issue(issue_row("4", "p", "d", status="in-progress")),
    ]
    board = issue_board(issues)
    assert [i.id for i in board.open] == ["1"]
    assert [i.id for i in board.in_progress] == ["4"]
    assert [i.id for i in board.closed] == ["2", "3"]


def test_project_name_for_dangling_reference() -> None:
    projects = [map_project(project_row("p1", "Portfolio"))]
    assert project_name(projects, "p1") == "Portfolio"
    assert project_name(projects, "gone") == UNKNOWN_PROJECT


def test_for_project_filters_by_parent() -> None:
    tasks = [map_task(task_row("1", "p1", "a")), map_task(task_row("2", "p2", "b"))]
    assert [t.id for t in for_project(tasks, "p2")] == ["2"]


def test_is_overdue() -> None:
    today = date(2025, 6, 21)
    assert is_overdue(map_task(task_row("1", "p", "a", due_date="2025-06-20")), today) is True
    assert is_overdue(map_task(task_row("2", "p", "a", due_date="2025-06-21")), today) is False
    assert is_overdue(map_task(task_row("3", "p", "a", due_date="2025-06-20", status="done")), today) is False
    assert is_overdue(map_task(task_row("4", "p", "a")), today) is False
    assert is_overdue(map_task(task_row("5", "p", "a", due_date="soon")), today) is False


def test_parse_list() -> None:
    assert parse_list("React, TS,,  Tailwind ") == ["React", "TS", "Tailwind"]
    assert parse_list("") == []
    assert parse_list(None) == []
