# tests/test_mapper.py

from __future__ import annotations

import json

from projboard.core.mapper import (
    issue_update_payload,
    map_issue,
    map_project,
    map_task,
    project_insert_payload,
    project_update_payload,
    task_insert_payload,
    task_update_payload,
)
from projboard.core.models import (
    IssueStatus,
    ProjectDraft,
    ProjectStatus,
    SectionType,
    TaskDraft,
    TaskStatus,
)

from .fakes import issue_row, project_row, task_row


def test_map_project_defaults_for_missing_fields() -> None:
    p = map_project({"id": "p9", "name": "Bare", "status": "active", "created_at": "t0", "updated_at": "t1"})

    assert p.id == "p9"
    assert p.description == ""
    assert p.due_date is None
    assert p.completion_date is None
    assert p.tech_stack == []
    assert p.tags == []
    assert p.custom_sections == []
    assert p.status == ProjectStatus.ACTIVE


def test_map_project_drops_nulls_inside_lists() -> None:
    p = map_project(project_row("p1", "X", tech_stack=["React", None, "TS"], tags=None))
    assert p.tech_stack == ["React", "TS"]
    assert p.tags == []


def test_unknown_status_falls_back_to_first_state() -> None:
    assert map_project(project_row("p1", "X", status="archived")).status == ProjectStatus.PLANNED
    assert map_task(task_row("t1", "p1", "x", status="blocked")).status == TaskStatus.TODO
    assert map_issue(issue_row("i1", "p1", "x", status="wontfix")).status == IssueStatus.OPEN


def test_map_project_reads_custom_sections_list_and_json_string() -> None:
    section = {"id": "cs1", "title": "Deploy", "content": "https://x", "type": "link"}

    from_list = map_project(project_row("p1", "X", custom_sections=[section]), with_sections=True)
    from_json = map_project(
        project_row("p1", "X", custom_sections=json.dumps([section])), with_sections=True
    )

    for p in (from_list, from_json):
        assert len(p.custom_sections) == 1
        assert p.custom_sections[0].id == "cs1"
        assert p.custom_sections[0].type == SectionType.LINK


def test_map_project_ignores_malformed_custom_sections() -> None:
    p = map_project(project_row("p1", "X", custom_sections="{not json"), with_sections=True)
    assert p.custom_sections == []


def test_map_project_leaves_sections_empty_unless_asked() -> None:
    row = project_row("p1", "X", custom_sections=[{"id": "cs1", "title": "T", "content": "C"}])
    assert map_project(row).custom_sections == []


def test_blank_due_date_maps_to_none() -> None:
    t = map_task(task_row("t1", "p1", "x", due_date="  "))
    assert t.due_date is None


def test_map_issue_labels() -> None:
    i = map_issue(issue_row("i1", "p1", "500 error", labels=["bug", "api"]))
    assert i.labels == ["bug", "api"]
    assert i.project_id == "p1"


def test_project_insert_payload_sends_null_for_missing_dates() -> None:
    payload = project_insert_payload(ProjectDraft(name="X", tech_stack=["Go"]))

    assert payload["due_date"] is None
    assert payload["completion_date"] is None
    assert payload["status"] == "planned"
    assert payload["tech_stack"] == ["Go"]
    assert "id" not in payload
    assert "custom_sections" not in payload


def test_task_insert_payload_uses_wire_status() -> None:
    payload = task_insert_payload(TaskDraft(project_id="p1", title="Ship", status=TaskStatus.IN_PROGRESS))
    assert payload == {
        "project_id": "p1",
        "title": "Ship",
        "description": "",
        "status": "in-progress",
        "due_date": None,
    }


def test_update_payloads_carry_fresh_updated_at_only() -> None:
    p = map_project(project_row("p1", "X"))
    t = map_task(task_row("7", "p1", "old"))

    p_payload = project_update_payload(p, "2025-07-01T00:00:00+00:00")
    t_payload = task_update_payload(t, "2025-07-01T00:00:00+00:00")

    assert p_payload["updated_at"] == "2025-07-01T00:00:00+00:00"
    assert "created_at" not in p_payload
    assert "id" not in p_payload
    assert set(t_payload) == {"title", "description", "status", "due_date", "updated_at"}
    assert "custom_sections" not in p_payload


_SECTION = {
    "id": "cs1",
    "title": "Deployment Info",
    "content": "https://myportfolio.vercel.app",
    "type": "link",
    "created_at": "2025-06-02T00:00:00+00:00",
    "updated_at": "2025-06-03T00:00:00+00:00",
}


def test_project_update_payload_round_trips_unchanged_fields() -> None:
    row = project_row(
        "p1",
        "Portfolio",
        status="completed",
        due_date="2025-07-01",
        completion_date="2025-06-28",
        tech_stack=["React", "TypeScript"],
        tags=["web", "portfolio"],
        custom_sections=[_SECTION],
    )

    payload = project_update_payload(
        map_project(row, with_sections=True), "2025-07-02T00:00:00+00:00", with_sections=True
    )

    for key in ("name", "description", "status", "due_date", "completion_date", "tech_stack", "tags", "custom_sections"):
        assert payload[key] == row[key], key


def test_project_update_payload_sends_sections_only_when_enabled() -> None:
    project = map_project(project_row("p1", "X", custom_sections=[_SECTION]), with_sections=True)

    assert "custom_sections" not in project_update_payload(project, "t")
    assert project_update_payload(project, "t", with_sections=True)["custom_sections"] == [_SECTION]


def test_task_update_payload_round_trips_unchanged_fields() -> None:
    row = task_row("7", "p1", "Design mockups", description="wireframes", status="in-progress", due_date="2025-06-20")
    payload = task_update_payload(map_task(row), "2025-07-02T00:00:00+00:00")

    for key in ("title", "description", "status", "due_date"):
        assert payload[key] == row[key], key


def test_issue_update_payload_round_trips_unchanged_fields() -> None:
    row = issue_row("3", "p1", "500 on /api/users", description="crash", status="resolved", labels=["bug", "api"])
    payload = issue_update_payload(map_issue(row), "2025-07-02T00:00:00+00:00")

    for key in ("title", "description", "status", "labels"):
        assert payload[key] == row[key], key
