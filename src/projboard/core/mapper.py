# src/projboard/core/mapper.py

"""
Translation between raw remote rows and the entity model.

Rules:
- missing description -> ""
- missing optional dates -> None
- missing list fields (tech_stack, tags, labels) -> []; None never lands in a list
- project custom sections are read from (and written to) the `custom_sections` JSON
  column only when the caller opts in with `with_sections=True`; otherwise they stay []

Every function here is pure and never raises for a well-formed row.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from .models import (
    CustomSection,
    EntityKind,
    Issue,
    IssueDraft,
    IssueStatus,
    Project,
    ProjectDraft,
    ProjectStatus,
    SectionType,
    Task,
    TaskDraft,
    TaskStatus,
)
from .ports import RemoteRow

logger = logging.getLogger(__name__)


def now_iso() -> str:
    return datetime.now(UTC).isoformat(timespec="microseconds")


# ---- low-level helpers ----


def _text(raw: Any) -> str:
    return "" if raw is None else str(raw)


def _opt_text(raw: Any) -> str | None:
    if raw is None:
        return None
    s = str(raw)
    return s if s.strip() else None


def _str_list(raw: Any) -> list[str]:
    if not isinstance(raw, (list, tuple)):
        return []
    return [str(x) for x in raw if x is not None]


def _raw_sections(raw: Any) -> list[Any]:
    if raw is None:
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("custom_sections is not valid JSON; ignoring")
            return []
    return raw if isinstance(raw, list) else []


# ---- custom sections ----


def map_section(raw: dict[str, Any]) -> CustomSection:
    return CustomSection(
        id=_text(raw.get("id")),
        title=_text(raw.get("title")),
        content=_text(raw.get("content")),
        type=SectionType.from_remote(raw.get("type")),
        created_at=_text(raw.get("created_at")),
        updated_at=_text(raw.get("updated_at")),
    )


def section_to_remote(section: CustomSection) -> dict[str, Any]:
    return {
        "id": section.id,
        "title": section.title,
        "content": section.content,
        "type": section.type.value,
        "created_at": section.created_at,
        "updated_at": section.updated_at,
    }


# ---- remote -> entity ----


def map_project(row: RemoteRow, *, with_sections: bool = False) -> Project:
    sections: list[CustomSection] = []
    if with_sections:
        sections = [
            map_section(s) for s in _raw_sections(row.get("custom_sections")) if isinstance(s, dict)
        ]
    return Project(
        id=_text(row.get("id")),
        name=_text(row.get("name")),
        description=_text(row.get("description")),
        status=ProjectStatus.from_remote(row.get("status")),
        due_date=_opt_text(row.get("due_date")),
        completion_date=_opt_text(row.get("completion_date")),
        tech_stack=_str_list(row.get("tech_stack")),
        tags=_str_list(row.get("tags")),
        custom_sections=sections,
        created_at=_text(row.get("created_at")),
        updated_at=_text(row.get("updated_at")),
    )


def map_task(row: RemoteRow) -> Task:
    return Task(
        id=_text(row.get("id")),
        project_id=_text(row.get("project_id")),
        title=_text(row.get("title")),
        description=_text(row.get("description")),
        status=TaskStatus.from_remote(row.get("status")),
        due_date=_opt_text(row.get("due_date")),
        created_at=_text(row.get("created_at")),
        updated_at=_text(row.get("updated_at")),
    )


def map_issue(row: RemoteRow) -> Issue:
    return Issue(
        id=_text(row.get("id")),
        project_id=_text(row.get("project_id")),
        title=_text(row.get("title")),
        description=_text(row.get("description")),
        status=IssueStatus.from_remote(row.get("status")),
        labels=_str_list(row.get("labels")),
        created_at=_text(row.get("created_at")),
        updated_at=_text(row.get("updated_at")),
    )


MAPPERS: dict[EntityKind, Callable[[RemoteRow], Any]] = {
    EntityKind.PROJECTS: map_project,
    EntityKind.TASKS: map_task,
    EntityKind.ISSUES: map_issue,
}


# ---- entity -> remote (insert) ----


def project_insert_payload(draft: ProjectDraft) -> RemoteRow:
    return {
        "name": draft.name,
        "description": draft.description,
        "status": draft.status.value,
        "due_date": draft.due_date,
        "completion_date": draft.completion_date,
        "tech_stack": list(draft.tech_stack),
        "tags": list(draft.tags),
    }


def task_insert_payload(draft: TaskDraft) -> RemoteRow:
    return {
        "project_id": draft.project_id,
        "title": draft.title,
        "description": draft.description,
        "status": draft.status.value,
        "due_date": draft.due_date,
    }


def issue_insert_payload(draft: IssueDraft) -> RemoteRow:
    return {
        "project_id": draft.project_id,
        "title": draft.title,
        "description": draft.description,
        "status": draft.status.value,
        "labels": list(draft.labels),
    }


# ---- entity -> remote (update: mutable subset + fresh updated_at) ----


def project_update_payload(
    project: Project, updated_at: str, *, with_sections: bool = False
) -> RemoteRow:
    payload: RemoteRow = {
        "name": project.name,
        "description": project.description,
        "status": project.status.value,
        "due_date": project.due_date,
        "completion_date": project.completion_date,
        "tech_stack": list(project.tech_stack),
        "tags": list(project.tags),
        "updated_at": updated_at,
    }
    if with_sections:
        payload["custom_sections"] = [section_to_remote(s) for s in project.custom_sections]
    return payload


def task_update_payload(task: Task, updated_at: str) -> RemoteRow:
    return {
        "title": task.title,
        "description": task.description,
        "status": task.status.value,
        "due_date": task.due_date,
        "updated_at": updated_at,
    }


def issue_update_payload(issue: Issue, updated_at: str) -> RemoteRow:
    return {
        "title": issue.title,
        "description": issue.description,
        "status": issue.status.value,
        "labels": list(issue.labels),
        "updated_at": updated_at,
    }
