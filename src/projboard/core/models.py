# src/projboard/core/models.py

"""
Entity model: plain records with no behavior.

Field names follow Python conventions; the remote store uses the same
snake_case names, so the mapper translates one-to-one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class EntityKind(StrEnum):
    """Entity kind; the value is the remote collection name."""

    PROJECTS = "projects"
    TASKS = "tasks"
    ISSUES = "issues"


class ProjectStatus(StrEnum):
    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def from_remote(cls, raw: str | None) -> ProjectStatus:
        if not raw:
            return cls.PLANNED
        try:
            return cls(raw)
        except ValueError:
            return cls.PLANNED


class TaskStatus(StrEnum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"

    @classmethod
    def from_remote(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.TODO
        try:
            return cls(raw)
        except ValueError:
            return cls.TODO


class IssueStatus(StrEnum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"

    @classmethod
    def from_remote(cls, raw: str | None) -> IssueStatus:
        if not raw:
            return cls.OPEN
        try:
            return cls(raw)
        except ValueError:
            return cls.OPEN


class SectionType(StrEnum):
    TEXT = "text"
    LINK = "link"
    MARKDOWN = "markdown"
    FILE = "file"

    @classmethod
    def from_remote(cls, raw: str | None) -> SectionType:
        if not raw:
            return cls.TEXT
        try:
            return cls(raw)
        except ValueError:
            return cls.TEXT


@dataclass(slots=True)
class CustomSection:
    id: str
    title: str
    content: str
    created_at: str
    updated_at: str
    type: SectionType = SectionType.TEXT


@dataclass(slots=True)
class Project:
    id: str
    name: str
    description: str
    status: ProjectStatus
    created_at: str
    updated_at: str

    due_date: str | None = None
    completion_date: str | None = None
    tech_stack: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    custom_sections: list[CustomSection] = field(default_factory=list)


@dataclass(slots=True)
class Task:
    id: str
    project_id: str
    title: str
    description: str
    status: TaskStatus
    created_at: str
    updated_at: str

    due_date: str | None = None


@dataclass(slots=True)
class Issue:
    id: str
    project_id: str
    title: str
    description: str
    status: IssueStatus
    created_at: str
    updated_at: str

    labels: list[str] = field(default_factory=list)


# ---- create inputs (no id / timestamps / custom sections) ----


@dataclass(slots=True)
class ProjectDraft:
    name: str
    description: str = ""
    status: ProjectStatus = ProjectStatus.PLANNED
    due_date: str | None = None
    completion_date: str | None = None
    tech_stack: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


@dataclass(slots=True)
class TaskDraft:
    project_id: str
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    due_date: str | None = None


@dataclass(slots=True)
class IssueDraft:
    project_id: str
    title: str
    description: str = ""
    status: IssueStatus = IssueStatus.OPEN
    labels: list[str] = field(default_factory=list)
