# src/projboard/cli/commands.py

from __future__ import annotations

import asyncio
import logging
import shlex
from collections.abc import Awaitable, Callable
from dataclasses import replace
from datetime import date
from enum import StrEnum
from typing import Any, TypeVar

from ..core import sections
from ..core.boards import find_by_id, parse_list
from ..core.models import (
    EntityKind,
    IssueDraft,
    IssueStatus,
    Project,
    ProjectDraft,
    ProjectStatus,
    SectionType,
    TaskDraft,
    TaskStatus,
)
from ..core.ports import RemoteStoreError
from ..core.state import AppState, CurrentView
from . import render

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=StrEnum)


class CommandRegistry:
    """Slash-command registry used by the console (/help, /dashboard, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Write failures and invalid input come back as messages; state is left unchanged.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return await handler(state, args)
        except RemoteStoreError as e:
            logger.info("Command /%s failed: %s", name, e)
            return f"Request failed: {e}\nNothing was changed."
        except ValueError as e:
            return f"Invalid input: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----

_ALIASES = {
    "desc": "description",
    "tech": "tech_stack",
    "due": "due_date",
    "completion": "completion_date",
    "completed": "completion_date",
    "project": "project_id",
}

_PROJECT_FIELDS = {"name", "description", "status", "due_date", "completion_date", "tech_stack", "tags"}
_TASK_FIELDS = {"title", "description", "status", "due_date"}
_ISSUE_FIELDS = {"title", "description", "status", "labels"}
_SECTION_FIELDS = {"title", "content", "type"}


def _split(args: list[str], allowed: set[str]) -> tuple[list[str], dict[str, str]]:
    """Split args into positionals and key=value options (keys normalized via _ALIASES)."""
    positional: list[str] = []
    opts: dict[str, str] = {}
    for a in args:
        key, sep, value = a.partition("=")
        if not sep or not key:
            positional.append(a)
            continue
        key = key.strip().lower().replace("-", "_")
        key = _ALIASES.get(key, key)
        if key not in allowed:
            raise ValueError(f"unknown field '{key}' (allowed: {', '.join(sorted(allowed))})")
        opts[key] = value.strip()
    return positional, opts


def _enum(cls: type[S], raw: str, field_name: str) -> S:
    try:
        return cls(raw.strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in cls)
        raise ValueError(f"{field_name} must be one of: {allowed}") from None


def _opt_date(raw: str, field_name: str) -> str | None:
    s = raw.strip()
    if not s or s.lower() == "none":
        return None
    try:
        date.fromisoformat(s)
    except ValueError:
        raise ValueError(f"{field_name} must be YYYY-MM-DD") from None
    return s


def _project_fields(opts: dict[str, str]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, raw in opts.items():
        if key == "status":
            out[key] = _enum(ProjectStatus, raw, "status")
        elif key in ("due_date", "completion_date"):
            out[key] = _opt_date(raw, key)
        elif key in ("tech_stack", "tags"):
            out[key] = parse_list(raw)
        elif key in _PROJECT_FIELDS:
            out[key] = raw
    return out


def _task_fields(opts: dict[str, str]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, raw in opts.items():
        if key == "status":
            out[key] = _enum(TaskStatus, raw, "status")
        elif key == "due_date":
            out[key] = _opt_date(raw, key)
        elif key in _TASK_FIELDS:
            out[key] = raw
    return out


def _issue_fields(opts: dict[str, str]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, raw in opts.items():
        if key == "status":
            out[key] = _enum(IssueStatus, raw, "status")
        elif key == "labels":
            out[key] = parse_list(raw)
        elif key in _ISSUE_FIELDS:
            out[key] = raw
    return out


# ---- data helpers ----


async def _load(state: AppState, *kinds: EntityKind) -> str | None:
    """Load the given collections; return a blocking error message if any fetch failed."""
    await asyncio.gather(*(state.data.read(k) for k in kinds))
    failed = [k for k in kinds if state.data.error(k) is not None]
    if not failed:
        return None
    lines = [f"Failed to load {k}: {state.data.error(k)}" for k in failed]
    lines.append("Use /retry to try again.")
    return "\n".join(lines)


def _items(state: AppState, kind: EntityKind) -> list[Any]:
    return state.data.snapshot(kind).items


async def _resolve_project(state: AppState, project_id: str | None) -> Project:
    pid = project_id or state.view.selected_project_id
    if not pid:
        raise ValueError("no project selected (use /open <project_id> or pass project_id=...)")
    err = await _load(state, EntityKind.PROJECTS)
    if err:
        raise ValueError(err)
    project = find_by_id(_items(state, EntityKind.PROJECTS), pid)
    if project is None:
        raise ValueError(f"unknown project id: {pid}")
    return project


async def _resolve(state: AppState, kind: EntityKind, entity_id: str | None) -> Any:
    if not entity_id:
        raise ValueError("an id is required")
    err = await _load(state, kind)
    if err:
        raise ValueError(err)
    entity = find_by_id(_items(state, kind), entity_id)
    if entity is None:
        raise ValueError(f"unknown {kind} id: {entity_id}")
    return entity


# ---- navigation ----


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str]) -> str:
    store = "in-memory (offline demo)" if state.offline else getattr(state.settings, "store_url", "")
    view = str(state.view.current_view)
    if state.view.selected_project_id:
        view += f" (project {state.view.selected_project_id})"
    lines = ["Status:", f"  Store: {store}", f"  View: {view}"]
    for kind in EntityKind:
        snap = state.data.snapshot(kind)
        err = f", error: {snap.error}" if snap.error else ""
        lines.append(f"  {kind}: {snap.state}, {len(snap.items)} loaded{err}")
    return "\n".join(lines)


async def cmd_dashboard(state: AppState, args: list[str]) -> str:
    err = await _load(state, EntityKind.PROJECTS)
    if err:
        return err
    state.view.go(CurrentView.DASHBOARD)
    return render.dashboard(_items(state, EntityKind.PROJECTS))


async def cmd_open(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /open <project_id>"
    err = await _load(state, EntityKind.PROJECTS, EntityKind.TASKS, EntityKind.ISSUES)
    if err:
        return err
    project = find_by_id(_items(state, EntityKind.PROJECTS), args[0])
    if project is None:
        return f"Unknown project id: {args[0]}"
    state.view.open_project(project.id)
    return render.project_detail(
        project, _items(state, EntityKind.TASKS), _items(state, EntityKind.ISSUES)
    )


async def cmd_back(state: AppState, args: list[str]) -> str:
    state.view.go(CurrentView.DASHBOARD)
    return await cmd_dashboard(state, [])


async def cmd_retry(state: AppState, args: list[str]) -> str:
    state.data.retry_all()
    err = await _load(state, *EntityKind)
    if err:
        return err
    counts = ", ".join(f"{k} {len(_items(state, k))}" for k in EntityKind)
    return f"Reloaded: {counts}."


# ---- projects ----


async def cmd_new_project(state: AppState, args: list[str]) -> str:
    """
    /new-project name="My site" status=active due=2025-07-01 tech=React,TS tags=web
    """
    if not args:
        state.view.go(CurrentView.NEW_PROJECT)
        return (
            "New project: send /new-project name=... "
            "[desc=... status=planned|active|completed due=YYYY-MM-DD tech=a,b tags=a,b]"
        )
    positional, opts = _split(args, _PROJECT_FIELDS)
    fields = _project_fields(opts)
    fields.setdefault("name", " ".join(positional).strip())
    project = await state.data.create_project(ProjectDraft(**fields))
    state.view.go(CurrentView.DASHBOARD)
    return f"Project created: {project.name} (id={project.id})."


async def cmd_edit_project(state: AppState, args: list[str]) -> str:
    positional, opts = _split(args, _PROJECT_FIELDS)
    if not opts:
        return "Usage: /edit-project [project_id] name=... desc=... status=... due=... tech=... tags=..."
    project = await _resolve_project(state, positional[0] if positional else None)
    updated = await state.data.update_project(replace(project, **_project_fields(opts)))
    return f"Project updated: {updated.name}."


async def cmd_delete_project(state: AppState, args: list[str]) -> str:
    project = await _resolve_project(state, args[0] if args else None)
    await state.data.delete_project(project.id)
    if state.view.selected_project_id == project.id:
        state.view.go(CurrentView.DASHBOARD)
    return f"Project deleted: {project.name}."


# ---- tasks ----


async def cmd_tasks(state: AppState, args: list[str]) -> str:
    err = await _load(state, EntityKind.PROJECTS, EntityKind.TASKS)
    if err:
        return err
    state.view.go(CurrentView.TASKS)
    tasks = _items(state, EntityKind.TASKS)
    if args:
        tasks = [t for t in tasks if t.project_id == args[0]]
    return render.per_project(
        _items(state, EntityKind.PROJECTS), tasks, noun="tasks", block=render.tasks_block
    )


async def cmd_new_task(state: AppState, args: list[str]) -> str:
    """
    /new-task [project=<id>] title="Write docs" due=2025-06-20 status=todo
    """
    positional, opts = _split(args, _TASK_FIELDS | {"project_id"})
    project_id = opts.pop("project_id", "") or state.view.selected_project_id or ""
    fields = _task_fields(opts)
    fields.setdefault("title", " ".join(positional).strip())
    task = await state.data.create_task(TaskDraft(project_id=project_id, **fields))
    return f"Task created: {task.title} (id={task.id})."


async def cmd_edit_task(state: AppState, args: list[str]) -> str:
    positional, opts = _split(args, _TASK_FIELDS)
    if not positional or not opts:
        return "Usage: /edit-task <task_id> title=... desc=... status=todo|in-progress|done due=..."
    task = await _resolve(state, EntityKind.TASKS, positional[0])
    updated = await state.data.update_task(replace(task, **_task_fields(opts)))
    return f"Task updated: {updated.title} ({updated.status})."


async def cmd_delete_task(state: AppState, args: list[str]) -> str:
    task = await _resolve(state, EntityKind.TASKS, args[0] if args else None)
    await state.data.delete_task(task.id)
    return f"Task deleted: {task.title}."


# ---- issues ----


async def cmd_issues(state: AppState, args: list[str]) -> str:
    err = await _load(state, EntityKind.PROJECTS, EntityKind.ISSUES)
    if err:
        return err
    state.view.go(CurrentView.ISSUES)
    issues = _items(state, EntityKind.ISSUES)
    if args:
        issues = [i for i in issues if i.project_id == args[0]]
    return render.per_project(
        _items(state, EntityKind.PROJECTS), issues, noun="issues", block=render.issues_block
    )


async def cmd_new_issue(state: AppState, args: list[str]) -> str:
    """
    /new-issue [project=<id>] title="Login fails" labels=bug,auth
    """
    positional, opts = _split(args, _ISSUE_FIELDS | {"project_id"})
    project_id = opts.pop("project_id", "") or state.view.selected_project_id or ""
    fields = _issue_fields(opts)
    fields.setdefault("title", " ".join(positional).strip())
    issue = await state.data.create_issue(IssueDraft(project_id=project_id, **fields))
    return f"Issue created: {issue.title} (id={issue.id})."


async def cmd_edit_issue(state: AppState, args: list[str]) -> str:
    positional, opts = _split(args, _ISSUE_FIELDS)
    if not positional or not opts:
        return "Usage: /edit-issue <issue_id> title=... desc=... status=open|in-progress|resolved|closed labels=..."
    issue = await _resolve(state, EntityKind.ISSUES, positional[0])
    updated = await state.data.update_issue(replace(issue, **_issue_fields(opts)))
    return f"Issue updated: {updated.title} ({updated.status})."


async def cmd_delete_issue(state: AppState, args: list[str]) -> str:
    issue = await _resolve(state, EntityKind.ISSUES, args[0] if args else None)
    await state.data.delete_issue(issue.id)
    return f"Issue deleted: {issue.title}."


# ---- custom sections (rewrite the parent project's list) ----

SECTIONS_DISABLED = (
    "Custom sections are not stored by this project store. "
    "Set PROJBOARD_PROJECT_SECTIONS_COLUMN=true once the projects table has a custom_sections column."
)


async def cmd_sections(state: AppState, args: list[str]) -> str:
    if not state.data.sections_enabled:
        return SECTIONS_DISABLED
    project = await _resolve_project(state, args[0] if args else None)
    if not project.custom_sections:
        return f"No custom sections on {project.name}. Add one with /add-section title=... content=..."
    lines = [f"Custom sections of {project.name}:"]
    for s in project.custom_sections:
        lines += render.section_block(s)
    return "\n".join(lines)


async def cmd_add_section(state: AppState, args: list[str]) -> str:
    """
    /add-section title="API Endpoints" content="GET /users" type=markdown
    """
    if not state.data.sections_enabled:
        return SECTIONS_DISABLED
    _, opts = _split(args, _SECTION_FIELDS | {"project_id"})
    project = await _resolve_project(state, opts.pop("project_id", None))
    section_type = _enum(SectionType, opts["type"], "type") if "type" in opts else None
    section = sections.new_section(opts.get("title", ""), opts.get("content", ""), section_type)
    await state.data.update_project(sections.add_section(project, section))
    return f"Section added: {section.title} (id={section.id})."


async def cmd_edit_section(state: AppState, args: list[str]) -> str:
    """
    /edit-section <section_id>                      -> start editing (shows current content)
    /edit-section [section_id] title=... content=... type=...   -> save
    """
    if not state.data.sections_enabled:
        return SECTIONS_DISABLED
    positional, opts = _split(args, _SECTION_FIELDS)
    section_id = positional[0] if positional else state.view.editing_section_id
    if not section_id:
        return "Usage: /edit-section <section_id> [title=... content=... type=text|link|markdown|file]"

    project = await _resolve_project(state, None)
    current = next((s for s in project.custom_sections if s.id == section_id), None)
    if current is None:
        return f"Unknown section id: {section_id}"

    if not opts:
        state.view.editing_section_id = section_id
        lines = ["Editing section (send /edit-section title=... content=... type=... to save):"]
        lines += render.section_block(current)
        return "\n".join(lines)

    section_type = _enum(SectionType, opts["type"], "type") if "type" in opts else None
    updated = sections.edit_section(
        project,
        section_id,
        title=opts.get("title"),
        content=opts.get("content"),
        type=section_type,
    )
    await state.data.update_project(updated)
    state.view.editing_section_id = None
    return f"Section updated: {section_id}."


async def cmd_delete_section(state: AppState, args: list[str]) -> str:
    if not state.data.sections_enabled:
        return SECTIONS_DISABLED
    if not args:
        return "Usage: /delete-section <section_id>"
    project = await _resolve_project(state, None)
    try:
        updated = sections.delete_section(project, args[0])
    except KeyError:
        return f"Unknown section id: {args[0]}"
    await state.data.update_project(updated)
    if state.view.editing_section_id == args[0]:
        state.view.editing_section_id = None
    return f"Section deleted: {args[0]}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show store, view and collection states.")
registry.register("dashboard", cmd_dashboard, help_text="List projects grouped by status.", aliases=["projects"])
registry.register("open", cmd_open, help_text="Open a project: /open <project_id>.")
registry.register("back", cmd_back, help_text="Back to the dashboard.")
registry.register("retry", cmd_retry, help_text="Reload every collection after a failure.")
registry.register(
    "new-project",
    cmd_new_project,
    help_text="Create a project: /new-project name=... [desc= status= due= tech=a,b tags=a,b].",
)
registry.register("edit-project", cmd_edit_project, help_text="Edit a project: /edit-project [id] field=value ...")
registry.register("delete-project", cmd_delete_project, help_text="Delete a project: /delete-project [id].")
registry.register("tasks", cmd_tasks, help_text="Task board: /tasks [project_id].")
registry.register(
    "new-task", cmd_new_task, help_text="Create a task: /new-task [project=<id>] title=... [desc= status= due=]."
)
registry.register("edit-task", cmd_edit_task, help_text="Edit a task: /edit-task <id> field=value ...")
registry.register("delete-task", cmd_delete_task, help_text="Delete a task: /delete-task <id>.")
registry.register("issues", cmd_issues, help_text="Issue board: /issues [project_id].")
registry.register(
    "new-issue", cmd_new_issue, help_text="Create an issue: /new-issue [project=<id>] title=... [desc= labels=a,b]."
)
registry.register("edit-issue", cmd_edit_issue, help_text="Edit an issue: /edit-issue <id> field=value ...")
registry.register("delete-issue", cmd_delete_issue, help_text="Delete an issue: /delete-issue <id>.")
registry.register("sections", cmd_sections, help_text="List custom sections of the open project.")
registry.register(
    "add-section",
    cmd_add_section,
    help_text="Add a custom section: /add-section title=... content=... [type=text|link|markdown|file].",
)
registry.register("edit-section", cmd_edit_section, help_text="Edit a custom section: /edit-section <id> [field=value ...].")
registry.register("delete-section", cmd_delete_section, help_text="Delete a custom section: /delete-section <id>.")
