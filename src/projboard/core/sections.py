# src/projboard/core/sections.py

"""
Custom sections live inline on a Project.

There is no dedicated endpoint for a section: every helper here returns a new
Project whose `custom_sections` list is rewritten as a whole. Persist the result
with DataLayer.update_project().
"""

from __future__ import annotations

import uuid
from dataclasses import replace

from .mapper import now_iso
from .models import CustomSection, Project, SectionType


def _clean(value: str | None, field_name: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValueError(f"section {field_name} is required")
    return text


def new_section(title: str, content: str, type: str | SectionType | None = None) -> CustomSection:
    now = now_iso()
    return CustomSection(
        id=uuid.uuid4().hex,
        title=_clean(title, "title"),
        content=_clean(content, "content"),
        type=SectionType.from_remote(type),
        created_at=now,
        updated_at=now,
    )


def add_section(project: Project, section: CustomSection) -> Project:
    return replace(project, custom_sections=[*project.custom_sections, section])


def edit_section(
    project: Project,
    section_id: str,
    *,
    title: str | None = None,
    content: str | None = None,
    type: str | SectionType | None = None,
) -> Project:
    """Return a copy of `project` with one section rewritten. Unknown id -> KeyError."""
    if not any(s.id == section_id for s in project.custom_sections):
        raise KeyError(section_id)

    sections: list[CustomSection] = []
    for s in project.custom_sections:
        if s.id != section_id:
            sections.append(s)
            continue
        sections.append(
            replace(
                s,
                title=s.title if title is None else _clean(title, "title"),
                content=s.content if content is None else _clean(content, "content"),
                type=s.type if type is None else SectionType.from_remote(type),
                updated_at=now_iso(),
            )
        )
    return replace(project, custom_sections=sections)


def delete_section(project: Project, section_id: str) -> Project:
    if not any(s.id == section_id for s in project.custom_sections):
        raise KeyError(section_id)
    return replace(
        project, custom_sections=[s for s in project.custom_sections if s.id != section_id]
    )
