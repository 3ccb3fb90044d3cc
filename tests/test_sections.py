# tests/test_sections.py

from __future__ import annotations

import pytest

from projboard.core import sections
from projboard.core.mapper import map_project
from projboard.core.models import SectionType

from .fakes import project_row


def _project():
    return map_project(
        project_row(
            "p1",
            "Portfolio",
            custom_sections=[
                {"id": "cs1", "title": "Deploy", "content": "Vercel", "type": "link"},
                {"id": "cs2", "title": "Notes", "content": "todo", "type": "text"},
            ],
        ),
        with_sections=True,
    )


def test_new_section_trims_and_defaults_type() -> None:
    s = sections.new_section("  API  ", " GET /users ")
    assert s.title == "API"
    assert s.content == "GET /users"
    assert s.type == SectionType.TEXT
    assert s.id
    assert s.created_at == s.updated_at


@pytest.mark.parametrize(("title", "content"), [("", "x"), ("x", "   ")])
def test_new_section_requires_title_and_content(title: str, content: str) -> None:
    with pytest.raises(ValueError):
        sections.new_section(title, content)


def test_add_section_appends_without_touching_original() -> None:
    project = _project()
    added = sections.add_section(project, sections.new_section("Links", "https://x", "markdown"))

    assert [s.id for s in project.custom_sections] == ["cs1", "cs2"]
    assert [s.title for s in added.custom_sections] == ["Deploy", "Notes", "Links"]
    assert added.custom_sections[-1].type == SectionType.MARKDOWN


def test_edit_section_rewrites_only_the_target() -> None:
    project = _project()
    edited = sections.edit_section(project, "cs2", content="done", type=SectionType.MARKDOWN)

    first, second = edited.custom_sections
    assert first == project.custom_sections[0]
    assert second.title == "Notes"
    assert second.content == "done"
    assert second.type == SectionType.MARKDOWN
    assert second.updated_at != project.custom_sections[1].updated_at


def test_edit_and_delete_unknown_section_raise_key_error() -> None:
    project = _project()
    with pytest.raises(KeyError):
        sections.edit_section(project, "missing", title="x")
    with pytest.raises(KeyError):
        sections.delete_section(project, "missing")


def test_delete_section() -> None:
    project = _project()
    assert [s.id for s in sections.delete_section(project, "cs1").custom_sections] == ["cs2"]
