# src/projboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from .data_layer import DataLayer


class CurrentView(StrEnum):
    DASHBOARD = "dashboard"
    PROJECT = "project"
    NEW_PROJECT = "new-project"
    ISSUES = "issues"
    TASKS = "tasks"


@dataclass
class ViewState:
    """Ephemeral UI state only; entity data lives in the DataLayer."""

    current_view: CurrentView = CurrentView.DASHBOARD
    selected_project_id: str | None = None
    editing_section_id: str | None = None

    def open_project(self, project_id: str) -> None:
        self.current_view = CurrentView.PROJECT
        self.selected_project_id = project_id
        self.editing_section_id = None

    def go(self, view: CurrentView) -> None:
        self.current_view = view
        self.editing_section_id = None
        if view != CurrentView.PROJECT:
            self.selected_project_id = None


@dataclass
class AppState:
    # Settings are duck-typed so tests can pass a SimpleNamespace.
    settings: Any
    data: DataLayer
    offline: bool = False
    view: ViewState = field(default_factory=ViewState)
