# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from projboard.core.data_layer import DataLayer
from projboard.core.state import AppState

from .fakes import FakeRemoteStore, issue_row, project_row, task_row


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="projboard-test",
        log_level="DEBUG",
        store_url="",
        store_api_key=None,
        request_timeout_seconds=5.0,
        project_sections_column=False,
        offline_demo=True,
        data_dir=tmp_path / "data",
    )


@pytest.fixture()
def store() -> FakeRemoteStore:
    return FakeRemoteStore(
        {
            "projects": [
                project_row("p1", "Portfolio", created_at="2025-06-01T00:00:00+00:00"),
                project_row("p2", "Task App", status="planned", created_at="2025-06-10T00:00:00+00:00"),
            ],
            "tasks": [
                task_row("7", "p1", "old title"),
                task_row("8", "p1", "write docs", status="done"),
            ],
            "issues": [
                issue_row("3", "p1", "500 on /api/users"),
                issue_row("4", "p2", "layout broken", status="in-progress"),
            ],
        }
    )


@pytest.fixture()
def data(store: FakeRemoteStore) -> DataLayer:
    # The fake keeps any column it is given, so custom sections round-trip.
    return DataLayer(store, sections_column=True)


@pytest.fixture()
def state(settings: SimpleNamespace, data: DataLayer) -> AppState:
    """AppState wired with the fake store (no network)."""
    return AppState(settings=settings, data=data, offline=True)
