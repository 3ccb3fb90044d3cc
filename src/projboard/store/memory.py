# src/projboard/store/memory.py

from __future__ import annotations

import asyncio
import copy
import logging
import uuid
from typing import Any

from ..core.mapper import now_iso
from ..core.ports import RemoteRow, RemoteStoreError

logger = logging.getLogger(__name__)


def demo_rows() -> dict[str, list[RemoteRow]]:
    """Seed data for offline demo runs (two projects with a few tasks and issues)."""
    now = now_iso()
    return {
        "projects": [
            {
                "id": "1",
                "name": "Personal Portfolio Website",
                "description": "A modern portfolio website showcasing my projects and skills",
                "status": "active",
                "due_date": "2025-07-01",
                "completion_date": None,
                "tech_stack": ["React", "TypeScript", "Tailwind CSS"],
                "tags": ["web", "portfolio", "frontend"],
                "custom_sections": [
                    {
                        "id": "cs1",
                        "title": "Deployment Info",
                        "content": "Hosted on Vercel at https://myportfolio.vercel.app",
                        "type": "link",
                        "created_at": now,
                        "updated_at": now,
                    }
                ],
                "created_at": "2025-06-01T00:00:00+00:00",
                "updated_at": now,
            },
            {
                "id": "2",
                "name": "Mobile Task Manager",
                "description": "Cross-platform mobile app for task management",
                "status": "planned",
                "due_date": "2025-08-15",
                "completion_date": None,
                "tech_stack": ["React Native", "Expo", "Firebase"],
                "tags": ["mobile", "productivity", "app"],
                "custom_sections": [],
                "created_at": "2025-06-10T00:00:00+00:00",
                "updated_at": now,
            },
        ],
        "issues": [
            {
                "id": "1",
                "project_id": "1",
                "title": "API endpoint returning 500 error",
                "description": "The /api/users endpoint is throwing internal server errors",
                "status": "open",
                "labels": ["bug", "api", "critical"],
                "created_at": now,
                "updated_at": now,
            },
            {
                "id": "2",
                "project_id": "1",
                "title": "Mobile responsive layout issues",
                "description": "Navigation menu doesn't work properly on mobile devices",
                "status": "in-progress",
                "labels": ["frontend", "mobile", "ui"],
                "created_at": now,
                "updated_at": now,
            },
        ],
        "tasks": [
            {
                "id": "1",
                "project_id": "1",
                "title": "Design homepage mockups",
                "description": "Create wireframes and high-fidelity mockups for the portfolio homepage",
                "status": "todo",
                "due_date": "2025-06-20",
                "created_at": now,
                "updated_at": now,
            },
            {
                "id": "2",
                "project_id": "1",
                "title": "Implement contact form",
                "description": "Build a working contact form with validation and email integration",
                "status": "in-progress",
                "due_date": "2025-06-25",
                "created_at": now,
                "updated_at": now,
            },
        ],
    }


class InMemoryStore:
    """
    In-process RemoteStore used when no endpoint is configured.

    Behavior mirrors the PostgREST store closely enough for the data layer:
    - insert assigns an id and created_at/updated_at
    - update/delete on an unknown id -> RemoteStoreError (404)
    - rows are copied in and out, callers never alias stored data
    """

    def __init__(
        self,
        tables: dict[str, list[RemoteRow]] | None = None,
        *,
        latency_seconds: float = 0.0,
    ) -> None:
        self._tables: dict[str, list[RemoteRow]] = {"projects": [], "tasks": [], "issues": []}
        for name, rows in (tables or {}).items():
            self._tables[name] = copy.deepcopy(rows)
        self._latency = max(0.0, float(latency_seconds))
        logger.info(
            "InMemoryStore ready rows=%s",
            {name: len(rows) for name, rows in self._tables.items()},
        )

    async def aclose(self) -> None:
        return

    def _table(self, table: str, operation: str) -> list[RemoteRow]:
        try:
            return self._tables[table]
        except KeyError:
            raise RemoteStoreError(
                f"unknown table: {table}", table=table, operation=operation, status_code=404
            ) from None

    def _index(self, rows: list[RemoteRow], row_id: str, *, table: str, operation: str) -> int:
        for i, row in enumerate(rows):
            if str(row.get("id")) == str(row_id):
                return i
        raise RemoteStoreError(
            f"no row with id={row_id}", table=table, operation=operation, status_code=404
        )

    async def _pause(self) -> None:
        # Cooperative suspension point, like a network round-trip.
        await asyncio.sleep(self._latency)

    # ---- RemoteStore ----

    async def select_all(
        self,
        table: str,
        *,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[RemoteRow]:
        await self._pause()
        rows = copy.deepcopy(self._table(table, "select"))
        if order_by:
            rows.sort(key=lambda r: str(r.get(order_by) or ""), reverse=descending)
        return rows

    async def insert_one(self, table: str, row: RemoteRow) -> RemoteRow:
        await self._pause()
        rows = self._table(table, "insert")
        now = now_iso()
        stored: dict[str, Any] = {
            "id": uuid.uuid4().hex,
            **copy.deepcopy(row),
            "created_at": now,
            "updated_at": now,
        }
        rows.append(stored)
        return copy.deepcopy(stored)

    async def update_by_id(self, table: str, row_id: str, values: RemoteRow) -> None:
        await self._pause()
        rows = self._table(table, "update")
        i = self._index(rows, row_id, table=table, operation="update")
        rows[i] = {**rows[i], **copy.deepcopy(values)}

    async def delete_by_id(self, table: str, row_id: str) -> None:
        await self._pause()
        rows = self._table(table, "delete")
        i = self._index(rows, row_id, table=table, operation="delete")
        del rows[i]
