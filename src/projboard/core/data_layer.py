# src/projboard/core/data_layer.py

"""
Data layer: cached entity collections + CRUD operations against the remote store.

One DataLayer is built per session (see cli/bootstrap.py) and passed down to
whoever needs it. Reads go through the QueryCache; every write goes through
`_mutate`, which only invalidates the collection after the store call succeeded.
Write failures propagate to the caller and leave the cache untouched.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from functools import partial
from typing import Any, TypeVar

from .cache import CacheState, CollectionSnapshot, QueryCache
from .mapper import (
    MAPPERS,
    issue_insert_payload,
    issue_update_payload,
    map_project,
    now_iso,
    project_insert_payload,
    project_update_payload,
    task_insert_payload,
    task_update_payload,
)
from .models import (
    EntityKind,
    Issue,
    IssueDraft,
    Project,
    ProjectDraft,
    Task,
    TaskDraft,
)
from .ports import RemoteRow, RemoteStore, RemoteStoreError

logger = logging.getLogger(__name__)

R = TypeVar("R")
E = TypeVar("E", Project, Task, Issue)

# Projects are listed newest first; tasks/issues keep the store's order.
_ORDERING: dict[EntityKind, tuple[str | None, bool]] = {
    EntityKind.PROJECTS: ("created_at", True),
    EntityKind.TASKS: (None, False),
    EntityKind.ISSUES: (None, False),
}

_INSERT_PAYLOADS: dict[EntityKind, Callable[[Any], RemoteRow]] = {
    EntityKind.PROJECTS: project_insert_payload,
    EntityKind.TASKS: task_insert_payload,
    EntityKind.ISSUES: issue_insert_payload,
}

_UPDATE_PAYLOADS: dict[EntityKind, Callable[[Any, str], RemoteRow]] = {
    EntityKind.PROJECTS: project_update_payload,
    EntityKind.TASKS: task_update_payload,
    EntityKind.ISSUES: issue_update_payload,
}


def _require(value: str | None, field_name: str) -> None:
    if not value or not str(value).strip():
        raise ValueError(f"{field_name} is required")


class DataLayer:
    """
    `sections_column` turns on the project `custom_sections` JSON column: mapped on
    read and sent on update. Leave it off for stores whose projects table has no
    such column (sections then stay empty and are never written).
    """

    def __init__(self, store: RemoteStore, *, sections_column: bool = False) -> None:
        self._store = store
        self._sections_column = sections_column
        self._mappers: dict[EntityKind, Callable[[RemoteRow], Any]] = {
            **MAPPERS,
            EntityKind.PROJECTS: partial(map_project, with_sections=sections_column),
        }
        self._update_payloads: dict[EntityKind, Callable[[Any, str], RemoteRow]] = {
            **_UPDATE_PAYLOADS,
            EntityKind.PROJECTS: partial(project_update_payload, with_sections=sections_column),
        }
        self._cache = QueryCache({kind: self._fetcher(kind) for kind in EntityKind})

    @property
    def sections_enabled(self) -> bool:
        return self._sections_column

    @property
    def cache(self) -> QueryCache:
        return self._cache

    async def aclose(self) -> None:
        await self._store.aclose()

    # ---- read path ----

    def _fetcher(self, kind: EntityKind) -> Callable[[], Awaitable[list[Any]]]:
        order_by, descending = _ORDERING[kind]
        mapper = self._mappers[kind]

        async def fetch() -> list[Any]:
            rows = await self._store.select_all(kind.value, order_by=order_by, descending=descending)
            return [mapper(row) for row in rows]

        return fetch

    async def read(self, kind: EntityKind) -> list[Any]:
        return await self._cache.collection(kind).read()

    async def projects(self) -> list[Project]:
        return await self.read(EntityKind.PROJECTS)

    async def tasks(self) -> list[Task]:
        return await self.read(EntityKind.TASKS)

    async def issues(self) -> list[Issue]:
        return await self.read(EntityKind.ISSUES)

    def snapshot(self, kind: EntityKind) -> CollectionSnapshot:
        return self._cache.snapshot(kind)

    def loading(self, kind: EntityKind) -> bool:
        return self._cache.collection(kind).loading

    def error(self, kind: EntityKind) -> Exception | None:
        return self._cache.collection(kind).error

    def failed_kinds(self) -> list[EntityKind]:
        return [k for k in self._cache if self._cache.collection(k).state == CacheState.ERROR]

    def retry_all(self) -> None:
        """Mark every collection stale; the next reads refetch."""
        logger.info("Retry all: invalidating every collection")
        self._cache.invalidate_all()

    # ---- write path ----

    async def _mutate(self, kind: EntityKind, action: str, call: Callable[[str], Awaitable[R]]) -> R:
        """
        Run one store call against `kind`'s collection, then invalidate that collection.

        On failure nothing is invalidated and the error propagates. Once issued,
        the call is not cancelled with its caller: it still completes (and
        invalidates on success) in the background.
        """
        write = asyncio.ensure_future(call(kind.value))

        def _settle(fut: asyncio.Future) -> None:
            if fut.cancelled():
                return
            err = fut.exception()
            if err is None:
                self._cache.invalidate(kind)
            elif isinstance(err, RemoteStoreError):
                logger.warning("%s %s failed: %s", action, kind, err)
            else:
                logger.error("%s %s crashed", action, kind, exc_info=err)

        write.add_done_callback(_settle)
        return await asyncio.shield(write)

    async def _create(self, kind: EntityKind, draft: Any) -> Any:
        payload = _INSERT_PAYLOADS[kind](draft)
        row = await self._mutate(kind, "create", lambda table: self._store.insert_one(table, payload))
        entity = self._mappers[kind](row)
        logger.info("Created %s id=%s", kind, entity.id)
        return entity

    async def _update(self, kind: EntityKind, entity: E) -> E:
        _require(entity.id, "id")
        updated_at = now_iso()
        payload = self._update_payloads[kind](entity, updated_at)
        await self._mutate(
            kind, "update", lambda table: self._store.update_by_id(table, entity.id, payload)
        )
        logger.info("Updated %s id=%s", kind, entity.id)
        return replace(entity, updated_at=updated_at)

    async def _delete(self, kind: EntityKind, entity_id: str) -> str:
        _require(entity_id, "id")
        await self._mutate(kind, "delete", lambda table: self._store.delete_by_id(table, entity_id))
        logger.info("Deleted %s id=%s", kind, entity_id)
        return entity_id

    # Projects

    async def create_project(self, draft: ProjectDraft) -> Project:
        _require(draft.name, "name")
        return await self._create(EntityKind.PROJECTS, draft)

    async def update_project(self, project: Project) -> Project:
        _require(project.name, "name")
        return await self._update(EntityKind.PROJECTS, project)

    async def delete_project(self, project_id: str) -> str:
        return await self._delete(EntityKind.PROJECTS, project_id)

    # Tasks

    async def create_task(self, draft: TaskDraft) -> Task:
        _require(draft.project_id, "project_id")
        _require(draft.title, "title")
        return await self._create(EntityKind.TASKS, draft)

    async def update_task(self, task: Task) -> Task:
        _require(task.title, "title")
        return await self._update(EntityKind.TASKS, task)

    async def delete_task(self, task_id: str) -> str:
        return await self._delete(EntityKind.TASKS, task_id)

    # Issues

    async def create_issue(self, draft: IssueDraft) -> Issue:
        _require(draft.project_id, "project_id")
        _require(draft.title, "title")
        return await self._create(EntityKind.ISSUES, draft)

    async def update_issue(self, issue: Issue) -> Issue:
        _require(issue.title, "title")
        return await self._update(EntityKind.ISSUES, issue)

    async def delete_issue(self, issue_id: str) -> str:
        return await self._delete(EntityKind.ISSUES, issue_id)

