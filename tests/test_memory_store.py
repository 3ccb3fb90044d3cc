# tests/test_memory_store.py

from __future__ import annotations

import pytest

from projboard.core.data_layer import DataLayer
from projboard.core.models import ProjectDraft
from projboard.core.ports import RemoteStoreError
from projboard.store.memory import InMemoryStore, demo_rows


@pytest.mark.asyncio
async def test_insert_assigns_id_and_timestamps() -> None:
    store = InMemoryStore()
    row = await store.insert_one("tasks", {"project_id": "p1", "title": "x"})

    assert row["id"]
    assert row["created_at"] == row["updated_at"]
    assert await store.select_all("tasks") == [row]


@pytest.mark.asyncio
async def test_rows_are_copied_in_and_out() -> None:
    store = InMemoryStore({"issues": [{"id": "1", "labels": ["bug"]}]})

    rows = await store.select_all("issues")
    rows[0]["labels"].append("mutated")

    assert (await store.select_all("issues"))[0]["labels"] == ["bug"]


@pytest.mark.asyncio
async def test_update_and_delete_unknown_id_raise_404() -> None:
    store = InMemoryStore()
    with pytest.raises(RemoteStoreError) as excinfo:
        await store.update_by_id("projects", "nope", {"name": "x"})
    assert excinfo.value.status_code == 404

    with pytest.raises(RemoteStoreError):
        await store.delete_by_id("projects", "nope")


@pytest.mark.asyncio
async def test_unknown_table_raises() -> None:
    with pytest.raises(RemoteStoreError):
        await InMemoryStore().select_all("comments")


@pytest.mark.asyncio
async def test_demo_rows_work_end_to_end_through_data_layer() -> None:
    data = DataLayer(InMemoryStore(demo_rows()), sections_column=True)

    projects = await data.projects()
    assert [p.id for p in projects] == ["2", "1"]
    assert projects[1].custom_sections[0].id == "cs1"

    created = await data.create_project(ProjectDraft(name="CLI tool"))
    assert created.id in {p.id for p in await data.projects()}

    await data.delete_project(created.id)
    assert created.id not in {p.id for p in await data.projects()}
