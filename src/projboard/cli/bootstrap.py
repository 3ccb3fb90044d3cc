# src/projboard/cli/bootstrap.py

"""
Composition root for a projboard session.

Chooses the remote store (PostgREST when a URL is configured, the in-memory
demo store otherwise), wraps it in one DataLayer and hands back the AppState
every command receives.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.data_layer import DataLayer
from ..core.ports import RemoteStore
from ..core.state import AppState
from ..store.memory import InMemoryStore, demo_rows
from ..store.postgrest import PostgrestStore

logger = logging.getLogger(__name__)


def build_store(settings) -> tuple[RemoteStore, bool]:
    """Return (store, offline)."""
    try:
        store: RemoteStore = PostgrestStore(
            settings.store_url,
            api_key=settings.store_api_key,
            timeout_seconds=settings.request_timeout_seconds,
        )
    except ValueError:
        logger.warning(
            "No remote store configured (PROJBOARD_STORE_URL); using the in-memory store. "
            "Changes will not be persisted."
        )
    else:
        return store, False

    seed = demo_rows() if getattr(settings, "offline_demo", True) else None
    return InMemoryStore(seed), True


def create_initial_state(*, settings=None) -> AppState:
    """Build AppState for one session; `settings` defaults to get_settings()."""
    settings = settings or get_settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)

    store, offline = build_store(settings)
    # The in-memory store keeps whatever columns it is given, sections included.
    sections_column = offline or bool(getattr(settings, "project_sections_column", False))
    data = DataLayer(store, sections_column=sections_column)
    return AppState(settings=settings, data=data, offline=offline)
