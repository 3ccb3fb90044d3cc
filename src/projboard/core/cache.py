# src/projboard/core/cache.py

"""
Invalidation cache for the entity collections.

Each entity kind owns one CachedCollection, a small state machine:

    unloaded --read--> loading --ok--> ready --invalidate--> stale --read--> loading
                   loading --fail--> error --invalidate--> stale

- Concurrent readers share one in-flight fetch (one network call).
- A collection in `error` is served from cache until someone invalidates it;
  recovery is always user-initiated ("retry all").
- Invalidating while a fetch is in flight keeps the fetched items but leaves the
  collection stale, so the next read sees data from after the write.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

from .models import EntityKind

logger = logging.getLogger(__name__)

T = TypeVar("T")

Fetcher = Callable[[], Awaitable[list[T]]]


class CacheState(StrEnum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    STALE = "stale"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class CollectionSnapshot(Generic[T]):
    """Read-only view of a collection for renderers."""

    kind: EntityKind
    items: list[T]
    loading: bool
    error: Exception | None
    state: CacheState


class CachedCollection(Generic[T]):
    def __init__(self, kind: EntityKind, fetcher: Fetcher[T]) -> None:
        self.kind = kind
        self._fetcher = fetcher
        self._items: list[T] = []
        self._state = CacheState.UNLOADED
        self._error: Exception | None = None
        self._settled = False
        self._inflight: asyncio.Task[None] | None = None
        self._invalidated_in_flight = False
        self.fetch_count = 0

    # ---- accessors ----

    @property
    def items(self) -> list[T]:
        return list(self._items)

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def error(self) -> Exception | None:
        return self._error

    @property
    def loading(self) -> bool:
        """True until the first fetch has finished (successfully or not)."""
        return not self._settled

    def snapshot(self) -> CollectionSnapshot[T]:
        return CollectionSnapshot(
            kind=self.kind,
            items=self.items,
            loading=self.loading,
            error=self._error,
            state=self._state,
        )

    # ---- transitions ----

    def invalidate(self) -> None:
        if self._state == CacheState.LOADING:
            self._invalidated_in_flight = True
            logger.debug("Invalidate %s during fetch; will refetch on next read", self.kind)
            return
        if self._state == CacheState.UNLOADED:
            return
        self._state = CacheState.STALE
        logger.debug("Collection %s marked stale", self.kind)

    async def read(self) -> list[T]:
        """
        Return the collection, fetching first when it is unloaded or stale.

        Never raises on fetch failure: the error is recorded on the collection.
        """
        while self._state not in (CacheState.READY, CacheState.ERROR):
            fetch = self._inflight or self._start_fetch()
            # Shield: a cancelled reader must not cancel the shared fetch.
            await asyncio.shield(fetch)
        return self.items

    def _start_fetch(self) -> asyncio.Task[None]:
        self._state = CacheState.LOADING
        self._invalidated_in_flight = False
        self.fetch_count += 1
        logger.debug("Fetching %s (fetch #%d)", self.kind, self.fetch_count)
        self._inflight = asyncio.get_running_loop().create_task(
            self._run_fetch(), name=f"fetch-{self.kind.value}"
        )
        return self._inflight

    async def _run_fetch(self) -> None:
        try:
            items = await self._fetcher()
        except asyncio.CancelledError:
            self._state = CacheState.STALE if self._settled else CacheState.UNLOADED
            raise
        except Exception as e:
            logger.warning("Fetch %s failed: %s", self.kind, e)
            self._error = e
            self._state = CacheState.ERROR
            self._settled = True
        else:
            self._items = list(items)
            self._error = None
            self._state = CacheState.STALE if self._invalidated_in_flight else CacheState.READY
            self._settled = True
            logger.debug("Fetched %s: %d items", self.kind, len(self._items))
        finally:
            self._inflight = None
            self._invalidated_in_flight = False


class QueryCache:
    """Keyed registry of cached collections (key = entity kind)."""

    def __init__(self, fetchers: Mapping[EntityKind, Fetcher]) -> None:
        self._collections: dict[EntityKind, CachedCollection] = {
            kind: CachedCollection(kind, fetcher) for kind, fetcher in fetchers.items()
        }

    def __iter__(self) -> Iterator[EntityKind]:
        return iter(self._collections)

    def collection(self, kind: EntityKind) -> CachedCollection:
        try:
            return self._collections[kind]
        except KeyError:
            raise KeyError(f"No cached collection for kind: {kind}") from None

    def snapshot(self, kind: EntityKind) -> CollectionSnapshot:
        return self.collection(kind).snapshot()

    def invalidate(self, kind: EntityKind) -> None:
        self.collection(kind).invalidate()

    def invalidate_all(self) -> None:
        for coll in self._collections.values():
            coll.invalidate()
