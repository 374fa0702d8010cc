"""In-memory snapshots of the reference datasets, refreshed from the backing store.

Each dataset has at most one published ``DatasetSnapshot``. A snapshot is served while it is
younger than the TTL; after that (or on first use) the next caller starts a refresh that reads
the whole dataset page by page. Refreshes are single-flighted per dataset: callers arriving
while one is running await the same task instead of starting another.

A failed refresh never publishes a partial dataset. When an earlier snapshot exists it keeps
being served and the caller gets a warning; without one the failure surfaces as
``CacheUnavailable``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import partial
from typing import TYPE_CHECKING, Final

from labelcheck.domain.errors import CacheUnavailable, ReferenceStoreError
from labelcheck.domain.model import DatasetName, DatasetSnapshot

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from labelcheck.domain.model import ReferenceEntry
    from labelcheck.domain.ports import ReferenceStore

log = logging.getLogger(__name__)

DEFAULT_TTL: Final[timedelta] = timedelta(hours=24)
DEFAULT_PAGE_SIZE: Final[int] = 1000
DEFAULT_FETCH_TIMEOUT_SECONDS: Final[float] = 30.0


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class CacheRead:
    """A snapshot handed out by the cache, with a warning when it is stale."""

    snapshot: DatasetSnapshot
    warning: str | None = None

    @property
    def stale(self) -> bool:
        return self.warning is not None


@dataclass(frozen=True, slots=True)
class DatasetCacheStats:
    dataset: DatasetName
    count: int
    loaded_at: datetime
    age: timedelta
    expires_in: timedelta
    is_valid: bool
    last_error: str | None = None


class ReferenceDataCache:
    """Lifecycle-scoped cache of dataset snapshots keyed by dataset name."""

    def __init__(
        self,
        store: ReferenceStore,
        *,
        ttl: timedelta = DEFAULT_TTL,
        page_size: int = DEFAULT_PAGE_SIZE,
        fetch_timeout_seconds: float | None = DEFAULT_FETCH_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        self._store = store
        self._ttl = ttl
        # A page larger than the store's cap would come back short and end pagination early.
        self._page_size = min(page_size, store.max_page_size)
        self._fetch_timeout = fetch_timeout_seconds
        self._clock = clock
        self._snapshots: dict[DatasetName, DatasetSnapshot] = {}
        self._inflight: dict[DatasetName, asyncio.Task[CacheRead]] = {}
        self._last_errors: dict[DatasetName, str] = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @property
    def page_size(self) -> int:
        return self._page_size

    async def get(self, dataset: DatasetName) -> DatasetSnapshot:
        """Return a usable snapshot of ``dataset``, refreshing it if needed."""

        return (await self.read(dataset)).snapshot

    async def read(self, dataset: DatasetName) -> CacheRead:
        """Like ``get`` but also report whether a stale snapshot was served."""

        current = self._snapshots.get(dataset)
        if current is not None and current.is_fresh(self._clock(), self._ttl):
            log.debug(
                "%s cache hit: count=%s age=%s",
                dataset,
                len(current),
                current.age(self._clock()),
            )
            return CacheRead(current)

        task = self._inflight.get(dataset)
        if task is None or task.get_loop() is not asyncio.get_running_loop():
            state = "miss" if current is None else "expired"
            log.info("%s cache %s, refreshing", dataset, state)
            task = asyncio.create_task(self._refresh(dataset), name=f"refresh:{dataset}")
            self._inflight[dataset] = task
            task.add_done_callback(partial(self._forget_inflight, dataset))
        else:
            log.debug("%s refresh already in flight, awaiting it", dataset)
        # Shielded so a cancelled caller does not cancel the refresh other callers wait on.
        return await asyncio.shield(task)

    async def warm(
        self, datasets: Iterable[DatasetName] = tuple(DatasetName)
    ) -> dict[DatasetName, CacheRead]:
        """Load several datasets concurrently."""

        names = tuple(datasets)
        reads = await asyncio.gather(*(self.read(name) for name in names))
        return dict(zip(names, reads, strict=True))

    def invalidate(self, dataset: DatasetName | None = None) -> None:
        """Drop one snapshot (or all of them); the next read refreshes."""

        if dataset is None:
            log.info("Invalidating all reference data snapshots")
            self._snapshots.clear()
            self._last_errors.clear()
            return
        log.info("Invalidating %s snapshot", dataset)
        self._snapshots.pop(dataset, None)
        self._last_errors.pop(dataset, None)

    def stats(self) -> dict[DatasetName, DatasetCacheStats]:
        now = self._clock()
        stats: dict[DatasetName, DatasetCacheStats] = {}
        for dataset, snapshot in self._snapshots.items():
            age = snapshot.age(now)
            stats[dataset] = DatasetCacheStats(
                dataset=dataset,
                count=len(snapshot),
                loaded_at=snapshot.loaded_at,
                age=age,
                expires_in=self._ttl - age,
                is_valid=snapshot.is_fresh(now, self._ttl),
                last_error=self._last_errors.get(dataset),
            )
        return stats

    async def _refresh(self, dataset: DatasetName) -> CacheRead:
        previous = self._snapshots.get(dataset)
        try:
            entries, pages = await self._fetch_all(dataset)
        except (ReferenceStoreError, TimeoutError) as exc:
            message = str(exc) or type(exc).__name__
            self._last_errors[dataset] = message
            if previous is None:
                log.error("Refresh of %s failed with no snapshot to serve: %s", dataset, message)
                raise CacheUnavailable(dataset, message) from exc
            warning = (
                f"Serving stale {dataset} data loaded at {previous.loaded_at.isoformat()}; "
                f"refresh failed: {message}"
            )
            log.warning(warning)
            return CacheRead(previous, warning=warning)

        snapshot = DatasetSnapshot.build(dataset, entries, loaded_at=self._clock())
        self._snapshots[dataset] = snapshot
        self._last_errors.pop(dataset, None)
        log.info(
            "%s cache refreshed: count=%s pages=%s loaded_at=%s",
            dataset,
            len(snapshot),
            pages,
            snapshot.loaded_at.isoformat(),
        )
        return CacheRead(snapshot)

    async def _fetch_all(self, dataset: DatasetName) -> tuple[list[ReferenceEntry], int]:
        """Read every active row, one capped page at a time, until a page comes back short."""

        entries: list[ReferenceEntry] = []
        offset = 0
        pages = 0
        while True:
            page = await asyncio.wait_for(
                self._store.list_active(dataset, offset=offset, limit=self._page_size),
                timeout=self._fetch_timeout,
            )
            pages += 1
            entries.extend(page)
            if len(page) < self._page_size:
                return entries, pages
            offset += len(page)

    def _forget_inflight(self, dataset: DatasetName, task: asyncio.Task[CacheRead]) -> None:
        if self._inflight.get(dataset) is task:
            del self._inflight[dataset]
