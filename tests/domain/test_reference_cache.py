from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from labelcheck.domain.errors import CacheUnavailable
from labelcheck.domain.model import DatasetName, GrasEntry
from labelcheck.domain.reference_cache import DEFAULT_TTL, ReferenceDataCache
from tests.support.reference_data import FakeReferenceStore, ManualClock


def _entries(count: int) -> list[GrasEntry]:
    return [
        GrasEntry(entry_id=str(index), canonical_name=f"Entry {index}") for index in range(count)
    ]


def test_get_twice_within_ttl_refreshes_once(
    cache: ReferenceDataCache, store: FakeReferenceStore, clock: ManualClock
) -> None:
    async def scenario() -> None:
        first = await cache.get(DatasetName.GRAS)
        clock.advance(DEFAULT_TTL - timedelta(seconds=1))
        second = await cache.get(DatasetName.GRAS)
        assert first is second

    asyncio.run(scenario())

    assert store.calls_for(DatasetName.GRAS) == 1


def test_concurrent_callers_share_one_refresh(clock: ManualClock) -> None:
    store = FakeReferenceStore(delay=0.01)
    cache = ReferenceDataCache(store, clock=clock)

    async def scenario() -> None:
        snapshots = await asyncio.gather(*(cache.get(DatasetName.ALLERGENS) for _ in range(5)))
        assert all(snapshot is snapshots[0] for snapshot in snapshots)

    asyncio.run(scenario())

    assert store.calls_for(DatasetName.ALLERGENS) == 1


def test_snapshot_expires_at_ttl(
    cache: ReferenceDataCache, store: FakeReferenceStore, clock: ManualClock
) -> None:
    asyncio.run(cache.get(DatasetName.GRAS))
    clock.advance(DEFAULT_TTL)
    asyncio.run(cache.get(DatasetName.GRAS))

    assert store.calls_for(DatasetName.GRAS) == 2


def test_cache_survives_separate_event_loops(
    cache: ReferenceDataCache, store: FakeReferenceStore
) -> None:
    asyncio.run(cache.get(DatasetName.NDI))
    asyncio.run(cache.get(DatasetName.NDI))

    assert store.calls_for(DatasetName.NDI) == 1


def test_snapshot_only_holds_active_entries(cache: ReferenceDataCache) -> None:
    snapshot = asyncio.run(cache.get(DatasetName.GRAS))

    assert "Brominated Vegetable Oil" not in {entry.canonical_name for entry in snapshot}
    assert len(snapshot) == 5


def test_pagination_concatenates_full_and_partial_pages(clock: ManualClock) -> None:
    store = FakeReferenceStore({DatasetName.GRAS: _entries(5)})
    cache = ReferenceDataCache(store, page_size=2, clock=clock)

    snapshot = asyncio.run(cache.get(DatasetName.GRAS))

    assert [entry.entry_id for entry in snapshot] == ["0", "1", "2", "3", "4"]
    assert store.calls == [
        (DatasetName.GRAS, 0, 2),
        (DatasetName.GRAS, 2, 2),
        (DatasetName.GRAS, 4, 2),
    ]


def test_pagination_stops_after_empty_page_following_full_page(clock: ManualClock) -> None:
    store = FakeReferenceStore({DatasetName.GRAS: _entries(4)})
    cache = ReferenceDataCache(store, page_size=2, clock=clock)

    snapshot = asyncio.run(cache.get(DatasetName.GRAS))

    assert len(snapshot) == 4
    assert [call[1] for call in store.calls] == [0, 2, 4]


def test_page_size_is_capped_by_store(clock: ManualClock) -> None:
    store = FakeReferenceStore({DatasetName.GRAS: _entries(5)}, max_page_size=2)
    cache = ReferenceDataCache(store, page_size=1000, clock=clock)

    snapshot = asyncio.run(cache.get(DatasetName.GRAS))

    assert cache.page_size == 2
    assert len(snapshot) == 5
    assert store.calls_for(DatasetName.GRAS) == 3


def test_empty_dataset_loads_as_empty_snapshot(clock: ManualClock) -> None:
    store = FakeReferenceStore({})
    cache = ReferenceDataCache(store, clock=clock)

    snapshot = asyncio.run(cache.get(DatasetName.ODI))
    asyncio.run(cache.get(DatasetName.ODI))

    assert len(snapshot) == 0
    assert store.calls_for(DatasetName.ODI) == 1


def test_failure_without_snapshot_raises_cache_unavailable(
    cache: ReferenceDataCache, store: FakeReferenceStore
) -> None:
    store.fail(DatasetName.GRAS)

    with pytest.raises(CacheUnavailable) as excinfo:
        asyncio.run(cache.get(DatasetName.GRAS))

    assert excinfo.value.dataset is DatasetName.GRAS
    assert "unreachable" in str(excinfo.value)


def test_failed_page_does_not_publish_partial_dataset(clock: ManualClock) -> None:
    store = FakeReferenceStore({DatasetName.GRAS: _entries(5)})
    cache = ReferenceDataCache(store, page_size=2, clock=clock)
    store.fail(DatasetName.GRAS, offset=2)

    with pytest.raises(CacheUnavailable):
        asyncio.run(cache.get(DatasetName.GRAS))

    assert cache.stats() == {}


def test_failure_with_snapshot_serves_stale_data_with_warning(
    cache: ReferenceDataCache, store: FakeReferenceStore, clock: ManualClock
) -> None:
    original = asyncio.run(cache.get(DatasetName.GRAS))
    clock.advance(DEFAULT_TTL + timedelta(minutes=5))
    store.fail(DatasetName.GRAS)

    read = asyncio.run(cache.read(DatasetName.GRAS))

    assert read.stale
    assert read.snapshot is original
    assert read.warning is not None
    assert "gras_ingredients" in read.warning
    stats = cache.stats()[DatasetName.GRAS]
    assert not stats.is_valid
    assert stats.last_error == "gras_ingredients unreachable"


def test_recovery_after_stale_fallback(
    cache: ReferenceDataCache, store: FakeReferenceStore, clock: ManualClock
) -> None:
    asyncio.run(cache.get(DatasetName.GRAS))
    clock.advance(DEFAULT_TTL)
    store.fail(DatasetName.GRAS)
    assert asyncio.run(cache.read(DatasetName.GRAS)).stale

    store.recover(DatasetName.GRAS)
    read = asyncio.run(cache.read(DatasetName.GRAS))

    assert not read.stale
    assert read.snapshot.loaded_at == clock()
    assert cache.stats()[DatasetName.GRAS].last_error is None


def test_fetch_timeout_counts_as_failure(clock: ManualClock) -> None:
    store = FakeReferenceStore(delay=0.2)
    cache = ReferenceDataCache(store, fetch_timeout_seconds=0.01, clock=clock)

    with pytest.raises(CacheUnavailable):
        asyncio.run(cache.get(DatasetName.NDI))


def test_invalidate_single_dataset(
    cache: ReferenceDataCache, store: FakeReferenceStore
) -> None:
    asyncio.run(cache.warm([DatasetName.GRAS, DatasetName.NDI]))

    cache.invalidate(DatasetName.GRAS)
    asyncio.run(cache.warm([DatasetName.GRAS, DatasetName.NDI]))

    assert store.calls_for(DatasetName.GRAS) == 2
    assert store.calls_for(DatasetName.NDI) == 1


def test_invalidate_all_datasets(cache: ReferenceDataCache, store: FakeReferenceStore) -> None:
    asyncio.run(cache.warm())
    cache.invalidate()

    assert cache.stats() == {}
    asyncio.run(cache.warm())
    assert len(store.calls) == 8


def test_warm_loads_every_dataset(cache: ReferenceDataCache, clock: ManualClock) -> None:
    reads = asyncio.run(cache.warm())

    assert set(reads) == set(DatasetName)
    stats = cache.stats()
    assert stats[DatasetName.ALLERGENS].count == 4
    assert stats[DatasetName.ALLERGENS].loaded_at == clock()
    assert stats[DatasetName.ALLERGENS].expires_in == DEFAULT_TTL
    assert stats[DatasetName.ALLERGENS].is_valid


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"page_size": 0}, "page_size"),
        ({"ttl": timedelta(0)}, "ttl"),
    ],
)
def test_invalid_settings_are_rejected(
    store: FakeReferenceStore, kwargs: dict[str, object], message: str
) -> None:
    with pytest.raises(ValueError, match=message):
        ReferenceDataCache(store, **kwargs)  # type: ignore[arg-type]
