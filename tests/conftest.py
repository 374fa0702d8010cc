from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from labelcheck.domain.reference_cache import ReferenceDataCache
from tests.support.reference_data import FakeReferenceStore, ManualClock

if TYPE_CHECKING:
    from collections.abc import Iterator

_ENV_VARS = (
    "LABELCHECK_STORE_URL",
    "LABELCHECK_STORE_KEY",
    "LABELCHECK_CACHE_TTL_SECONDS",
    "LABELCHECK_CACHE_PAGE_SIZE",
    "LABELCHECK_FETCH_TIMEOUT_SECONDS",
    "LABELCHECK_PARENTHETICAL_DECLARATIONS",
    "DATABASE_URI",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    logging.getLogger("httpx").setLevel(logging.NOTSET)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def store() -> FakeReferenceStore:
    return FakeReferenceStore()


@pytest.fixture
def cache(store: FakeReferenceStore, clock: ManualClock) -> ReferenceDataCache:
    return ReferenceDataCache(store, clock=clock)
