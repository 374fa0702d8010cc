from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from labelcheck.domain.model import DatasetName
from labelcheck.domain.reference_cache import ReferenceDataCache
from labelcheck.domain.serialization import to_payload
from tests.support.reference_data import ManualClock


def test_cache_stats_payload(cache: ReferenceDataCache, clock: ManualClock) -> None:
    asyncio.run(cache.get(DatasetName.NDI))
    clock.advance(timedelta(hours=1))

    payload = to_payload(cache.stats()[DatasetName.NDI])

    assert payload == {
        "dataset": "ndi_ingredients",
        "count": 2,
        "loaded_at": "2025-01-01T12:00:00+00:00",
        "age_seconds": 3600.0,
        "expires_in_seconds": 23 * 3600.0,
        "is_valid": True,
        "last_error": None,
    }


def test_unknown_types_are_rejected() -> None:
    with pytest.raises(TypeError):
        to_payload(object())
