"""Reusable reference entries and fake backing stores for compliance tests."""

from __future__ import annotations

import asyncio
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING

from labelcheck.domain.errors import ReferenceStoreError
from labelcheck.domain.model import (
    AllergenEntry,
    DatasetName,
    GrasEntry,
    NdiEntry,
    OdiEntry,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from labelcheck.domain.model import ReferenceEntry


def gras_entries() -> list[ReferenceEntry]:
    return [
        GrasEntry(
            entry_id="g1",
            canonical_name="Sucrose",
            synonyms=("Sugar", "Cane Sugar"),
            status="affirmed",
            source_citation="21 CFR 184.1854",
        ),
        GrasEntry(entry_id="g2", canonical_name="Citric Acid", status="affirmed"),
        GrasEntry(entry_id="g3", canonical_name="Caffeine", status="affirmed"),
        GrasEntry(entry_id="g4", canonical_name="Calcium Pantothenate", status="affirmed"),
        GrasEntry(entry_id="g5", canonical_name="Whey Protein Isolate", status="notice"),
        GrasEntry(
            entry_id="g6",
            canonical_name="Brominated Vegetable Oil",
            status="affirmed",
            is_active=False,
        ),
    ]


def ndi_entries() -> list[ReferenceEntry]:
    return [
        NdiEntry(
            entry_id="n1",
            canonical_name="Huperzine A",
            status="notified",
            source_citation="NDI #123",
            notification_number=123,
            submission_date=date(2001, 5, 4),
        ),
        NdiEntry(
            entry_id="n2",
            canonical_name="Green Tea Extract",
            status="notified",
            source_citation="NDI #456",
            notification_number=456,
        ),
    ]


def odi_entries() -> list[ReferenceEntry]:
    return [
        OdiEntry(
            entry_id="o1",
            canonical_name="Ascorbic Acid",
            synonyms=("Vitamin C",),
            status="grandfathered",
            source_organization="CRN",
        ),
        OdiEntry(entry_id="o2", canonical_name="Caffeine", status="grandfathered"),
        OdiEntry(entry_id="o3", canonical_name="Green Tea Extract", status="grandfathered"),
    ]


def allergen_entries() -> list[ReferenceEntry]:
    return [
        AllergenEntry(
            entry_id="a1",
            canonical_name="Milk",
            synonyms=("Whey", "Whey Protein Isolate", "Casein", "Lactose"),
            status="milk",
            allergen_group="milk",
        ),
        AllergenEntry(
            entry_id="a2",
            canonical_name="Egg",
            synonyms=("Albumin", "Egg White", "Royal Jelly"),
            status="egg",
            allergen_group="egg",
        ),
        AllergenEntry(
            entry_id="a3",
            canonical_name="Tree Nuts",
            synonyms=("Almond", "Cashew"),
            status="tree_nuts",
            allergen_group="tree_nuts",
        ),
        AllergenEntry(
            entry_id="a4",
            canonical_name="Soy",
            synonyms=("Soy Lecithin", "Soybean Oil"),
            status="soybeans",
            allergen_group="soybeans",
        ),
    ]


def default_datasets() -> dict[DatasetName, list[ReferenceEntry]]:
    return {
        DatasetName.GRAS: gras_entries(),
        DatasetName.NDI: ndi_entries(),
        DatasetName.ODI: odi_entries(),
        DatasetName.ALLERGENS: allergen_entries(),
    }


class FakeReferenceStore:
    """In-memory store that records every page request and can be told to fail."""

    def __init__(
        self,
        datasets: Mapping[DatasetName, Sequence[ReferenceEntry]] | None = None,
        *,
        max_page_size: int = 1000,
        delay: float = 0.0,
    ) -> None:
        self.datasets = dict(datasets if datasets is not None else default_datasets())
        self.max_page_size = max_page_size
        self.delay = delay
        self.calls: list[tuple[DatasetName, int, int]] = []
        self._failures: dict[tuple[DatasetName, int | None], BaseException] = {}

    def fail(
        self,
        dataset: DatasetName,
        error: BaseException | None = None,
        *,
        offset: int | None = None,
    ) -> None:
        self._failures[(dataset, offset)] = error or ReferenceStoreError(
            f"{dataset} unreachable", dataset=dataset
        )

    def recover(self, dataset: DatasetName) -> None:
        for key in [key for key in self._failures if key[0] == dataset]:
            del self._failures[key]

    def calls_for(self, dataset: DatasetName) -> int:
        return sum(1 for call in self.calls if call[0] == dataset)

    async def list_active(
        self,
        dataset: DatasetName,
        *,
        offset: int,
        limit: int,
    ) -> list[ReferenceEntry]:
        self.calls.append((dataset, offset, limit))
        if self.delay:
            await asyncio.sleep(self.delay)
        error = self._failures.get((dataset, offset)) or self._failures.get((dataset, None))
        if error is not None:
            raise error
        rows = list(self.datasets.get(dataset, ()))
        return rows[offset : offset + min(limit, self.max_page_size)]


class ManualClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta
