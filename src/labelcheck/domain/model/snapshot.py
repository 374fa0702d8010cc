"""Immutable, published view of one reference dataset."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from labelcheck.domain.normalization import normalize_ingredient_name

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping
    from datetime import datetime, timedelta

    from .entries import ReferenceEntry
    from .enums import DatasetName


@dataclass(frozen=True, slots=True)
class DatasetSnapshot:
    """Ordered entries of a dataset plus the time they were loaded.

    A snapshot is replaced wholesale on refresh and never edited in place. The name indexes are
    built once at construction and map a normalized name to the position of the *first* entry
    carrying it, so lookups keep snapshot order as their tie-break.
    """

    dataset: DatasetName
    entries: tuple[ReferenceEntry, ...]
    loaded_at: datetime
    canonical_index: Mapping[str, int] = field(repr=False, compare=False)
    synonym_index: Mapping[str, int] = field(repr=False, compare=False)

    @classmethod
    def build(
        cls,
        dataset: DatasetName,
        entries: Iterable[ReferenceEntry],
        *,
        loaded_at: datetime,
    ) -> DatasetSnapshot:
        active = tuple(entry for entry in entries if entry.is_active)
        canonical: dict[str, int] = {}
        synonyms: dict[str, int] = {}
        for position, entry in enumerate(active):
            name = normalize_ingredient_name(entry.canonical_name)
            if name:
                canonical.setdefault(name, position)
            for synonym in entry.synonyms:
                normalized_synonym = normalize_ingredient_name(synonym)
                if normalized_synonym:
                    synonyms.setdefault(normalized_synonym, position)
        return cls(
            dataset=dataset,
            entries=active,
            loaded_at=loaded_at,
            canonical_index=MappingProxyType(canonical),
            synonym_index=MappingProxyType(synonyms),
        )

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ReferenceEntry]:
        return iter(self.entries)

    def age(self, now: datetime) -> timedelta:
        return now - self.loaded_at

    def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
        return self.age(now) < ttl

    def by_canonical_name(self, normalized: str) -> tuple[int, ReferenceEntry] | None:
        position = self.canonical_index.get(normalized)
        if position is None:
            return None
        return position, self.entries[position]

    def by_synonym(self, normalized: str) -> tuple[int, ReferenceEntry] | None:
        position = self.synonym_index.get(normalized)
        if position is None:
            return None
        return position, self.entries[position]
