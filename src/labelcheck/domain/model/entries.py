"""Reference entries loaded from the regulatory datasets.

Every dataset shares one entry shape (canonical name, synonyms, status tag, citation, active
flag) so matching can be written once. The subclasses are tagged with the dataset they come
from and carry the dataset-specific columns that reports want to show.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from .enums import DatasetName

if TYPE_CHECKING:
    from datetime import date


@dataclass(frozen=True, slots=True, kw_only=True)
class ReferenceEntry:
    canonical_name: str
    synonyms: tuple[str, ...] = ()
    status: str | None = None
    source_citation: str | None = None
    is_active: bool = True
    entry_id: str | None = None

    dataset: ClassVar[DatasetName]


@dataclass(frozen=True, slots=True, kw_only=True)
class GrasEntry(ReferenceEntry):
    cas_number: str | None = None
    notice_number: str | None = None
    category: str | None = None

    dataset: ClassVar[DatasetName] = DatasetName.GRAS


@dataclass(frozen=True, slots=True, kw_only=True)
class NdiEntry(ReferenceEntry):
    notification_number: int | None = None
    report_number: str | None = None
    firm: str | None = None
    submission_date: date | None = None
    response_date: date | None = None

    dataset: ClassVar[DatasetName] = DatasetName.NDI


@dataclass(frozen=True, slots=True, kw_only=True)
class OdiEntry(ReferenceEntry):
    source_organization: str | None = None
    ingredient_type: str | None = None

    dataset: ClassVar[DatasetName] = DatasetName.ODI


@dataclass(frozen=True, slots=True, kw_only=True)
class AllergenEntry(ReferenceEntry):
    """One major allergen; ``synonyms`` holds its derivative ingredient names."""

    allergen_group: str | None = None

    dataset: ClassVar[DatasetName] = DatasetName.ALLERGENS

    @property
    def category(self) -> str:
        return self.canonical_name

    @property
    def derivatives(self) -> tuple[str, ...]:
        return self.synonyms


type AnyReferenceEntry = GrasEntry | NdiEntry | OdiEntry | AllergenEntry

ENTRY_TYPE_BY_DATASET: dict[DatasetName, type[ReferenceEntry]] = {
    DatasetName.GRAS: GrasEntry,
    DatasetName.NDI: NdiEntry,
    DatasetName.ODI: OdiEntry,
    DatasetName.ALLERGENS: AllergenEntry,
}
