"""Translate validated reference rows into domain entries."""

from __future__ import annotations

from functools import singledispatch
from typing import TYPE_CHECKING

from pydantic import ValidationError

from labelcheck.domain.errors import ReferenceStoreError
from labelcheck.domain.model import AllergenEntry, GrasEntry, NdiEntry, OdiEntry, ReferenceEntry

from .schema import ROW_SCHEMA_BY_DATASET, AllergenRow, GrasRow, NdiRow, OdiRow

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from labelcheck.domain.model import DatasetName

    from .schema import ReferenceRow

NDI_STATUS = "notified"
ODI_STATUS = "grandfathered"


def parse_rows(
    dataset: DatasetName, payload: Iterable[Mapping[str, object]]
) -> list[ReferenceEntry]:
    """Validate raw rows of ``dataset`` and translate them, keeping their order."""

    schema = ROW_SCHEMA_BY_DATASET[dataset]
    try:
        rows = [schema.model_validate(row) for row in payload]
    except ValidationError as exc:
        raise ReferenceStoreError(f"Invalid {dataset} row: {exc}", dataset=dataset) from exc
    return [translate_row(row) for row in rows]


@singledispatch
def translate_row(row: ReferenceRow) -> ReferenceEntry:
    raise TypeError(f"No translation for {type(row).__name__}")


@translate_row.register
def _(row: GrasRow) -> ReferenceEntry:
    return GrasEntry(
        entry_id=row.id,
        canonical_name=row.ingredient_name,
        synonyms=_names(row.synonyms, (row.common_name, row.technical_name)),
        status=row.gras_status.value if row.gras_status else None,
        source_citation=row.source_reference,
        is_active=row.is_active,
        cas_number=row.cas_number,
        notice_number=row.gras_notice_number,
        category=row.category,
    )


@translate_row.register
def _(row: NdiRow) -> ReferenceEntry:
    citation = f"NDI #{row.notification_number}" if row.notification_number is not None else None
    return NdiEntry(
        entry_id=row.id,
        canonical_name=row.ingredient_name,
        status=NDI_STATUS,
        source_citation=citation,
        is_active=row.is_active,
        notification_number=row.notification_number,
        report_number=row.report_number,
        firm=row.firm,
        submission_date=row.submission_date,
        response_date=row.fda_response_date,
    )


@translate_row.register
def _(row: OdiRow) -> ReferenceEntry:
    return OdiEntry(
        entry_id=row.id,
        canonical_name=row.ingredient_name,
        synonyms=_names(row.synonyms),
        status=ODI_STATUS,
        source_citation=row.source_organization,
        is_active=row.is_active,
        source_organization=row.source_organization,
        ingredient_type=row.ingredient_type,
    )


@translate_row.register
def _(row: AllergenRow) -> ReferenceEntry:
    return AllergenEntry(
        entry_id=row.id,
        canonical_name=row.allergen_name,
        synonyms=_names(row.derivatives, row.scientific_names, (row.common_name,)),
        status=row.allergen_category,
        source_citation=row.regulation_citation,
        is_active=row.is_active,
        allergen_group=row.allergen_category,
    )


def _names(*groups: Sequence[str | None]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for group in groups:
        for name in group:
            if name and name.strip():
                seen.setdefault(name.strip(), None)
    return tuple(seen)
