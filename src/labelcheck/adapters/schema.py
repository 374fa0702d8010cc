"""Row schemas of the reference tables, shared by every backing-store adapter."""

from __future__ import annotations

import datetime as dt  # noqa: TC003
from typing import Annotated, ClassVar

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field

from labelcheck.domain.model import DatasetName, GrasStatus


def _none_as_empty(value: object) -> object:
    return [] if value is None else value


# Array columns may be NULL in the database; they read as empty.
NameList = Annotated[list[str], BeforeValidator(_none_as_empty)]


class ReferenceRow(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    dataset: ClassVar[DatasetName]

    id: str | None = None
    is_active: bool = True


class GrasRow(ReferenceRow):
    dataset: ClassVar[DatasetName] = DatasetName.GRAS

    ingredient_name: str
    cas_number: str | None = None
    gras_notice_number: str | None = None
    gras_status: GrasStatus | None = None
    source_reference: str | None = None
    category: str | None = None
    synonyms: NameList = Field(default_factory=list)
    common_name: str | None = None
    technical_name: str | None = None


class NdiRow(ReferenceRow):
    dataset: ClassVar[DatasetName] = DatasetName.NDI

    ingredient_name: str
    notification_number: int | None = None
    report_number: str | None = None
    firm: str | None = None
    submission_date: dt.date | None = None
    fda_response_date: dt.date | None = None


class OdiRow(ReferenceRow):
    dataset: ClassVar[DatasetName] = DatasetName.ODI

    ingredient_name: str
    synonyms: NameList = Field(default_factory=list)
    source_organization: str | None = Field(
        default=None, validation_alias=AliasChoices("source_organization", "source")
    )
    ingredient_type: str | None = None


class AllergenRow(ReferenceRow):
    dataset: ClassVar[DatasetName] = DatasetName.ALLERGENS

    allergen_name: str
    allergen_category: str | None = None
    common_name: str | None = None
    derivatives: NameList = Field(default_factory=list)
    scientific_names: NameList = Field(default_factory=list)
    regulation_citation: str | None = None


ROW_SCHEMA_BY_DATASET: dict[DatasetName, type[ReferenceRow]] = {
    DatasetName.GRAS: GrasRow,
    DatasetName.NDI: NdiRow,
    DatasetName.ODI: OdiRow,
    DatasetName.ALLERGENS: AllergenRow,
}
