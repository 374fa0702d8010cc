"""SQLAlchemy Core tables mirroring the reference datasets."""

from __future__ import annotations

import json
import logging
import uuid
from typing import TYPE_CHECKING, Any, Final, cast

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    Dialect,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    true,
)

from labelcheck.domain.model import DatasetName

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class NameListType(TypeDecorator[list[str]]):
    """Text array stored as a JSON list so it works on every backend."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: list[str] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(list(value))

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[str]:
        _ = dialect
        if value is None:
            return []
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return []
        items = cast(list[Any], loaded)
        return [item for item in items if isinstance(item, str)]


def _new_id() -> str:
    return str(uuid.uuid4())


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "pk": "pk_%(table_name)s",
    }
)

gras_ingredients_table = Table(
    str(DatasetName.GRAS),
    metadata,
    Column("id", String(36), primary_key=True, default=_new_id),
    Column("ingredient_name", String, nullable=False, index=True),
    Column("cas_number", String, nullable=True),
    Column("gras_notice_number", String, nullable=True),
    Column("gras_status", String, nullable=True),
    Column("source_reference", String, nullable=True),
    Column("category", String, nullable=True),
    Column("synonyms", NameListType, nullable=True),
    Column("common_name", String, nullable=True),
    Column("technical_name", String, nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
)

ndi_ingredients_table = Table(
    str(DatasetName.NDI),
    metadata,
    Column("id", String(36), primary_key=True, default=_new_id),
    Column("notification_number", Integer, nullable=False, unique=True),
    Column("report_number", String, nullable=True),
    Column("ingredient_name", String, nullable=False, index=True),
    Column("firm", String, nullable=True),
    Column("submission_date", Date, nullable=True),
    Column("fda_response_date", Date, nullable=True),
)

old_dietary_ingredients_table = Table(
    str(DatasetName.ODI),
    metadata,
    Column("id", String(36), primary_key=True, default=_new_id),
    Column("ingredient_name", String, nullable=False, unique=True),
    Column("synonyms", NameListType, nullable=True),
    Column("source_organization", String, nullable=True),
    Column("ingredient_type", String, nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
)

major_allergens_table = Table(
    str(DatasetName.ALLERGENS),
    metadata,
    Column("id", String(36), primary_key=True, default=_new_id),
    Column("allergen_name", String, nullable=False, unique=True),
    Column("allergen_category", String, nullable=False),
    Column("common_name", String, nullable=True),
    Column("derivatives", NameListType, nullable=False),
    Column("scientific_names", NameListType, nullable=True),
    Column("regulation_citation", String, nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
)

TABLE_BY_DATASET: Final[dict[DatasetName, Table]] = {
    DatasetName.GRAS: gras_ingredients_table,
    DatasetName.NDI: ndi_ingredients_table,
    DatasetName.ODI: old_dietary_ingredients_table,
    DatasetName.ALLERGENS: major_allergens_table,
}


def active_filter(table: Table) -> Any:
    """``is_active = true`` where the table has the flag, otherwise ``None``."""

    if "is_active" not in table.c:
        return None
    return table.c.is_active.is_(true())


def create_all_tables(engine: Engine) -> None:
    """Create the reference tables that do not exist yet."""

    log.info("Creating reference tables")
    metadata.create_all(engine)
