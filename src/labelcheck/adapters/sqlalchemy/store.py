"""Reference store reading the dataset tables through SQLAlchemy Core."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Final

from sqlalchemy import create_engine, select
from sqlalchemy.exc import SQLAlchemyError

from labelcheck.adapters.translator import parse_rows
from labelcheck.domain.errors import ReferenceStoreError

from .mappings import TABLE_BY_DATASET, active_filter

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from labelcheck.config.storage import DatabaseConfig
    from labelcheck.domain.model import DatasetName, ReferenceEntry

log = logging.getLogger(__name__)

DEFAULT_SQL_MAX_PAGE_SIZE: Final[int] = 1000


class SqlAlchemyReferenceStore:
    """Paginated ``SELECT ... ORDER BY id LIMIT ... OFFSET ...`` over the reference tables.

    Queries run in a worker thread so a slow database does not block the event loop.
    """

    def __init__(self, engine: Engine, *, max_page_size: int = DEFAULT_SQL_MAX_PAGE_SIZE) -> None:
        self._engine = engine
        self.max_page_size = max_page_size

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> SqlAlchemyReferenceStore:
        return cls(create_engine(config.uri, future=True))

    @property
    def engine(self) -> Engine:
        return self._engine

    async def list_active(
        self,
        dataset: DatasetName,
        *,
        offset: int,
        limit: int,
    ) -> list[ReferenceEntry]:
        rows = await asyncio.to_thread(
            self._select, dataset, offset, min(limit, self.max_page_size)
        )
        log.debug("Fetched %s rows of %s at offset %s", len(rows), dataset, offset)
        return parse_rows(dataset, rows)

    def _select(self, dataset: DatasetName, offset: int, limit: int) -> list[dict[str, object]]:
        table = TABLE_BY_DATASET[dataset]
        statement = select(table).order_by(table.c.id).offset(offset).limit(limit)
        condition = active_filter(table)
        if condition is not None:
            statement = statement.where(condition)
        try:
            with self._engine.connect() as connection:
                result = connection.execute(statement)
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as exc:
            raise ReferenceStoreError(
                f"Query for {dataset} failed: {exc}", dataset=dataset
            ) from exc
