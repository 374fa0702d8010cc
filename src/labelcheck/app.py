"""Application wiring and synchronous entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from labelcheck.adapters.postgrest import PostgrestReferenceStore
from labelcheck.adapters.sqlalchemy import SqlAlchemyReferenceStore
from labelcheck.config import (
    get_cache_config,
    get_compliance_config,
    get_database_config,
    get_reference_store_config,
)
from labelcheck.domain.model import DatasetName
from labelcheck.domain.orchestrator import ComplianceOrchestrator
from labelcheck.domain.reference_cache import ReferenceDataCache

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from labelcheck.config import CacheConfig, ComplianceConfig
    from labelcheck.domain.model import AggregateComplianceResult
    from labelcheck.domain.ports import ReferenceStore
    from labelcheck.domain.reference_cache import DatasetCacheStats

type StoreKind = Literal["rest", "sql"]

STORE_KINDS: tuple[StoreKind, ...] = ("rest", "sql")

log = getLogger(__name__)


def build_reference_store(kind: StoreKind = "rest") -> ReferenceStore:
    """Create the backing store selected by ``kind`` from environment configuration."""

    if kind == "rest":
        return PostgrestReferenceStore(config=get_reference_store_config())
    if kind == "sql":
        return SqlAlchemyReferenceStore.from_config(get_database_config())
    raise ValueError(f"Unsupported reference store: {kind}")


def build_reference_cache(
    store: ReferenceStore | None = None,
    *,
    store_kind: StoreKind = "rest",
    config: CacheConfig | None = None,
) -> ReferenceDataCache:
    effective_store = store or build_reference_store(store_kind)
    effective_config = config or get_cache_config()
    return ReferenceDataCache(
        effective_store,
        ttl=effective_config.ttl,
        page_size=effective_config.page_size,
        fetch_timeout_seconds=effective_config.fetch_timeout_seconds,
    )


def build_orchestrator(
    cache: ReferenceDataCache,
    *,
    config: ComplianceConfig | None = None,
) -> ComplianceOrchestrator:
    effective_config = config or get_compliance_config()
    return ComplianceOrchestrator.from_cache(
        cache,
        accept_parenthetical_declarations=effective_config.accept_parenthetical_declarations,
    )


def check_ingredients(
    ingredients: Sequence[str],
    *,
    declared_allergen_statement: str | None = None,
    cache: ReferenceDataCache | None = None,
    store_kind: StoreKind = "rest",
    compliance_config: ComplianceConfig | None = None,
) -> AggregateComplianceResult:
    """Run every compliance checker over ``ingredients`` and return the aggregate."""

    effective_cache = cache or build_reference_cache(store_kind=store_kind)
    orchestrator = build_orchestrator(effective_cache, config=compliance_config)
    log.info(
        "Starting compliance check: ingredients=%s, allergen_statement=%s",
        len(ingredients),
        declared_allergen_statement is not None,
    )
    result = asyncio.run(orchestrator.run(ingredients, declared_allergen_statement))
    log.info(
        "Finished compliance check: degraded=%s, escalations=%s",
        result.degraded,
        len(result.escalations),
    )
    return result


def warm_reference_data(
    datasets: Iterable[DatasetName] | None = None,
    *,
    cache: ReferenceDataCache | None = None,
    store_kind: StoreKind = "rest",
) -> dict[DatasetName, DatasetCacheStats]:
    """Load the given datasets (all by default) and report what the cache now holds."""

    effective_cache = cache or build_reference_cache(store_kind=store_kind)
    names = tuple(datasets) if datasets is not None else tuple(DatasetName)
    asyncio.run(effective_cache.warm(names))
    stats = effective_cache.stats()
    return {name: stats[name] for name in names if name in stats}
