"""Reference store backed by a PostgREST (Supabase-style) REST endpoint."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final, Protocol

import httpx

from labelcheck.adapters.http_resilience import ResilientClient, build_limiter
from labelcheck.adapters.translator import parse_rows
from labelcheck.domain.errors import ReferenceStoreError
from labelcheck.domain.model import DatasetName

if TYPE_CHECKING:
    from aiolimiter import AsyncLimiter

    from labelcheck.config.http_resilience import ResilienceConfig
    from labelcheck.config.reference_store import ReferenceStoreConfig
    from labelcheck.domain.model import ReferenceEntry

log = getLogger(__name__)

# The notified-ingredient table has no active flag; every row counts.
UNFILTERED_DATASETS: Final[frozenset[DatasetName]] = frozenset({DatasetName.NDI})


class ClientFactory(Protocol):
    def __call__(
        self, config: ResilienceConfig, /, *, limiter: AsyncLimiter | None = None
    ) -> ResilientClient: ...


class PostgrestReferenceStore:
    """Read reference rows page by page through ``GET /<table>``.

    The server silently caps every response at ``max_page_size`` rows, whatever ``limit`` asks
    for. Rows are ordered by primary key so consecutive offsets never overlap or skip.
    """

    def __init__(
        self,
        *,
        config: ReferenceStoreConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        # One limiter for the store's lifetime; clients are created per request.
        self._limiter = build_limiter(config.resilience.ratelimit)
        self.max_page_size = config.max_page_size

    async def list_active(
        self,
        dataset: DatasetName,
        *,
        offset: int,
        limit: int,
    ) -> list[ReferenceEntry]:
        if self._resilience.base_url is None:
            raise ReferenceStoreError("Missing base_url in resilience configuration")

        params: dict[str, str] = {
            "select": "*",
            "order": "id.asc",
            "offset": str(offset),
            "limit": str(min(limit, self.max_page_size)),
        }
        if dataset not in UNFILTERED_DATASETS:
            params["is_active"] = "eq.true"

        try:
            async with self._client_factory(self._resilience, limiter=self._limiter) as client:
                response = await client.get(f"/{dataset}", params=params)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as exc:
            raise ReferenceStoreError(
                f"Request for {dataset} failed: {exc}", dataset=dataset
            ) from exc
        except ValueError as exc:
            raise ReferenceStoreError(
                f"Response for {dataset} is not JSON: {exc}", dataset=dataset
            ) from exc

        if not isinstance(payload, list):
            raise ReferenceStoreError(f"Unexpected {dataset} response payload", dataset=dataset)

        log.debug("Fetched %s rows of %s at offset %s", len(payload), dataset, offset)
        return parse_rows(dataset, payload)
