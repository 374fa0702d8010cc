"""REST reference store configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import positive_float_env, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_MAX_PAGE_SIZE: Final[int] = 1000
REST_PATH: Final[str] = "/rest/v1"


@dataclass(frozen=True, slots=True)
class ReferenceStoreConfig:
    resilience: ResilienceConfig
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE


def get_reference_store_config() -> ReferenceStoreConfig:
    values = require_env_vars(("LABELCHECK_STORE_URL", "LABELCHECK_STORE_KEY"))
    base_url = values["LABELCHECK_STORE_URL"].rstrip("/") + REST_PATH
    api_key = values["LABELCHECK_STORE_KEY"]

    resilience = ResilienceConfig(
        name="reference-store",
        base_url=base_url,
        timeout_seconds=positive_float_env("LABELCHECK_FETCH_TIMEOUT_SECONDS", 30.0),
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        retry=RetryPolicy(total=3),
        default_headers={
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        },
    )
    return ReferenceStoreConfig(resilience=resilience)
