"""Reference data cache settings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from labelcheck.domain.reference_cache import (
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TTL,
)

from .env import positive_float_env, positive_int_env


@dataclass(frozen=True, slots=True)
class CacheConfig:
    ttl: timedelta = DEFAULT_TTL
    page_size: int = DEFAULT_PAGE_SIZE
    fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS


def get_cache_config() -> CacheConfig:
    ttl_seconds = positive_float_env(
        "LABELCHECK_CACHE_TTL_SECONDS", DEFAULT_TTL.total_seconds()
    )
    return CacheConfig(
        ttl=timedelta(seconds=ttl_seconds),
        page_size=positive_int_env("LABELCHECK_CACHE_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        fetch_timeout_seconds=positive_float_env(
            "LABELCHECK_FETCH_TIMEOUT_SECONDS", DEFAULT_FETCH_TIMEOUT_SECONDS
        ),
    )
