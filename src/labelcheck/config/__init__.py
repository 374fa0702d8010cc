"""Application configuration helpers."""

from __future__ import annotations

from .cache import CacheConfig, get_cache_config
from .compliance import ComplianceConfig, get_compliance_config
from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .reference_store import ReferenceStoreConfig, get_reference_store_config
from .storage import DatabaseConfig, get_database_config

__all__ = [
    "CacheConfig",
    "ComplianceConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ReferenceStoreConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "configure_logging",
    "get_cache_config",
    "get_compliance_config",
    "get_database_config",
    "get_reference_store_config",
    "require_env_vars",
]
