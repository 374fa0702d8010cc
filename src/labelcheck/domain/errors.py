"""Error taxonomy for compliance runs.

Normalization and matching are pure string operations and have no error types of their own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from labelcheck.domain.model import CheckerName, DatasetName


class ComplianceError(RuntimeError):
    """Base class for compliance engine failures."""


class ReferenceStoreError(ComplianceError):
    """Raised by backing-store adapters when a page of reference rows cannot be read."""

    def __init__(self, message: str, *, dataset: DatasetName | None = None) -> None:
        super().__init__(message)
        self.dataset = dataset


class CacheUnavailable(ComplianceError):  # noqa: N818
    """A dataset refresh failed and there is no earlier snapshot to fall back on."""

    def __init__(self, dataset: DatasetName, message: str) -> None:
        super().__init__(f"Reference data '{dataset}' unavailable: {message}")
        self.dataset = dataset


class CheckerFailure(ComplianceError):  # noqa: N818
    """A checker could not complete its run."""

    def __init__(self, checker: CheckerName, message: str) -> None:
        super().__init__(f"{checker} checker failed: {message}")
        self.checker = checker


class ComplianceRunFailed(ComplianceError):  # noqa: N818
    """Every checker of a run failed; there is nothing usable to aggregate."""

    def __init__(self, failures: Mapping[CheckerName, str]) -> None:
        details = "; ".join(f"{name}: {message}" for name, message in failures.items())
        super().__init__(f"All compliance checkers failed ({details})")
        self.failures = dict(failures)
