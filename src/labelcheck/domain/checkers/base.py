"""Shared contract for the compliance checkers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from labelcheck.domain.errors import CacheUnavailable, CheckerFailure
from labelcheck.domain.matching import Matcher

if TYPE_CHECKING:
    from collections.abc import Sequence

    from labelcheck.domain.model import CheckerName, ComplianceReport
    from labelcheck.domain.reference_cache import ReferenceDataCache

log = logging.getLogger(__name__)


class ComplianceChecker(ABC):
    """Match an ingredient list against cached reference data and build a report.

    ``check`` either returns a complete report or raises ``CheckerFailure``; a checker never
    reports compliance for data it could not load.
    """

    name: ClassVar[CheckerName]

    def __init__(self, cache: ReferenceDataCache, *, matcher: Matcher | None = None) -> None:
        self._cache = cache
        self._matcher = matcher or Matcher()

    async def check(self, ingredients: Sequence[str]) -> ComplianceReport:
        try:
            return await self._check(tuple(ingredients))
        except CheckerFailure:
            raise
        except CacheUnavailable as exc:
            raise CheckerFailure(self.name, str(exc)) from exc
        except Exception as exc:
            log.exception("Unexpected error in %s checker", self.name)
            raise CheckerFailure(self.name, f"unexpected error: {exc!r}") from exc

    @abstractmethod
    async def _check(self, ingredients: tuple[str, ...]) -> ComplianceReport: ...
