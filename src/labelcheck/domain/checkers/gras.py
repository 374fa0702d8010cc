"""Safety-recognition (GRAS) status checks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar

from labelcheck.domain.model import CheckerName, DatasetName, GrasComplianceReport

from .base import ComplianceChecker

if TYPE_CHECKING:
    from labelcheck.domain.model import ComplianceReport

log = logging.getLogger(__name__)


class GRASChecker(ComplianceChecker):
    """Every ingredient has to resolve to a GRAS entry at some tier."""

    name: ClassVar[CheckerName] = CheckerName.GRAS

    async def _check(self, ingredients: tuple[str, ...]) -> ComplianceReport:
        read = await self._cache.read(DatasetName.GRAS)
        results = self._matcher.match_all(ingredients, read.snapshot)
        report = GrasComplianceReport(
            dataset=str(DatasetName.GRAS),
            results=tuple(results),
            warnings=(read.warning,) if read.warning else (),
        )
        log.info(
            "GRAS check complete: total=%s compliant=%s non_gras=%s",
            report.total_ingredients,
            report.compliant_count,
            list(report.non_gras_ingredients),
        )
        return report
