"""New Dietary Ingredient notification checks."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, ClassVar, cast

from labelcheck.domain.model import CheckerName, DatasetName, MatchTier, NdiComplianceReport

from .base import ComplianceChecker

if TYPE_CHECKING:
    from labelcheck.domain.model import ComplianceReport, DatasetSnapshot, MatchResult
    from labelcheck.domain.reference_cache import CacheRead

log = logging.getLogger(__name__)

NDI_DATASET_LABEL = f"{DatasetName.NDI}+{DatasetName.ODI}"

_TIER_RANK = {MatchTier.EXACT: 0, MatchTier.SYNONYM: 1, MatchTier.FUZZY: 2, MatchTier.NONE: 3}


class NDIChecker(ComplianceChecker):
    """Ingredients must be either notified (NDI) or grandfathered (ODI).

    Both datasets are consulted for every ingredient and the stronger tier wins; on equal tiers
    the notification record is preferred.
    """

    name: ClassVar[CheckerName] = CheckerName.NDI

    async def _check(self, ingredients: tuple[str, ...]) -> ComplianceReport:
        # Wait for both reads; the first failure wins.
        reads = await asyncio.gather(
            self._cache.read(DatasetName.NDI),
            self._cache.read(DatasetName.ODI),
            return_exceptions=True,
        )
        for read in reads:
            if isinstance(read, BaseException):
                raise read
        notified, grandfathered = cast("tuple[CacheRead, CacheRead]", tuple(reads))
        results = tuple(
            self._resolve(ingredient, notified.snapshot, grandfathered.snapshot)
            for ingredient in ingredients
        )
        warnings = tuple(read.warning for read in (notified, grandfathered) if read.warning)
        report = NdiComplianceReport(
            dataset=NDI_DATASET_LABEL,
            results=results,
            warnings=warnings,
        )
        log.info(
            "NDI check complete: total=%s notified=%s grandfathered=%s requires_notification=%s",
            report.total_ingredients,
            report.notified_count,
            report.grandfathered_count,
            len(report.notification_required),
        )
        return report

    def _resolve(
        self,
        ingredient: str,
        notified: DatasetSnapshot,
        grandfathered: DatasetSnapshot,
    ) -> MatchResult:
        ndi_match = self._matcher.match(ingredient, notified)
        if ndi_match.tier is MatchTier.EXACT:
            return ndi_match
        odi_match = self._matcher.match(ingredient, grandfathered)
        if _TIER_RANK[odi_match.tier] < _TIER_RANK[ndi_match.tier]:
            return odi_match
        return ndi_match
