"""Major food allergen detection."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, ClassVar, Final

from labelcheck.domain.model import (
    AllergenComplianceReport,
    CheckerName,
    Confidence,
    DatasetName,
    MatchResult,
    MatchTier,
)
from labelcheck.domain.normalization import normalize_ingredient_name

from .base import ComplianceChecker

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from labelcheck.domain.matching import Matcher
    from labelcheck.domain.model import ComplianceReport, DatasetSnapshot, ReferenceEntry
    from labelcheck.domain.reference_cache import ReferenceDataCache

log = logging.getLogger(__name__)

# Bee products that name-match tree nut / egg derivatives but are not major allergens.
KNOWN_NON_ALLERGENS: Final[frozenset[str]] = frozenset({"royal jelly", "royal gel", "bee jelly"})

# Shorter derivative names ("egg", "soy") are only matched as the whole ingredient.
MIN_CONTAINED_DERIVATIVE_LENGTH: Final[int] = 4


class AllergenChecker(ComplianceChecker):
    """Map ingredients to allergen categories via each category's derivative names.

    An ingredient the matcher cannot resolve is searched for a whole-word derivative name
    (``"Sweet Whey Powder"`` contains ``"whey"``); such hits are graded medium confidence.
    """

    name: ClassVar[CheckerName] = CheckerName.ALLERGENS

    def __init__(
        self,
        cache: ReferenceDataCache,
        *,
        matcher: Matcher | None = None,
        known_non_allergens: Iterable[str] = KNOWN_NON_ALLERGENS,
    ) -> None:
        super().__init__(cache, matcher=matcher)
        self._known_non_allergens = frozenset(
            normalize_ingredient_name(name) for name in known_non_allergens
        )

    async def _check(self, ingredients: tuple[str, ...]) -> ComplianceReport:
        read = await self._cache.read(DatasetName.ALLERGENS)
        derivatives = derivative_patterns(read.snapshot)
        results = tuple(
            self._match(ingredient, read.snapshot, derivatives) for ingredient in ingredients
        )
        report = AllergenComplianceReport(
            dataset=str(DatasetName.ALLERGENS),
            results=results,
            warnings=(read.warning,) if read.warning else (),
        )
        log.info(
            "Allergen check complete: ingredients_with_allergens=%s categories=%s",
            report.ingredients_with_allergens,
            list(report.categories),
        )
        return report

    def _match(
        self,
        ingredient: str,
        snapshot: DatasetSnapshot,
        derivatives: Sequence[tuple[ReferenceEntry, re.Pattern[str]]],
    ) -> MatchResult:
        normalized = normalize_ingredient_name(ingredient)
        if normalized in self._known_non_allergens:
            return MatchResult.unmatched(ingredient, normalized)
        result = self._matcher.match(ingredient, snapshot)
        if result.matched:
            return result
        for entry, pattern in derivatives:
            if pattern.search(normalized):
                log.debug("Derivative of %s found inside %r", entry.canonical_name, ingredient)
                return MatchResult(
                    raw=ingredient,
                    normalized=normalized,
                    entry=entry,
                    tier=MatchTier.FUZZY,
                    confidence=Confidence.MEDIUM,
                )
        return result


def derivative_patterns(
    snapshot: DatasetSnapshot,
) -> tuple[tuple[ReferenceEntry, re.Pattern[str]], ...]:
    """Whole-word patterns for every derivative name long enough to search inside compounds.

    One pattern per entry, in snapshot order, so the first entry containing a hit wins.
    """

    patterns: list[tuple[ReferenceEntry, re.Pattern[str]]] = []
    for entry in snapshot:
        names = {
            name
            for name in (normalize_ingredient_name(synonym) for synonym in entry.synonyms)
            if len(name) >= MIN_CONTAINED_DERIVATIVE_LENGTH
        }
        if not names:
            continue
        ordered = sorted(names, key=lambda name: (-len(name), name))
        alternatives = "|".join(re.escape(name) for name in ordered)
        patterns.append((entry, re.compile(rf"\b(?:{alternatives})\b")))
    return tuple(patterns)
