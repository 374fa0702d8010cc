"""Tiered resolution of one ingredient against one dataset snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from labelcheck.domain.model import Confidence, MatchResult, MatchTier
from labelcheck.domain.normalization import normalize_ingredient_name, trailing_phrases

if TYPE_CHECKING:
    from collections.abc import Sequence

    from labelcheck.domain.model import DatasetSnapshot, ReferenceEntry

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _FuzzyHit:
    position: int
    entry: ReferenceEntry
    phrase: str

    @property
    def sort_key(self) -> tuple[int, int]:
        return len(self.entry.canonical_name), self.position


class Matcher:
    """Resolve ingredient names with exact, synonym and fuzzy tiers, in that order.

    The first tier that succeeds wins; lower tiers are never consulted after it. Fuzzy matching
    looks up trailing word phrases (last word first, then extending leftwards) among canonical
    names; when several phrases hit, the entry with the shortest canonical name wins and ties go
    to the entry that appears first in the snapshot.
    """

    def match(self, raw: str, snapshot: DatasetSnapshot) -> MatchResult:
        normalized = normalize_ingredient_name(raw)
        if not normalized:
            return MatchResult.unmatched(raw, normalized)

        exact = snapshot.by_canonical_name(normalized)
        if exact is not None:
            return MatchResult(
                raw=raw,
                normalized=normalized,
                entry=exact[1],
                tier=MatchTier.EXACT,
                confidence=Confidence.HIGH,
            )

        synonym = snapshot.by_synonym(normalized)
        if synonym is not None:
            return MatchResult(
                raw=raw,
                normalized=normalized,
                entry=synonym[1],
                tier=MatchTier.SYNONYM,
                confidence=Confidence.HIGH,
            )

        hit = self._best_fuzzy_hit(normalized, snapshot)
        if hit is None:
            return MatchResult.unmatched(raw, normalized)

        multi_word = len(hit.phrase.split()) > 1
        log.debug(
            "Fuzzy match in %s: %r -> %r via %r",
            snapshot.dataset,
            raw,
            hit.entry.canonical_name,
            hit.phrase,
        )
        return MatchResult(
            raw=raw,
            normalized=normalized,
            entry=hit.entry,
            tier=MatchTier.FUZZY,
            confidence=Confidence.MEDIUM if multi_word else Confidence.LOW,
        )

    def match_all(
        self, ingredients: Sequence[str], snapshot: DatasetSnapshot
    ) -> list[MatchResult]:
        return [self.match(ingredient, snapshot) for ingredient in ingredients]

    @staticmethod
    def _best_fuzzy_hit(normalized: str, snapshot: DatasetSnapshot) -> _FuzzyHit | None:
        best: _FuzzyHit | None = None
        for phrase in trailing_phrases(normalized):
            found = snapshot.by_canonical_name(phrase)
            if found is None:
                continue
            hit = _FuzzyHit(position=found[0], entry=found[1], phrase=phrase)
            if best is None or hit.sort_key < best.sort_key:
                best = hit
        return best


DEFAULT_MATCHER = Matcher()


def match_ingredient(raw: str, snapshot: DatasetSnapshot) -> MatchResult:
    return DEFAULT_MATCHER.match(raw, snapshot)
