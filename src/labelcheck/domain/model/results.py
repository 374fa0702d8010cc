"""Per-run result structures: matches, checker reports and the aggregate.

Every compliance flag and count here is derived from the per-ingredient match results; none
of them can be set independently.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .entries import AllergenEntry, NdiEntry, OdiEntry
from .enums import CheckerName, CheckerStatus, Confidence, MatchTier, NdiStatus, Severity

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .entries import ReferenceEntry
    from .enums import EscalationKind

DSHEA_CUTOFF = "October 15, 1994"


@dataclass(frozen=True, slots=True)
class MatchResult:
    raw: str
    normalized: str
    entry: ReferenceEntry | None
    tier: MatchTier
    confidence: Confidence

    @property
    def matched(self) -> bool:
        return self.entry is not None

    @classmethod
    def unmatched(cls, raw: str, normalized: str) -> MatchResult:
        return cls(
            raw=raw,
            normalized=normalized,
            entry=None,
            tier=MatchTier.NONE,
            confidence=Confidence.LOW,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class ComplianceReport:
    """Outcome of one checker over an ingredient list (order and duplicates preserved)."""

    dataset: str
    results: tuple[MatchResult, ...]
    warnings: tuple[str, ...] = ()

    @property
    def total_ingredients(self) -> int:
        return len(self.results)

    @property
    def compliant_count(self) -> int:
        return sum(1 for result in self.results if self.is_compliant(result))

    @property
    def non_compliant_count(self) -> int:
        return self.total_ingredients - self.compliant_count

    @property
    def overall_compliant(self) -> bool:
        return all(self.is_compliant(result) for result in self.results)

    def is_compliant(self, result: MatchResult) -> bool:
        return result.matched


@dataclass(frozen=True, slots=True, kw_only=True)
class GrasComplianceReport(ComplianceReport):
    @property
    def gras_ingredients(self) -> tuple[str, ...]:
        return tuple(result.raw for result in self.results if result.matched)

    @property
    def non_gras_ingredients(self) -> tuple[str, ...]:
        return tuple(result.raw for result in self.results if not result.matched)

    @property
    def critical_issues(self) -> tuple[str, ...]:
        return tuple(
            f'Ingredient "{ingredient}" is NOT in the FDA GRAS database and may require a GRAS '
            "determination (21 CFR 170.30) or food additive approval before use."
            for ingredient in self.non_gras_ingredients
        )


@dataclass(frozen=True, slots=True)
class NdiFinding:
    result: MatchResult
    status: NdiStatus
    note: str

    @property
    def requires_notification(self) -> bool:
        return self.status is NdiStatus.NOTIFICATION_REQUIRED


@dataclass(frozen=True, slots=True, kw_only=True)
class NdiComplianceReport(ComplianceReport):
    """Matches against notified (NDI) and grandfathered (ODI) ingredients.

    An ingredient matched in neither dataset needs a notification before marketing.
    """

    @property
    def findings(self) -> tuple[NdiFinding, ...]:
        return tuple(_ndi_finding(result) for result in self.results)

    @property
    def notified_count(self) -> int:
        return sum(1 for result in self.results if isinstance(result.entry, NdiEntry))

    @property
    def grandfathered_count(self) -> int:
        return sum(1 for result in self.results if isinstance(result.entry, OdiEntry))

    @property
    def notification_required(self) -> tuple[str, ...]:
        return tuple(result.raw for result in self.results if not result.matched)


def _ndi_finding(result: MatchResult) -> NdiFinding:
    entry = result.entry
    if isinstance(entry, NdiEntry):
        submitted = entry.submission_date.isoformat() if entry.submission_date else "unknown date"
        number = entry.notification_number if entry.notification_number is not None else "?"
        note = f"NDI notification #{number} on file with FDA (submitted {submitted})"
        return NdiFinding(result=result, status=NdiStatus.NOTIFIED, note=note)
    if isinstance(entry, OdiEntry):
        note = (
            f"Dietary ingredient marketed before {DSHEA_CUTOFF}. "
            "No NDI notification required (grandfathered under DSHEA)."
        )
        return NdiFinding(result=result, status=NdiStatus.GRANDFATHERED, note=note)
    note = (
        "No NDI notification found and ingredient not recognized as a pre-1994 dietary "
        f"ingredient. If it was not marketed before {DSHEA_CUTOFF}, an NDI notification is "
        "required 75 days before marketing."
    )
    return NdiFinding(result=result, status=NdiStatus.NOTIFICATION_REQUIRED, note=note)


@dataclass(frozen=True, slots=True)
class AllergenDetection:
    category: str
    allergen_group: str | None
    ingredients: tuple[str, ...]
    confidence: Confidence


_CONFIDENCE_RANK = {Confidence.HIGH: 0, Confidence.MEDIUM: 1, Confidence.LOW: 2}


@dataclass(frozen=True, slots=True, kw_only=True)
class AllergenComplianceReport(ComplianceReport):
    """Allergen categories found in the ingredient list.

    Compliance here only covers how completely the ingredients could be resolved: a hit that
    rests on a single generic word needs manual review. Whether the label declares the
    detected allergens is decided by the orchestrator.
    """

    def is_compliant(self, result: MatchResult) -> bool:
        return not (result.matched and result.confidence is Confidence.LOW)

    @property
    def detections(self) -> tuple[AllergenDetection, ...]:
        ingredients: dict[str, list[str]] = {}
        entries: dict[str, AllergenEntry] = {}
        confidence: dict[str, Confidence] = {}
        for result in self.results:
            entry = result.entry
            if not isinstance(entry, AllergenEntry):
                continue
            category = entry.category
            entries.setdefault(category, entry)
            contributors = ingredients.setdefault(category, [])
            if result.raw not in contributors:
                contributors.append(result.raw)
            best = confidence.get(category)
            if best is None or _CONFIDENCE_RANK[result.confidence] < _CONFIDENCE_RANK[best]:
                confidence[category] = result.confidence
        return tuple(
            AllergenDetection(
                category=category,
                allergen_group=entries[category].allergen_group,
                ingredients=tuple(contributors),
                confidence=confidence[category],
            )
            for category, contributors in ingredients.items()
        )

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(detection.category for detection in self.detections)

    @property
    def ingredients_with_allergens(self) -> int:
        return sum(1 for result in self.results if result.matched)

    def confidence_counts(self) -> dict[Confidence, int]:
        counts = dict.fromkeys(Confidence, 0)
        for result in self.results:
            if result.matched:
                counts[result.confidence] += 1
        return counts


@dataclass(frozen=True, slots=True, kw_only=True)
class Escalation:
    kind: EscalationKind
    category: str
    ingredients: tuple[str, ...]
    message: str
    severity: Severity = Severity.CRITICAL


@dataclass(frozen=True, slots=True, kw_only=True)
class CheckerOutcome:
    checker: CheckerName
    status: CheckerStatus
    elapsed_seconds: float
    report: ComplianceReport | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is CheckerStatus.OK


@dataclass(frozen=True, slots=True, kw_only=True)
class AggregateComplianceResult:
    """Everything one compliance run produced, safe to hand to report assembly."""

    ingredients: tuple[str, ...]
    declared_allergen_statement: str | None
    outcomes: Mapping[CheckerName, CheckerOutcome]
    escalations: tuple[Escalation, ...] = field(default_factory=tuple)

    @property
    def gras(self) -> GrasComplianceReport | None:
        return _report_as(self.outcomes, CheckerName.GRAS, GrasComplianceReport)

    @property
    def ndi(self) -> NdiComplianceReport | None:
        return _report_as(self.outcomes, CheckerName.NDI, NdiComplianceReport)

    @property
    def allergens(self) -> AllergenComplianceReport | None:
        return _report_as(self.outcomes, CheckerName.ALLERGENS, AllergenComplianceReport)

    @property
    def statuses(self) -> dict[CheckerName, CheckerStatus]:
        return {name: outcome.status for name, outcome in self.outcomes.items()}

    @property
    def elapsed_seconds(self) -> dict[CheckerName, float]:
        return {name: outcome.elapsed_seconds for name, outcome in self.outcomes.items()}

    @property
    def failed_checkers(self) -> tuple[CheckerName, ...]:
        return tuple(name for name, outcome in self.outcomes.items() if not outcome.ok)

    @property
    def degraded(self) -> bool:
        return bool(self.failed_checkers)

    @property
    def warnings(self) -> tuple[str, ...]:
        collected: list[str] = []
        for outcome in self.outcomes.values():
            if outcome.report is None:
                continue
            collected.extend(w for w in outcome.report.warnings if w not in collected)
        return tuple(collected)


def _report_as[TReport: ComplianceReport](
    outcomes: Mapping[CheckerName, CheckerOutcome],
    name: CheckerName,
    report_type: type[TReport],
) -> TReport | None:
    outcome = outcomes.get(name)
    if outcome is None or not isinstance(outcome.report, report_type):
        return None
    return outcome.report
