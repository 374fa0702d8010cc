"""Plain-data export of compliance results for downstream report assembly."""

from __future__ import annotations

from functools import singledispatch
from typing import Any

from labelcheck.domain.model import (
    AggregateComplianceResult,
    AllergenComplianceReport,
    AllergenDetection,
    CheckerOutcome,
    ComplianceReport,
    Escalation,
    GrasComplianceReport,
    MatchResult,
    NdiComplianceReport,
    NdiFinding,
    ReferenceEntry,
)
from labelcheck.domain.reference_cache import DatasetCacheStats

type Payload = dict[str, Any]


@singledispatch
def to_payload(value: object) -> Any:
    msg = f"Cannot serialise {type(value).__name__}"
    raise TypeError(msg)


@to_payload.register
def _(value: ReferenceEntry) -> Payload:
    return {
        "dataset": str(value.dataset),
        "id": value.entry_id,
        "canonical_name": value.canonical_name,
        "status": value.status,
        "source_citation": value.source_citation,
    }


@to_payload.register
def _(value: MatchResult) -> Payload:
    return {
        "ingredient": value.raw,
        "normalized": value.normalized,
        "tier": str(value.tier),
        "confidence": str(value.confidence),
        "entry": to_payload(value.entry) if value.entry is not None else None,
    }


def _report_base(report: ComplianceReport) -> Payload:
    return {
        "dataset": report.dataset,
        "total_ingredients": report.total_ingredients,
        "compliant_count": report.compliant_count,
        "non_compliant_count": report.non_compliant_count,
        "overall_compliant": report.overall_compliant,
        "results": [to_payload(result) for result in report.results],
        "warnings": list(report.warnings),
    }


@to_payload.register
def _(value: ComplianceReport) -> Payload:
    return _report_base(value)


@to_payload.register
def _(value: GrasComplianceReport) -> Payload:
    payload = _report_base(value)
    payload["gras_ingredients"] = list(value.gras_ingredients)
    payload["non_gras_ingredients"] = list(value.non_gras_ingredients)
    payload["critical_issues"] = list(value.critical_issues)
    return payload


@to_payload.register
def _(value: NdiFinding) -> Payload:
    return {
        "ingredient": value.result.raw,
        "status": str(value.status),
        "requires_notification": value.requires_notification,
        "note": value.note,
    }


@to_payload.register
def _(value: NdiComplianceReport) -> Payload:
    payload = _report_base(value)
    payload["findings"] = [to_payload(finding) for finding in value.findings]
    payload["summary"] = {
        "with_notification": value.notified_count,
        "grandfathered": value.grandfathered_count,
        "notification_required": len(value.notification_required),
    }
    return payload


@to_payload.register
def _(value: AllergenDetection) -> Payload:
    return {
        "category": value.category,
        "allergen_group": value.allergen_group,
        "ingredients": list(value.ingredients),
        "confidence": str(value.confidence),
    }


@to_payload.register
def _(value: AllergenComplianceReport) -> Payload:
    payload = _report_base(value)
    payload["detections"] = [to_payload(detection) for detection in value.detections]
    payload["summary"] = {
        "categories": list(value.categories),
        "ingredients_with_allergens": value.ingredients_with_allergens,
        "confidence": {
            str(level): count for level, count in value.confidence_counts().items()
        },
    }
    return payload


@to_payload.register
def _(value: Escalation) -> Payload:
    return {
        "kind": str(value.kind),
        "severity": str(value.severity),
        "category": value.category,
        "ingredients": list(value.ingredients),
        "message": value.message,
    }


@to_payload.register
def _(value: CheckerOutcome) -> Payload:
    return {
        "status": str(value.status),
        "elapsed_seconds": value.elapsed_seconds,
        "error": value.error,
        "report": to_payload(value.report) if value.report is not None else None,
    }


@to_payload.register
def _(value: AggregateComplianceResult) -> Payload:
    return {
        "ingredients": list(value.ingredients),
        "declared_allergen_statement": value.declared_allergen_statement,
        "degraded": value.degraded,
        "failed_checkers": [str(name) for name in value.failed_checkers],
        "checkers": {str(name): to_payload(outcome) for name, outcome in value.outcomes.items()},
        "escalations": [to_payload(escalation) for escalation in value.escalations],
        "warnings": list(value.warnings),
    }


@to_payload.register
def _(value: DatasetCacheStats) -> Payload:
    return {
        "dataset": str(value.dataset),
        "count": value.count,
        "loaded_at": value.loaded_at.isoformat(),
        "age_seconds": value.age.total_seconds(),
        "expires_in_seconds": value.expires_in.total_seconds(),
        "is_valid": value.is_valid,
        "last_error": value.last_error,
    }
