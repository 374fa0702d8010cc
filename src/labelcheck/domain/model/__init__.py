"""Public domain model surface."""

from __future__ import annotations

from labelcheck.domain.model.entries import (
    ENTRY_TYPE_BY_DATASET,
    AllergenEntry,
    AnyReferenceEntry,
    GrasEntry,
    NdiEntry,
    OdiEntry,
    ReferenceEntry,
)
from labelcheck.domain.model.enums import (
    CheckerName,
    CheckerStatus,
    Confidence,
    DatasetName,
    EscalationKind,
    GrasStatus,
    MatchTier,
    NdiStatus,
    Severity,
)
from labelcheck.domain.model.results import (
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
)
from labelcheck.domain.model.snapshot import DatasetSnapshot

__all__ = [  # noqa: RUF022
    # entries
    "ReferenceEntry",
    "GrasEntry",
    "NdiEntry",
    "OdiEntry",
    "AllergenEntry",
    "AnyReferenceEntry",
    "ENTRY_TYPE_BY_DATASET",
    # snapshot
    "DatasetSnapshot",
    # results
    "MatchResult",
    "ComplianceReport",
    "GrasComplianceReport",
    "NdiComplianceReport",
    "NdiFinding",
    "AllergenComplianceReport",
    "AllergenDetection",
    "CheckerOutcome",
    "Escalation",
    "AggregateComplianceResult",
    # enums
    "CheckerName",
    "CheckerStatus",
    "Confidence",
    "DatasetName",
    "EscalationKind",
    "GrasStatus",
    "MatchTier",
    "NdiStatus",
    "Severity",
]
