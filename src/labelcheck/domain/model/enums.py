"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class DatasetName(StrEnum):
    """Reference datasets, valued by their backing table name."""

    GRAS = "gras_ingredients"
    NDI = "ndi_ingredients"
    ODI = "old_dietary_ingredients"
    ALLERGENS = "major_allergens"


class GrasStatus(StrEnum):
    AFFIRMED = "affirmed"
    NOTICE = "notice"
    SCOGS = "scogs"
    PENDING = "pending"


class MatchTier(StrEnum):
    EXACT = "exact"
    SYNONYM = "synonym"
    FUZZY = "fuzzy"
    NONE = "none"


class Confidence(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CheckerName(StrEnum):
    GRAS = "gras"
    NDI = "ndi"
    ALLERGENS = "allergens"


class CheckerStatus(StrEnum):
    OK = "ok"
    FAILED = "failed"


class NdiStatus(StrEnum):
    NOTIFIED = "notified"
    GRANDFATHERED = "grandfathered"
    NOTIFICATION_REQUIRED = "notification_required"


class EscalationKind(StrEnum):
    UNDECLARED_ALLERGEN = "undeclared_allergen"


class Severity(StrEnum):
    CRITICAL = "critical"
