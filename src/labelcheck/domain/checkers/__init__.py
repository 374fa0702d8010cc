"""Compliance checkers, one per regulatory classification."""

from __future__ import annotations

from .allergens import KNOWN_NON_ALLERGENS, AllergenChecker
from .base import ComplianceChecker
from .gras import GRASChecker
from .ndi import NDIChecker

__all__ = [
    "KNOWN_NON_ALLERGENS",
    "AllergenChecker",
    "ComplianceChecker",
    "GRASChecker",
    "NDIChecker",
]
