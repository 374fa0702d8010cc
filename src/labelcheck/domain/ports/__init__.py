"""Domain port definitions for adapters."""

from __future__ import annotations

from .reference_store import ReferenceStore

__all__ = ["ReferenceStore"]
