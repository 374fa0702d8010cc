"""PostgREST adapter package."""

from __future__ import annotations

from .client import PostgrestReferenceStore

__all__ = ["PostgrestReferenceStore"]
