"""Canonicalisation of free-text ingredient names.

The transformation is ordered and pure:

1. lowercase
2. collapse whitespace runs
3. strip parenthetical content (``"whey (milk)"`` -> ``"whey"``)
4. truncate at the first comma or semicolon (trailing qualifiers)
5. strip stereoisomer prefixes (``d-``, ``l-``, ``dl-``) in front of a word (``"vitamin d-3"``
   keeps its ``d-``)
6. strip trailing percentage tokens (``"caffeine 2.5%"``)
7. trim

Applying it to its own output returns the same string.
"""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_PARENTHETICAL_RE = re.compile(r"\s*\([^)]*\)")
_QUALIFIER_RE = re.compile(r"[,;].*$", re.DOTALL)
_STEREOISOMER_RE = re.compile(r"\b(?:dl|d|l)-(?=[^\W\d_])", re.IGNORECASE)
_TRAILING_PERCENT_RE = re.compile(r"(?:\s+\d+(?:\.\d+)?\s*%)+\s*$")


def normalize_ingredient_name(value: str | None) -> str:
    """Return the canonical matching form of an ingredient name ("" for blank input)."""

    if not value:
        return ""
    text = value.lower()
    text = _collapse_whitespace(text)
    text = _PARENTHETICAL_RE.sub("", text)
    text = _QUALIFIER_RE.sub("", text).strip()
    text = _STEREOISOMER_RE.sub("", text)
    text = _TRAILING_PERCENT_RE.sub("", text)
    return _collapse_whitespace(text)


def trailing_phrases(normalized: str) -> tuple[str, ...]:
    """Candidate phrases from the last word leftwards, most specific trailing phrase first.

    ``"ground roasted coffee"`` -> ``("coffee", "roasted coffee", "ground roasted coffee")``
    """

    words = normalized.split()
    return tuple(" ".join(words[index:]) for index in range(len(words) - 1, -1, -1))


def _collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()
