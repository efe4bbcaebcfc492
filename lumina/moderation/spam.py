"""Cheap spam and placeholder detection. Runs before any other layer."""

from __future__ import annotations

import re

_REPEATED_CHAR = re.compile(r"(.)\1{10,}")

_SHOUTING_MIN_LENGTH = 20

_PLACEHOLDER_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"^(test|testing|asdf|qwer|hello|hi)\s*$", re.IGNORECASE),
    re.compile(r"^[a-z]\s*$", re.IGNORECASE),
    re.compile(r"^[0-9]+$"),
]


def is_likely_spam(text: str) -> bool:
    """Return True for degenerate input: repeated characters, shouting, test strings."""
    trimmed = (text or "").strip()

    if _REPEATED_CHAR.search(trimmed):
        return True

    if len(trimmed) > _SHOUTING_MIN_LENGTH and trimmed == trimmed.upper():
        return True

    return any(p.match(trimmed) for p in _PLACEHOLDER_PATTERNS)
