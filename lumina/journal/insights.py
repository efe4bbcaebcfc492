"""Mood trend and theme aggregation over stored entries."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from lumina.journal.models import JournalEntry

NEUTRAL_MOOD = 5


@dataclass
class MoodPoint:
    """One point on the mood chart."""

    created_at: str
    mood_score: int
    sentiment_label: str


def mood_score(entry: JournalEntry) -> int:
    """Map a sentiment score in [-1, 1] onto a 0-10 mood scale.

    Entries without a score (or with exactly 0) sit at the neutral midpoint.
    Halves round up.
    """
    score = entry.sentiment_score
    if not score:
        return NEUTRAL_MOOD
    return int(math.floor((score + 1) * 5 + 0.5))


def mood_series(entries: Iterable[JournalEntry]) -> list[MoodPoint]:
    """Chronological mood points for charting."""
    return [
        MoodPoint(
            created_at=e.created_at,
            mood_score=mood_score(e),
            sentiment_label=e.sentiment_label,
        )
        for e in sorted(entries, key=lambda e: e.created_at)
    ]


def top_themes(entries: Iterable[JournalEntry], limit: int = 5) -> list[tuple[str, int]]:
    """Most frequent themes, highest count first; ties keep first-seen order."""
    counts: Counter[str] = Counter()
    for entry in entries:
        counts.update(entry.themes)
    return counts.most_common(limit)
