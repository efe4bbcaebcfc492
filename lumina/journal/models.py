"""Journal domain models: entries and their LLM analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

SENTIMENT_LABELS = ("positive", "neutral", "negative")


@dataclass
class SentimentScore:
    """Overall sentiment of an entry. ``score`` lies in [-1, 1]."""

    score: float = 0.0
    label: str = "neutral"


@dataclass
class EntryAnalysis:
    """Sentiment, themes and emotions extracted from one entry."""

    sentiment: SentimentScore = field(default_factory=SentimentScore)
    themes: list[str] = field(default_factory=list)
    emotions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sentiment": {"score": self.sentiment.score, "label": self.sentiment.label},
            "themes": list(self.themes),
            "emotions": list(self.emotions),
        }


@dataclass
class JournalEntry:
    """A persisted entry. Moderation outcomes are never stored, only the analysis."""

    id: str
    user_id: str
    content: str
    sentiment: dict[str, Any] = field(default_factory=dict)
    created_at: str = ""

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc).isoformat()

    @property
    def themes(self) -> list[str]:
        themes = (self.sentiment or {}).get("themes") or []
        return [t for t in themes if isinstance(t, str)]

    @property
    def sentiment_score(self) -> float | None:
        score = ((self.sentiment or {}).get("sentiment") or {}).get("score")
        return float(score) if isinstance(score, (int, float)) else None

    @property
    def sentiment_label(self) -> str:
        label = ((self.sentiment or {}).get("sentiment") or {}).get("label")
        return label or "neutral"
