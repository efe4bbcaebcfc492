"""Pydantic models for API request/response serialization.

These models mirror the Lumina dataclasses and provide proper JSON
serialization for the FastAPI endpoints.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    error: str
    category: Optional[str] = None


# ---------------------------------------------------------------------------
# Journal submission
# ---------------------------------------------------------------------------


class RecentEntryPayload(BaseModel):
    """A prior entry sent by the client as context. Only ``sentiment.themes`` is used."""

    model_config = ConfigDict(extra="allow")

    content: str = ""
    sentiment: Optional[dict[str, Any]] = None


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str
    recent_entries: Optional[list[RecentEntryPayload]] = Field(
        default=None, alias="recentEntries"
    )


class SentimentPayload(BaseModel):
    """Mirrors lumina.journal.models.SentimentScore."""

    score: float
    label: str


class AnalysisPayload(BaseModel):
    """Mirrors lumina.journal.models.EntryAnalysis."""

    sentiment: SentimentPayload
    themes: list[str] = Field(default_factory=list)
    emotions: list[str] = Field(default_factory=list)


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    analysis: AnalysisPayload
    follow_up_prompt: str = Field(alias="followUpPrompt")


# ---------------------------------------------------------------------------
# Moderation
# ---------------------------------------------------------------------------


class ModerationCheckRequest(BaseModel):
    content: str


class ModerationCheckResponse(BaseModel):
    """Mirrors lumina.moderation.models.ModerationVerdict."""

    appropriate: bool
    reason: Optional[str] = None
    category: Optional[str] = None


# ---------------------------------------------------------------------------
# Entries & insights
# ---------------------------------------------------------------------------


class EntryResponse(BaseModel):
    """Mirrors lumina.journal.models.JournalEntry."""

    id: str
    content: str
    sentiment: dict[str, Any] = Field(default_factory=dict)
    created_at: str = ""


class MoodPointResponse(BaseModel):
    created_at: str
    mood_score: int
    sentiment_label: str


class ThemeCountResponse(BaseModel):
    theme: str
    count: int


class InsightsResponse(BaseModel):
    mood_series: list[MoodPointResponse] = Field(default_factory=list)
    top_themes: list[ThemeCountResponse] = Field(default_factory=list)
