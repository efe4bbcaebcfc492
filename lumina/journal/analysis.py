"""LLM-backed entry analysis and follow-up question generation.

Both calls happen only after the moderation gate accepted an entry. Errors
here are fatal to the request: nothing is persisted when either call fails.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Mapping

from lumina.journal.models import SENTIMENT_LABELS, EntryAnalysis, SentimentScore
from lumina.llm.client import LLMClient
from lumina.llm.prompts import (
    ANALYSIS_PROMPT,
    ANALYSIS_TEMPERATURE,
    FOLLOW_UP_PROMPT,
    FOLLOW_UP_TEMPERATURE,
)

log = logging.getLogger(__name__)


class AnalysisError(RuntimeError):
    """The LLM could not produce a usable analysis or follow-up."""


def _strip_fences(content: str) -> str:
    content = content.strip()
    if content.startswith("```"):
        content = content.strip("`").strip()
        if content.lower().startswith("json"):
            content = content[4:].strip()
    return content


def _string_list(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise AnalysisError(f"Analysis field '{field_name}' must be a list")
    return [str(v) for v in value if v is not None and str(v).strip()]


def parse_analysis(content: str) -> EntryAnalysis:
    """Parse the model's JSON reply into an :class:`EntryAnalysis`.

    The score is clamped to [-1, 1]; an unknown label or a missing
    ``sentiment`` object is an error.
    """
    try:
        data = json.loads(_strip_fences(content))
    except json.JSONDecodeError as exc:
        raise AnalysisError(f"Analysis response is not valid JSON: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("sentiment"), dict):
        raise AnalysisError("Analysis response is missing the 'sentiment' object")

    sentiment = data["sentiment"]
    score = sentiment.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise AnalysisError("Sentiment score must be a number")
    label = str(sentiment.get("label", "")).strip().lower()
    if label not in SENTIMENT_LABELS:
        raise AnalysisError(f"Unknown sentiment label: {label!r}")

    return EntryAnalysis(
        sentiment=SentimentScore(score=max(-1.0, min(1.0, float(score))), label=label),
        themes=_string_list(data.get("themes"), "themes"),
        emotions=_string_list(data.get("emotions"), "emotions"),
    )


def collect_recent_themes(recent_entries: Iterable[Mapping[str, Any]] | None) -> str:
    """Flatten the themes of recent entries into the prompt's context line.

    A bare string counts as a single theme; any other non-list value is skipped.
    """
    themes: list[str] = []
    for entry in recent_entries or []:
        sentiment = entry.get("sentiment")
        if not isinstance(sentiment, Mapping):
            continue
        raw = sentiment.get("themes")
        if isinstance(raw, str):
            raw = [raw]
        elif not isinstance(raw, (list, tuple)):
            continue
        for theme in raw:
            if isinstance(theme, str) and theme.strip():
                themes.append(theme.strip())
    return ", ".join(themes) or "none"


class EntryAnalyzer:
    """Runs the two LLM prompts for an accepted entry."""

    def __init__(self, client: LLMClient) -> None:
        self._client = client

    def _require_configured(self) -> None:
        if not self._client.configured:
            raise AnalysisError("LLM not configured. Set ANTHROPIC_API_KEY.")

    async def analyze(self, content: str) -> EntryAnalysis:
        """Extract sentiment, themes and emotions as strict JSON."""
        self._require_configured()
        resp = await self._client.acomplete(
            ANALYSIS_PROMPT.format(content=content),
            temperature=ANALYSIS_TEMPERATURE,
        )
        log.debug("Analysis call: %d tokens in %d ms", resp.total_tokens, resp.latency_ms)
        return parse_analysis(resp.content)

    async def follow_up(
        self,
        content: str,
        recent_entries: Iterable[Mapping[str, Any]] | None = None,
    ) -> str:
        """Generate one empathetic follow-up question as plain text."""
        self._require_configured()
        prompt = FOLLOW_UP_PROMPT.format(
            content=content,
            recent_themes=collect_recent_themes(recent_entries),
        )
        resp = await self._client.acomplete(prompt, temperature=FOLLOW_UP_TEMPERATURE)
        question = resp.content.strip()
        if not question:
            raise AnalysisError("Follow-up response was empty")
        return question
