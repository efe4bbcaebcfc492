"""Tests for LLM entry analysis and follow-up generation."""

import asyncio
import json

import pytest

from lumina.journal.analysis import (
    AnalysisError,
    EntryAnalyzer,
    collect_recent_themes,
    parse_analysis,
)
from lumina.llm.client import LLMResponse

VALID = json.dumps({
    "sentiment": {"score": 0.6, "label": "positive"},
    "themes": ["gratitude", "friendship"],
    "emotions": ["joy"],
})


class _FakeLLM:
    def __init__(self, replies, configured=True):
        self.replies = list(replies)
        self.configured = configured
        self.prompts: list[tuple[str, float]] = []

    async def acomplete(self, prompt, system_prompt=None, max_tokens=1024, temperature=0.3):
        self.prompts.append((prompt, temperature))
        return LLMResponse(content=self.replies.pop(0), model="fake")


# --- Parsing ---


def test_parse_valid_analysis():
    analysis = parse_analysis(VALID)
    assert analysis.sentiment.score == 0.6
    assert analysis.sentiment.label == "positive"
    assert analysis.themes == ["gratitude", "friendship"]
    assert analysis.emotions == ["joy"]
    assert analysis.to_dict()["sentiment"] == {"score": 0.6, "label": "positive"}


def test_parse_fenced_json():
    analysis = parse_analysis(f"```json\n{VALID}\n```")
    assert analysis.sentiment.label == "positive"


def test_parse_normalizes_label_and_clamps_score():
    analysis = parse_analysis('{"sentiment": {"score": 1.7, "label": "Negative"}}')
    assert analysis.sentiment.score == 1.0
    assert analysis.sentiment.label == "negative"
    assert analysis.themes == []
    assert analysis.emotions == []


def test_parse_invalid_json():
    with pytest.raises(AnalysisError, match="not valid JSON"):
        parse_analysis("I think this entry is positive!")


def test_parse_missing_sentiment():
    with pytest.raises(AnalysisError):
        parse_analysis('{"themes": ["work"]}')


def test_parse_unknown_label():
    with pytest.raises(AnalysisError, match="label"):
        parse_analysis('{"sentiment": {"score": 0.1, "label": "meh"}}')


def test_parse_non_numeric_score():
    with pytest.raises(AnalysisError):
        parse_analysis('{"sentiment": {"score": "high", "label": "positive"}}')


def test_parse_themes_must_be_list():
    with pytest.raises(AnalysisError, match="themes"):
        parse_analysis('{"sentiment": {"score": 0, "label": "neutral"}, "themes": "work"}')


# --- Recent themes ---


def test_collect_recent_themes():
    recent = [
        {"sentiment": {"themes": ["work", "sleep"]}},
        {"sentiment": None},
        {"content": "no analysis"},
        {"sentiment": {"themes": ["family"]}},
    ]
    assert collect_recent_themes(recent) == "work, sleep, family"


def test_collect_recent_themes_odd_shapes():
    recent = [
        {"sentiment": {"themes": "work"}},
        {"sentiment": {"themes": 42}},
        {"sentiment": {"themes": {"sleep": True}}},
        {"sentiment": "positive"},
        {"sentiment": {"themes": ["family", 7]}},
    ]
    assert collect_recent_themes(recent) == "work, family"


def test_collect_recent_themes_empty():
    assert collect_recent_themes(None) == "none"
    assert collect_recent_themes([]) == "none"


# --- Analyzer ---


def test_analyze_uses_low_temperature():
    llm = _FakeLLM([VALID])
    analysis = asyncio.run(EntryAnalyzer(llm).analyze("A good day with friends."))
    assert analysis.sentiment.label == "positive"
    prompt, temperature = llm.prompts[0]
    assert '"A good day with friends."' in prompt
    assert temperature == 0.3


def test_follow_up_includes_recent_themes():
    llm = _FakeLLM(["  What made the walk feel different today?  "])
    question = asyncio.run(
        EntryAnalyzer(llm).follow_up(
            "I went for a long walk.",
            [{"sentiment": {"themes": ["exercise", "solitude"]}}],
        )
    )
    assert question == "What made the walk feel different today?"
    prompt, temperature = llm.prompts[0]
    assert "Recent themes: exercise, solitude" in prompt
    assert temperature == 0.7


def test_follow_up_empty_reply_raises():
    llm = _FakeLLM(["   "])
    with pytest.raises(AnalysisError):
        asyncio.run(EntryAnalyzer(llm).follow_up("I went for a long walk."))


def test_unconfigured_client_raises():
    llm = _FakeLLM([], configured=False)
    with pytest.raises(AnalysisError, match="not configured"):
        asyncio.run(EntryAnalyzer(llm).analyze("A good day with friends."))
    assert llm.prompts == []
