"""Journal entries, their LLM analysis, storage and insights."""

from lumina.journal.analysis import AnalysisError, EntryAnalyzer, parse_analysis
from lumina.journal.insights import MoodPoint, mood_series, top_themes
from lumina.journal.models import EntryAnalysis, JournalEntry, SentimentScore
from lumina.journal.store import EntryStore

__all__ = [
    "AnalysisError",
    "EntryAnalysis",
    "EntryAnalyzer",
    "EntryStore",
    "JournalEntry",
    "MoodPoint",
    "SentimentScore",
    "mood_series",
    "parse_analysis",
    "top_themes",
]
