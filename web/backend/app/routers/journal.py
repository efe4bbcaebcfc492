"""Journal router -- moderated entry submission, history and insights."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from lumina.auth.models import User
from lumina.journal.analysis import EntryAnalyzer
from lumina.journal.insights import mood_series, top_themes
from lumina.journal.store import EntryStore
from lumina.moderation.gate import ModerationGate
from web.backend.app.dependencies import get_analyzer, get_entry_store, get_gate
from web.backend.app.middleware.auth import get_current_user
from web.backend.app.models.api import (
    AnalysisPayload,
    AnalyzeRequest,
    AnalyzeResponse,
    EntryResponse,
    ErrorResponse,
    InsightsResponse,
    MoodPointResponse,
    ThemeCountResponse,
)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/journal", tags=["journal"])

RECENT_CONTEXT_SIZE = 5

_ANALYSIS_FAILED = "Failed to analyze entry"


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Moderate, analyze and save a journal entry",
)
async def analyze_entry(
    request: AnalyzeRequest,
    user: User = Depends(get_current_user),
    gate: ModerationGate = Depends(get_gate),
    analyzer: EntryAnalyzer = Depends(get_analyzer),
    store: EntryStore = Depends(get_entry_store),
):
    """Run the moderation gate, then the two LLM calls, then persist.

    A rejected entry returns 400 with the rejection reason and category.
    Any internal failure returns 500 and nothing is saved.
    """
    try:
        # 1. Content moderation
        verdict = await gate.evaluate(request.content)
        if not verdict.appropriate:
            return JSONResponse(
                status_code=400,
                content={
                    "error": verdict.reason,
                    "category": verdict.category.value if verdict.category else None,
                },
            )

        # 2. Context from recent entries
        if request.recent_entries is None:
            recent = [
                {"sentiment": e.sentiment}
                for e in store.recent_entries(user.id, limit=RECENT_CONTEXT_SIZE)
            ]
        else:
            recent = [e.model_dump() for e in request.recent_entries]

        # 3. Analysis, follow-up question, then persist
        analysis = await analyzer.analyze(request.content)
        follow_up = await analyzer.follow_up(request.content, recent)
        store.add_entry(user.id, request.content, analysis.to_dict())
    except Exception:
        log.exception("Analysis error for user %s", user.id)
        return JSONResponse(status_code=500, content={"error": _ANALYSIS_FAILED})

    return AnalyzeResponse(
        analysis=AnalysisPayload(**analysis.to_dict()),
        follow_up_prompt=follow_up,
    )


@router.get("/entries", response_model=list[EntryResponse], summary="List saved entries")
async def list_entries(
    limit: int = Query(50, ge=1, le=500),
    user: User = Depends(get_current_user),
    store: EntryStore = Depends(get_entry_store),
):
    """Return the current user's entries, newest first."""
    return [
        EntryResponse(id=e.id, content=e.content, sentiment=e.sentiment, created_at=e.created_at)
        for e in store.list_entries(user.id, limit=limit)
    ]


@router.get("/insights", response_model=InsightsResponse, summary="Mood trend and top themes")
async def insights(
    user: User = Depends(get_current_user),
    store: EntryStore = Depends(get_entry_store),
):
    """Aggregate the current user's entries into chart data."""
    entries = store.list_entries(user.id, newest_first=False)
    return InsightsResponse(
        mood_series=[
            MoodPointResponse(
                created_at=p.created_at,
                mood_score=p.mood_score,
                sentiment_label=p.sentiment_label,
            )
            for p in mood_series(entries)
        ],
        top_themes=[
            ThemeCountResponse(theme=theme, count=count)
            for theme, count in top_themes(entries)
        ],
    )
