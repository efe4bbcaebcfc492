"""Moderation router -- pre-check a draft without analyzing or saving it."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from lumina.auth.models import User
from lumina.moderation.gate import ModerationGate
from web.backend.app.dependencies import get_gate
from web.backend.app.middleware.auth import get_current_user
from web.backend.app.models.api import ModerationCheckRequest, ModerationCheckResponse

router = APIRouter(prefix="/api/moderation", tags=["moderation"])


@router.post("/check", response_model=ModerationCheckResponse, summary="Run the moderation gate")
async def check_content(
    request: ModerationCheckRequest,
    user: User = Depends(get_current_user),
    gate: ModerationGate = Depends(get_gate),
):
    """Return the gate's verdict for a draft entry."""
    verdict = await gate.evaluate(request.content)
    return ModerationCheckResponse(**verdict.to_dict())
