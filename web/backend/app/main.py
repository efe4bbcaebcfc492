"""FastAPI application for the Lumina Journal backend.

Provides REST API endpoints wrapping the Lumina Python package for:
- Moderated journal entry submission with LLM analysis
- Entry history and mood insights
- Standalone moderation checks

Run with ``uvicorn web.backend.app.main:create_app --factory``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lumina import __version__
from lumina.auth.store import UserStore
from lumina.journal.analysis import EntryAnalyzer
from lumina.journal.store import EntryStore
from lumina.llm.client import LLMClient
from lumina.moderation.gate import ModerationGate
from lumina.moderation.remote import RemoteModerator
from lumina.moderation.rules import default_rules, load_rules
from web.backend.app.routers import journal, moderation

log = logging.getLogger("lumina")


def create_app(
    *,
    llm_client: Optional[LLMClient] = None,
    remote: Optional[RemoteModerator] = None,
    gate: Optional[ModerationGate] = None,
    analyzer: Optional[EntryAnalyzer] = None,
    entry_store: Optional[EntryStore] = None,
    user_store: Optional[UserStore] = None,
    rules_path: Optional[str | Path] = None,
) -> FastAPI:
    """Build the app and its collaborators.

    Every collaborator is constructed once here and kept on ``app.state``;
    pass instances to override them (tests do).
    """
    logging.basicConfig(
        level=os.environ.get("LUMINA_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Lumina Journal API",
        description=(
            "REST API for Lumina Journal. Entries pass a layered moderation "
            "gate before they are analyzed by an LLM and saved."
        ),
        version=__version__,
    )

    # -----------------------------------------------------------------------
    # Collaborators
    # -----------------------------------------------------------------------
    if gate is None:
        rules = load_rules(rules_path) if rules_path else default_rules()
        gate = ModerationGate(remote=remote or RemoteModerator(), rules=rules)
    app.state.gate = gate
    app.state.analyzer = analyzer or EntryAnalyzer(llm_client or LLMClient())
    app.state.entry_store = entry_store or EntryStore()
    app.state.user_store = user_store or UserStore()

    if gate.remote is None or not gate.remote.configured:
        log.warning("Remote moderation disabled: OPENAI_API_KEY is not set")

    # -----------------------------------------------------------------------
    # CORS middleware (allow all origins for development)
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = first.get("msg", "Invalid request")
        return JSONResponse(
            status_code=422,
            content={"error": f"{field}: {message}" if field else message},
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        log.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # -----------------------------------------------------------------------
    # Include routers
    # -----------------------------------------------------------------------
    app.include_router(journal.router)
    app.include_router(moderation.router)

    # -----------------------------------------------------------------------
    # Root and health-check endpoints
    # -----------------------------------------------------------------------

    @app.get("/", tags=["meta"])
    async def root():
        """Return basic API information."""
        return {
            "name": "Lumina Journal API",
            "version": __version__,
            "docs": "/docs",
            "openapi": "/openapi.json",
        }

    @app.get("/health", tags=["meta"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
