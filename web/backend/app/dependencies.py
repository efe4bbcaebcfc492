"""Accessors for the collaborators built once in :func:`create_app`."""

from __future__ import annotations

from fastapi import Request

from lumina.journal.analysis import EntryAnalyzer
from lumina.journal.store import EntryStore
from lumina.moderation.gate import ModerationGate


def get_gate(request: Request) -> ModerationGate:
    return request.app.state.gate


def get_analyzer(request: Request) -> EntryAnalyzer:
    return request.app.state.analyzer


def get_entry_store(request: Request) -> EntryStore:
    return request.app.state.entry_store
