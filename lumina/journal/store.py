"""File-based journal entry store.

Stores entries as JSONL files, one per author, named ``{user_id}.jsonl``
under ``~/.lumina/entries/`` (or ``$LUMINA_DATA_DIR/entries``).
"""

from __future__ import annotations

import json
import os
import re
import uuid
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

from lumina.journal.models import JournalEntry


def _safe_filename(name: str) -> str:
    """Sanitise a name for use as part of a filename."""
    return re.sub(r"[^\w\-.]", "_", name)


def _default_base() -> Path:
    root = os.environ.get("LUMINA_DATA_DIR")
    return (Path(root) if root else Path.home() / ".lumina") / "entries"


class EntryStore:
    """JSONL-backed store for journal entries."""

    def __init__(self, base_dir: str | Path | None = None) -> None:
        self._base = Path(base_dir) if base_dir else _default_base()
        self._base.mkdir(parents=True, exist_ok=True)

    # -- helpers -------------------------------------------------------------

    def _file_for(self, user_id: str) -> Path:
        return self._base / f"{_safe_filename(user_id)}.jsonl"

    def _read_file(self, path: Path) -> list[JournalEntry]:
        entries: list[JournalEntry] = []
        if not path.exists():
            return entries
        for line in path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                entries.append(JournalEntry(**json.loads(line)))
            except (json.JSONDecodeError, TypeError):
                continue
        return entries

    # -- public API ----------------------------------------------------------

    def add_entry(self, user_id: str, content: str, sentiment: dict[str, Any]) -> JournalEntry:
        """Persist an accepted entry together with its analysis and return it."""
        entry = JournalEntry(
            id=str(uuid.uuid4()),
            user_id=user_id,
            content=content,
            sentiment=sentiment,
        )
        with self._file_for(user_id).open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(asdict(entry)) + "\n")
        return entry

    def list_entries(
        self,
        user_id: str,
        limit: Optional[int] = None,
        newest_first: bool = True,
    ) -> list[JournalEntry]:
        """Return an author's entries ordered by creation time.

        Entries with identical timestamps keep their write order.
        """
        ordered = sorted(
            enumerate(self._read_file(self._file_for(user_id))),
            key=lambda pair: (pair[1].created_at, pair[0]),
            reverse=newest_first,
        )
        entries = [entry for _, entry in ordered]
        if limit is not None:
            entries = entries[:limit]
        return entries

    def recent_entries(self, user_id: str, limit: int = 5) -> list[JournalEntry]:
        return self.list_entries(user_id, limit=limit)

    def get_entry(self, user_id: str, entry_id: str) -> Optional[JournalEntry]:
        for entry in self._read_file(self._file_for(user_id)):
            if entry.id == entry_id:
                return entry
        return None
