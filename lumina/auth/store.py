"""File-based JSON storage for auth data.

Provides a DB-ready interface backed by simple JSON files under
``~/.lumina/auth/`` (or ``$LUMINA_DATA_DIR/auth``).
"""

from __future__ import annotations

import hashlib
import json
import os
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from lumina.auth.models import Session, User


class UserStore:
    """File-based storage for users and sessions.

    Storage path: ``~/.lumina/auth/`` with:
    - ``users.json`` -- list of user dicts
    - ``sessions.json`` -- list of session dicts (token hashes only)
    """

    def __init__(self, base_dir: Optional[str | Path] = None) -> None:
        if base_dir is None:
            root = os.environ.get("LUMINA_DATA_DIR")
            self._base = (Path(root) if root else Path.home() / ".lumina") / "auth"
        else:
            self._base = Path(base_dir)
        self._base.mkdir(parents=True, exist_ok=True)
        self._users_path = self._base / "users.json"
        self._sessions_path = self._base / "sessions.json"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_json(self, path: Path) -> list[dict]:
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text())
            return data if isinstance(data, list) else []
        except (json.JSONDecodeError, OSError):
            return []

    def _write_json(self, path: Path, data: list[dict]) -> None:
        path.write_text(json.dumps(data, indent=2, default=str))

    @staticmethod
    def _hash_token(raw_token: str) -> str:
        return hashlib.sha256(raw_token.encode()).hexdigest()

    @staticmethod
    def _user_from_dict(d: dict) -> User:
        return User(
            id=d["id"],
            username=d["username"],
            display_name=d.get("display_name", ""),
            created_at=d.get("created_at", ""),
        )

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(self, username: str, display_name: str = "") -> User:
        """Persist a new user. Usernames are unique (case-insensitive)."""
        if self.get_user_by_username(username) is not None:
            raise ValueError(f"User '{username}' already exists")
        user = User(id=str(uuid.uuid4()), username=username, display_name=display_name)
        users = self._read_json(self._users_path)
        users.append({
            "id": user.id,
            "username": user.username,
            "display_name": user.display_name,
            "created_at": user.created_at,
        })
        self._write_json(self._users_path, users)
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        for d in self._read_json(self._users_path):
            if d["id"] == user_id:
                return self._user_from_dict(d)
        return None

    def get_user_by_username(self, username: str) -> Optional[User]:
        for d in self._read_json(self._users_path):
            if d.get("username", "").lower() == username.lower():
                return self._user_from_dict(d)
        return None

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def create_session(self, user_id: str, expires_in_hours: int = 24 * 7) -> Session:
        """Create a new session. The raw token is only available on the result."""
        now = datetime.now(timezone.utc)
        session = Session(
            id=str(uuid.uuid4()),
            user_id=user_id,
            token=secrets.token_urlsafe(48),
            created_at=now.isoformat(),
            expires_at=(now + timedelta(hours=expires_in_hours)).isoformat(),
        )

        sessions = self._read_json(self._sessions_path)
        sessions.append({
            "id": session.id,
            "user_id": session.user_id,
            "token_hash": self._hash_token(session.token),
            "created_at": session.created_at,
            "expires_at": session.expires_at,
        })
        self._write_json(self._sessions_path, sessions)
        return session

    def validate_session(self, token: str) -> Optional[User]:
        """Validate a session token and return the associated user, or None."""
        token_hash = self._hash_token(token)
        now = datetime.now(timezone.utc).isoformat()
        for d in self._read_json(self._sessions_path):
            if d.get("token_hash") == token_hash:
                if d.get("expires_at") and d["expires_at"] < now:
                    # Expired -- clean it up
                    self.delete_session(token)
                    return None
                return self.get_user(d["user_id"])
        return None

    def delete_session(self, token: str) -> bool:
        token_hash = self._hash_token(token)
        sessions = self._read_json(self._sessions_path)
        original_len = len(sessions)
        sessions = [d for d in sessions if d.get("token_hash") != token_hash]
        if len(sessions) < original_len:
            self._write_json(self._sessions_path, sessions)
            return True
        return False
