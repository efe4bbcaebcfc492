"""Auth middleware -- FastAPI dependency for extracting the current user.

Authenticates with an ``Authorization: Bearer <session_token>`` header
against the :class:`~lumina.auth.store.UserStore` on ``app.state``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Header, HTTPException, Request, status

from lumina.auth.models import User
from lumina.auth.store import UserStore


def get_user_store(request: Request) -> UserStore:
    """Return the UserStore built at application startup."""
    return request.app.state.user_store


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> User:
    """FastAPI dependency that extracts and validates the current user.

    Raises ``401 Unauthorized`` if no valid session token is provided.
    """
    store = get_user_store(request)

    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token:
            user = store.validate_session(token.strip())
            if user is not None:
                return user

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )
