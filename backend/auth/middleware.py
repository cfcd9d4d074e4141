# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Session authentication for protected routes.

Flow for one request (first failure wins)
----------------------------------------
1. Read the session cookie.  A cookie that fails verification is a server
   error; an absent cookie is simply an empty session.
2. No ``user_id`` in the session                  → 401
3. ``end_time`` in the past                        → 401 (same body as 2)
4. ``user_id`` no longer resolves to a user        → 401
5. Otherwise the user is attached to the request.

Every rejection also expires the session cookie on the client.  Expired and
anonymous sessions are deliberately indistinguishable from the outside.

Logout is not implemented: a session stays valid until ``end_time`` or until
its user is deleted.
"""

import enum
import time
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status

from auth.session import CookieSessionStore, Session
from core.config import settings
from core.errors import NotFoundError, SessionError, StorageError
from core.logger import logger
from models.user import User
from store.repository import UserRepository

NOT_AUTHENTICATED = "not authenticated"


class AuthState(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    SESSION_LOOKUP_FAILED = "session_lookup_failed"
    SESSION_MISSING_IDENTITY = "session_missing_identity"
    SESSION_EXPIRED = "session_expired"
    IDENTITY_NOT_FOUND = "identity_not_found"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class AuthResult:
    state: AuthState
    user: Optional[User] = None

    @property
    def authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED


@dataclass(frozen=True)
class AuthContext:
    """Request-scoped identity handed to protected handlers."""

    user: User


def now_ms() -> int:
    return int(time.time() * 1000)


def authenticate(
    request: Request,
    session_store: CookieSessionStore,
    repository: UserRepository,
    *,
    cookie_name: str,
    now: Optional[int] = None,
) -> AuthResult:
    """Run the session checks and return the terminal state."""
    try:
        session = session_store.get(request, cookie_name)
    except SessionError:
        return AuthResult(AuthState.SESSION_LOOKUP_FAILED)

    user_id = session.values.get("user_id")
    if user_id is None:
        return AuthResult(AuthState.SESSION_MISSING_IDENTITY)

    end_time = session.values.get("end_time")
    current = now_ms() if now is None else now
    if not isinstance(end_time, int) or current > end_time:
        return AuthResult(AuthState.SESSION_EXPIRED)

    try:
        user = repository.find_by_id(user_id)
    except (NotFoundError, StorageError):
        return AuthResult(AuthState.IDENTITY_NOT_FOUND)

    return AuthResult(AuthState.AUTHENTICATED, user)


def issue_session(
    request: Request,
    response: Response,
    session_store: CookieSessionStore,
    user: User,
    *,
    cookie_name: str,
    ttl_seconds: int,
    now: Optional[int] = None,
) -> Session:
    """
    Start a session for an already-verified *user* and write the cookie.

    ``SessionError`` propagates if an existing cookie is unreadable.
    """
    session = session_store.get(request, cookie_name)
    start = now_ms() if now is None else now
    session.values["user_id"] = user.id
    session.values["end_time"] = start + ttl_seconds * 1000
    session_store.save(request, response, session)
    return session


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------
# The concrete repository and session store are chosen in main.create_app
# and parked on app.state.


def get_repository(request: Request) -> UserRepository:
    return request.app.state.repository


def get_session_store(request: Request) -> CookieSessionStore:
    return request.app.state.session_store


def require_session(
    request: Request,
    repository: UserRepository = Depends(get_repository),
    session_store: CookieSessionStore = Depends(get_session_store),
) -> AuthContext:
    """
    Dependency: authenticate the request or abort it.

    Returns an :class:`AuthContext`; the user is also recorded on
    ``request.state.user``.
    """
    cookie_name = settings.session_cookie_name
    result = authenticate(request, session_store, repository, cookie_name=cookie_name)
    if result.authenticated:
        request.state.user = result.user
        return AuthContext(user=result.user)

    logger.info("auth rejected: %s %s | state=%s", request.method, request.url.path, result.state.value)
    headers = {"set-cookie": session_store.expired_cookie_header(cookie_name)}
    if result.state is AuthState.SESSION_LOOKUP_FAILED:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
            headers=headers,
        )
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=NOT_AUTHENTICATED,
        headers=headers,
    )
