# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Session endpoint – login.

Security notes
--------------
* Login returns the *same* error whether the email doesn't exist or the
  password is wrong.  This prevents user-enumeration attacks.
* There is no logout endpoint.  Sessions end at ``end_time``.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from auth.middleware import get_repository, get_session_store, issue_session
from auth.schemas import LoginRequest, LoginResponse
from auth.session import CookieSessionStore
from core.config import settings
from core.errors import NotFoundError
from core.logger import logger
from store.repository import UserRepository

router = APIRouter(tags=["sessions"])

# Generic message used for both "no such email" and "wrong password"
_LOGIN_FAIL = "incorrect email or password"


# ---------------------------------------------------------------------------
# POST /sessions
# ---------------------------------------------------------------------------


@router.post("/sessions", response_model=LoginResponse)
def create_session(
    body: LoginRequest,
    request: Request,
    response: Response,
    repository: UserRepository = Depends(get_repository),
    session_store: CookieSessionStore = Depends(get_session_store),
):
    """Verify the credentials and set a signed session cookie."""
    try:
        user = repository.find_by_email(body.email)
    except NotFoundError:
        user = None

    # Unified failure path – no information leaks about whether the email exists
    if user is None or not user.verify_password(body.password):
        logger.info("login failed for %s", body.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=_LOGIN_FAIL)

    issue_session(
        request,
        response,
        session_store,
        user,
        cookie_name=settings.session_cookie_name,
        ttl_seconds=settings.session_ttl_seconds,
    )
    logger.info("login ok: user_id=%s", user.id)
    return LoginResponse(detail="Logged in")
