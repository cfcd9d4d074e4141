# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
User endpoints.

``POST /users`` is open (sign-up).  Everything under ``/private`` is guarded
by ``require_session``; a request without a live session gets 401 before any
handler code runs.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from auth.middleware import AuthContext, get_repository, require_session
from core.logger import logger
from models.user import User
from store.repository import UserRepository
from users.schemas import CreateUserRequest, UserRow

router = APIRouter(tags=["users"])
private_router = APIRouter(prefix="/private", tags=["private"])


# ---------------------------------------------------------------------------
# POST /users  – sign up
# ---------------------------------------------------------------------------


@router.post("/users", response_model=UserRow, status_code=status.HTTP_201_CREATED)
def create_user(
    body: CreateUserRequest,
    repository: UserRepository = Depends(get_repository),
):
    """
    Create an account.  Field errors come back as 422 with one message per
    field; a taken email is 409.
    """
    user = User(email=body.email, password=body.password)
    repository.create(user)
    user.sanitize()
    logger.info("user created: id=%s", user.id)
    return user


# ---------------------------------------------------------------------------
# GET /private/  – who am I
# ---------------------------------------------------------------------------


@private_router.get("/", response_model=UserRow)
def who_am_i(ctx: AuthContext = Depends(require_session)):
    return ctx.user


# ---------------------------------------------------------------------------
# GET /private/all  – list users
# ---------------------------------------------------------------------------


@private_router.get("/all", response_model=List[UserRow])
def list_users(
    ctx: AuthContext = Depends(require_session),
    repository: UserRepository = Depends(get_repository),
):
    """Return every user (no password data – handled by the schema)."""
    return repository.find_all()


# ---------------------------------------------------------------------------
# DELETE /private/delete  – delete own account
# ---------------------------------------------------------------------------


@private_router.delete("/delete")
def delete_me(
    ctx: AuthContext = Depends(require_session),
    repository: UserRepository = Depends(get_repository),
):
    """
    Delete the calling user.  The session cookie is left as is; the next
    protected request with it fails identity resolution and clears it.
    """
    repository.delete_by_id(ctx.user.id)
    logger.info("user deleted: id=%s", ctx.user.id)
    return {"detail": "User deleted"}
