import pytest
from starlette.responses import Response

from auth.middleware import AuthState, authenticate, issue_session, now_ms
from core.errors import SessionError
from models.user import User

COOKIE = "DNM"
DAY_MS = 86400 * 1000


@pytest.fixture()
def stored_user(repository):
    u = User(email="user@example.org", password="password")
    repository.create(u)
    return u


def _auth(make_request, session_store, repository, values=None, token=None, now=None):
    if values is not None:
        token = session_store.encode(values)
    cookies = {COOKIE: token} if token is not None else None
    return authenticate(make_request(cookies), session_store, repository, cookie_name=COOKIE, now=now)


def test_authenticated(make_request, session_store, repository, stored_user):
    result = _auth(
        make_request, session_store, repository, {"user_id": stored_user.id, "end_time": now_ms() + DAY_MS}
    )
    assert result.state is AuthState.AUTHENTICATED
    assert result.authenticated
    assert result.user.id == stored_user.id
    assert result.user.email == "user@example.org"


def test_no_cookie_is_missing_identity(make_request, session_store, repository):
    result = _auth(make_request, session_store, repository)
    assert result.state is AuthState.SESSION_MISSING_IDENTITY
    assert result.user is None


def test_session_without_user_id(make_request, session_store, repository):
    result = _auth(make_request, session_store, repository, {"end_time": now_ms() + DAY_MS})
    assert result.state is AuthState.SESSION_MISSING_IDENTITY


def test_tampered_cookie_is_lookup_failure(make_request, session_store, repository, stored_user):
    result = _auth(make_request, session_store, repository, token="forged.cookie.value")
    assert result.state is AuthState.SESSION_LOOKUP_FAILED


def test_expired_session_with_valid_user(make_request, session_store, repository, stored_user):
    result = _auth(
        make_request, session_store, repository, {"user_id": stored_user.id, "end_time": now_ms() - 1}
    )
    assert result.state is AuthState.SESSION_EXPIRED
    assert not result.authenticated


def test_expiry_boundary(make_request, session_store, repository, stored_user):
    values = {"user_id": stored_user.id, "end_time": 1_000}
    assert _auth(make_request, session_store, repository, values, now=1_000).authenticated
    assert _auth(make_request, session_store, repository, values, now=1_001).state is AuthState.SESSION_EXPIRED


def test_missing_end_time_is_expired(make_request, session_store, repository, stored_user):
    result = _auth(make_request, session_store, repository, {"user_id": stored_user.id})
    assert result.state is AuthState.SESSION_EXPIRED


def test_deleted_user_is_identity_not_found(make_request, session_store, repository, stored_user):
    values = {"user_id": stored_user.id, "end_time": now_ms() + DAY_MS}
    repository.delete_by_id(stored_user.id)
    result = _auth(make_request, session_store, repository, values)
    assert result.state is AuthState.IDENTITY_NOT_FOUND


def test_issue_session_sets_identity_and_expiry(make_request, session_store, repository, stored_user):
    response = Response()
    session = issue_session(
        make_request(), response, session_store, stored_user, cookie_name=COOKIE, ttl_seconds=86400, now=5_000
    )
    assert session.values == {"user_id": stored_user.id, "end_time": 5_000 + DAY_MS}
    assert response.headers["set-cookie"].startswith(f"{COOKIE}=")


def test_issue_session_ttl_is_configurable(make_request, session_store, repository, stored_user):
    session = issue_session(
        make_request(), Response(), session_store, stored_user, cookie_name=COOKIE, ttl_seconds=60, now=0
    )
    assert session.values["end_time"] == 60_000


def test_issued_session_authenticates(make_request, session_store, repository, stored_user):
    response = Response()
    issue_session(make_request(), response, session_store, stored_user, cookie_name=COOKIE, ttl_seconds=86400)
    token = response.headers["set-cookie"].split(";", 1)[0].split("=", 1)[1]
    assert _auth(make_request, session_store, repository, token=token).authenticated


def test_issue_session_with_unreadable_cookie(make_request, session_store, stored_user):
    with pytest.raises(SessionError):
        issue_session(
            make_request({COOKIE: "garbage"}),
            Response(),
            session_store,
            stored_user,
            cookie_name=COOKIE,
            ttl_seconds=86400,
        )
