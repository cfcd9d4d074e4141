import time

from fastapi.testclient import TestClient

from main import create_app
from store.memstore import MemoryUserRepository

COOKIE = "DNM"
DAY_MS = 86400 * 1000


def _signup(client, email="a@x.com", password="secret1"):
    return client.post("/users", json={"email": email, "password": password})


def _login(client, email="a@x.com", password="secret1"):
    return client.post("/sessions", json={"email": email, "password": password})


def _assert_cookie_cleared(response):
    header = response.headers.get("set-cookie", "").lower()
    assert header.startswith(f"{COOKIE.lower()}=")
    assert "max-age=0" in header


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_signup_returns_sanitized_user(client):
    r = _signup(client)
    assert r.status_code == 201
    assert r.json() == {"id": 1, "email": "a@x.com"}
    assert "secret1" not in r.text


def test_signup_validation_errors(client):
    r = _signup(client, email="nope", password="123")
    assert r.status_code == 422
    body = r.json()
    assert set(body["errors"]) == {"email", "password"}


def test_signup_malformed_body(client):
    r = client.post("/users", content=b"{not json", headers={"content-type": "application/json"})
    assert r.status_code == 422


def test_signup_duplicate_email(client):
    assert _signup(client).status_code == 201
    r = _signup(client, password="another1")
    assert r.status_code == 409
    assert r.json() == {"detail": "Email already exists"}


def test_login_sets_session_cookie(client, session_store):
    _signup(client)
    before = int(time.time() * 1000)
    r = _login(client)
    after = int(time.time() * 1000)

    assert r.status_code == 200
    token = r.cookies.get(COOKIE)
    assert token
    values = session_store.decode(token)
    assert values["user_id"] == 1
    assert before + DAY_MS <= values["end_time"] <= after + DAY_MS


def test_login_failures_are_indistinguishable(client):
    _signup(client)
    wrong_password = _login(client, password="wrong")
    unknown_email = _login(client, email="ghost@x.com")

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"detail": "incorrect email or password"}
    assert COOKIE not in wrong_password.cookies


def test_private_requires_session(client):
    r = client.get("/private/")
    assert r.status_code == 401
    assert r.json() == {"detail": "not authenticated"}
    _assert_cookie_cleared(r)


def test_who_am_i(client):
    _signup(client)
    _login(client)
    r = client.get("/private/")
    assert r.status_code == 200
    assert r.json() == {"id": 1, "email": "a@x.com"}


def test_list_users(client):
    _signup(client)
    _signup(client, email="b@x.com")
    _login(client)
    r = client.get("/private/all")
    assert r.status_code == 200
    assert {u["email"] for u in r.json()} == {"a@x.com", "b@x.com"}
    for row in r.json():
        assert set(row) == {"id", "email"}


def test_expired_session_looks_like_missing_session(repository, session_store):
    client = TestClient(create_app(repository=repository, session_store=session_store))
    _signup(client)
    token = session_store.encode({"user_id": 1, "end_time": int(time.time() * 1000) - 1})

    expired = client.get("/private/", headers={"cookie": f"{COOKIE}={token}"})
    missing = client.get("/private/")

    assert expired.status_code == missing.status_code == 401
    assert expired.json() == missing.json()
    _assert_cookie_cleared(expired)


def test_tampered_session_is_server_error(repository, session_store):
    client = TestClient(create_app(repository=repository, session_store=session_store))
    r = client.get("/private/", headers={"cookie": f"{COOKIE}=tampered.cookie.value"})
    assert r.status_code == 500
    assert r.json() == {"detail": "Internal server error"}
    _assert_cookie_cleared(r)


def test_delete_me_then_session_is_dead(client):
    _signup(client)
    _login(client)
    token = client.cookies.get(COOKIE)

    r = client.delete("/private/delete")
    assert r.status_code == 200

    # the old cookie still decodes but its user is gone
    r = client.get("/private/", headers={"cookie": f"{COOKIE}={token}"})
    assert r.status_code == 401
    assert r.json() == {"detail": "not authenticated"}
    _assert_cookie_cleared(r)


def test_scenario(client):
    r = _signup(client, "a@x.com", "secret1")
    assert r.json()["id"] == 1

    assert _login(client, "a@x.com", "secret1").status_code == 200
    assert _login(client, "a@x.com", "wrong").status_code == 401


def test_default_app_uses_configured_backend():
    # tests run with STORAGE_BACKEND=memory
    import main

    assert isinstance(main.app.state.repository, MemoryUserRepository)
