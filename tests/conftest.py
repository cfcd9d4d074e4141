import os
import tempfile

# Settings and the logger read the environment at import time, so these must
# be in place before any backend module is imported.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RESTAUTH_LOG_DIR", tempfile.mkdtemp(prefix="restauth-log-"))

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from auth.session import CookieSessionStore
from database import Base, make_engine, make_session_factory
from main import create_app
from models.user import User
from store.memstore import MemoryUserRepository
from store.sqlstore import SQLUserRepository

TEST_SECRET = "test-secret-key"


@pytest.fixture()
def sql_engine():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def sql_repository(sql_engine):
    return SQLUserRepository(make_session_factory(sql_engine))


@pytest.fixture()
def memory_repository():
    return MemoryUserRepository()


@pytest.fixture(params=["memory", "sql"])
def repository(request):
    """Every repository contract test runs against both backends."""
    return request.getfixturevalue(f"{request.param}_repository")


@pytest.fixture()
def session_store():
    return CookieSessionStore(TEST_SECRET, max_age=86400)


@pytest.fixture()
def client(repository, session_store):
    return TestClient(create_app(repository=repository, session_store=session_store))


@pytest.fixture()
def make_user():
    """Build an unsaved user; override fields with keyword arguments."""

    def _make(email="user@example.org", password="password"):
        return User(email=email, password=password)

    return _make


def _build_request(cookies=None) -> Request:
    header = "; ".join(f"{k}={v}" for k, v in (cookies or {}).items())
    headers = [(b"cookie", header.encode("latin-1"))] if header else []
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/private/",
            "query_string": b"",
            "headers": headers,
        }
    )


@pytest.fixture()
def make_request():
    """Build a bare Starlette request carrying the given cookies."""
    return _build_request
