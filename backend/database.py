# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
SQLAlchemy engine, session factory and declarative base for the relational
user repository.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import settings

Base = declarative_base()


def make_engine(url: str):
    """
    Build an engine for *url*.

    SQLite needs ``check_same_thread=False`` because FastAPI runs sync
    handlers in a threadpool; a pure in-memory SQLite database additionally
    needs a single shared connection or every checkout sees an empty DB.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    # pool_pre_ping keeps idle connections alive across MySQL's wait_timeout
    return create_engine(url, pool_pre_ping=True)


def make_session_factory(bind):
    # expire_on_commit=False: repositories hand detached rows back to callers
    return sessionmaker(bind=bind, autocommit=False, autoflush=False, expire_on_commit=False)


def init_db(bind) -> None:
    """Create the ``users`` table if it does not exist yet."""
    import models.user  # noqa: F401  registers the table on Base.metadata

    Base.metadata.create_all(bind)


engine = make_engine(settings.database_url)

SessionLocal = make_session_factory(engine)
