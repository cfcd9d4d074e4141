# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Build the app around an injected user repository and session store
  (defaults come from ``core.config.settings``).
* Register CORS and request-logging middleware.
* Map core errors to HTTP responses.
* Mount the session and user routers.
* Expose a /health endpoint for container liveness checks.

Run with:
    uvicorn main:app          (from backend/)
    python backend/main.py
"""

import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from auth.router import router as auth_router
from auth.session import CookieSessionStore
from core.config import settings
from core.errors import (
    ConflictError,
    HashError,
    NotFoundError,
    SessionError,
    StorageError,
    ValidationError,
)
from core.logger import logger
from store.repository import UserRepository
from users.router import private_router, router as users_router


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs every inbound request: method, path, client IP, status, latency.
# Bodies are never echoed – they carry passwords.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            client_ip,
            response.status_code,
            elapsed_ms,
        )
        return response


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------
# Validation errors are caller-actionable and carry field detail.  Storage,
# session and hashing failures are opaque: the cause goes to the log only.


def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": "validation failed", "errors": exc.errors})


def _conflict_error(request: Request, exc: ConflictError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": "Email already exists"})


def _not_found_error(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": "Not found"})


def _internal_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def _default_repository() -> UserRepository:
    if settings.storage_backend == "memory":
        from store.memstore import MemoryUserRepository

        logger.info("storage backend: memory")
        return MemoryUserRepository()

    from database import SessionLocal, engine, init_db
    from store.sqlstore import SQLUserRepository

    init_db(engine)
    logger.info("storage backend: sql (%s)", engine.url.render_as_string(hide_password=True))
    return SQLUserRepository(SessionLocal)


def create_app(
    repository: Optional[UserRepository] = None,
    session_store: Optional[CookieSessionStore] = None,
) -> FastAPI:
    app = FastAPI(title="restauth", version="1.0.0")

    app.state.repository = repository if repository is not None else _default_repository()
    app.state.session_store = session_store if session_store is not None else CookieSessionStore(
        settings.secret_key,
        salt=settings.session_salt,
        max_age=settings.session_ttl_seconds,
    )

    # -----------------------------------------------------------------------
    # CORS
    # -----------------------------------------------------------------------
    # Wide open by default.  Narrow CORS_ALLOW_ORIGINS before deploying.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type"],
    )
    app.add_middleware(_RequestLogMiddleware)

    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(ConflictError, _conflict_error)
    app.add_exception_handler(NotFoundError, _not_found_error)
    app.add_exception_handler(StorageError, _internal_error)
    app.add_exception_handler(SessionError, _internal_error)
    app.add_exception_handler(HashError, _internal_error)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    app.include_router(users_router)
    app.include_router(auth_router)
    app.include_router(private_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info("restauth starting on %s:%s", settings.bind_host, settings.bind_port)
    uvicorn.run(app, host=settings.bind_host, port=settings.bind_port)
