# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Error taxonomy shared by the credential model, the repositories and the
session layer.

Only ``ValidationError`` carries caller-facing detail.  Everything else is
mapped to an opaque HTTP message by the handlers registered in ``main``.
"""

from typing import Dict, Optional


class RestAuthError(RuntimeError):
    """Base class for every error raised by the core."""


class ValidationError(RestAuthError):
    """Input failed field validation.  ``errors`` maps field name → message."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(f"{k}: {v}" for k, v in sorted(self.errors.items()))
        super().__init__(f"invalid user: {fields}")


class ConflictError(RestAuthError):
    """A record with the same unique key (email) already exists."""


class NotFoundError(RestAuthError):
    """No record matches the lookup."""


class StorageError(RestAuthError):
    """The storage backend failed.  Not retried."""


class SessionError(RestAuthError):
    """The session cookie could not be decoded or written."""


class HashError(RestAuthError):
    """Password hash derivation failed."""

    def __init__(self, message: str = "password hashing failed", cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause
