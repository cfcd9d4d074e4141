# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Password hashing primitives.  No other module should touch raw crypto
directly; the credential model calls these.

pbkdf2_sha256 (passlib) is used at creation *and* verification time.  The
salt is embedded in the hash string (passlib convention).
"""

from passlib.hash import pbkdf2_sha256 as _pbkdf2  # pure Python, no binary deps

from core.config import settings


def _hasher():
    # 0 means "the lowest round count the scheme accepts" – fast enough for
    # the test suite, far too weak for production.
    rounds = settings.password_hash_rounds or _pbkdf2.min_rounds
    return _pbkdf2.using(rounds=rounds)


def hash_password(plain: str) -> str:
    """
    Hash a plaintext password with PBKDF2-SHA256.

    Returns the full passlib hash string, e.g. ``"$pbkdf2-sha256$..."``.
    Raises ``ValueError`` / ``TypeError`` on unusable input.
    """
    if not plain:
        raise ValueError("empty password")
    return _hasher().hash(plain)


def verify_password(plain: str, stored_hash: str) -> bool:
    """
    Constant-time verification of *plain* against a hash produced by
    :func:`hash_password`.  A missing or malformed hash verifies as False.
    """
    if not plain or not stored_hash:
        return False
    try:
        return _pbkdf2.verify(plain, stored_hash)
    except (ValueError, TypeError):
        return False
