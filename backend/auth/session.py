# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Signed-cookie session store.

The whole session (a small JSON mapping) travels in the cookie, signed with
itsdangerous so that any tampering is detected on the way back in.  Nothing
is kept server-side.  The auth layer only ever touches two keys:

* ``user_id``  – int, id of the logged-in user
* ``end_time`` – int, absolute expiry in epoch milliseconds
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from itsdangerous import BadData, URLSafeTimedSerializer
from starlette.requests import Request
from starlette.responses import Response

from core.errors import SessionError


@dataclass
class Session:
    name: str
    values: Dict[str, Any] = field(default_factory=dict)
    is_new: bool = True


class CookieSessionStore:
    """
    ``get`` / ``save`` pair over a signed cookie.

    An absent cookie yields a new, empty session.  A cookie that fails the
    signature check or cannot be decoded raises ``SessionError``.

    *max_age* only sets the cookie lifetime in the browser.  Expiry of the
    session itself is the caller's ``end_time`` check, so an old but
    authentic cookie still decodes.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        salt: str = "restauth.session.v1",
        max_age: Optional[int] = None,
        path: str = "/",
        httponly: bool = True,
        secure: bool = False,
        samesite: str = "lax",
    ):
        if not secret_key:
            raise RuntimeError("secret_key is required for the session store")
        self._serializer = URLSafeTimedSerializer(secret_key=secret_key, salt=salt)
        self.max_age = max_age
        self.path = path
        self.httponly = httponly
        self.secure = secure
        self.samesite = samesite

    # -- codec --------------------------------------------------------------

    def encode(self, values: Dict[str, Any]) -> str:
        try:
            return self._serializer.dumps(values)
        except (TypeError, ValueError) as exc:
            raise SessionError("session could not be encoded") from exc

    def decode(self, token: str) -> Dict[str, Any]:
        try:
            data = self._serializer.loads(token)
        except BadData as exc:
            raise SessionError("session cookie rejected") from exc
        if not isinstance(data, dict):
            raise SessionError("session cookie rejected")
        return data

    # -- store API ----------------------------------------------------------

    def get(self, request: Request, name: str) -> Session:
        token = request.cookies.get(name)
        if not token:
            return Session(name=name)
        return Session(name=name, values=self.decode(token), is_new=False)

    def save(self, request: Request, response: Response, session: Session) -> None:
        response.set_cookie(
            session.name,
            self.encode(session.values),
            max_age=self.max_age,
            path=self.path,
            httponly=self.httponly,
            secure=self.secure,
            samesite=self.samesite,
        )

    def expire(self, response: Response, name: str) -> None:
        """Tell the client to drop the cookie."""
        response.delete_cookie(
            name,
            path=self.path,
            httponly=self.httponly,
            secure=self.secure,
            samesite=self.samesite,
        )

    def expired_cookie_header(self, name: str) -> str:
        """The ``Set-Cookie`` value :meth:`expire` would emit, for error responses."""
        scratch = Response()
        self.expire(scratch, name)
        return scratch.headers["set-cookie"]
