# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
In-memory user repository for tests and local simulation.

State lives on the instance, never at module level, so each test can build
a fresh one.  Not safe under concurrent mutation: use from a single thread.
"""

from typing import Dict, List

from core.errors import ConflictError, NotFoundError
from models.user import User
from store.repository import UserRepository


def _copy(user: User) -> User:
    # Stored and returned records are copies, like rows read back from a DB.
    # The plaintext password is never carried over.
    clone = User(email=user.email)
    clone.id = user.id
    clone.password_hash = user.password_hash
    return clone


class MemoryUserRepository(UserRepository):

    def __init__(self):
        self._users: Dict[int, User] = {}
        # ids start at 1 and are never reused
        self._next_id = 1

    def create(self, user: User) -> int:
        user.validate()
        if any(u.email == user.email for u in self._users.values()):
            raise ConflictError("email already exists")
        user.derive_credentials()

        user.id = self._next_id
        self._next_id += 1
        self._users[user.id] = _copy(user)
        return user.id

    def find_by_id(self, user_id: int) -> User:
        try:
            return _copy(self._users[user_id])
        except KeyError:
            raise NotFoundError("record not found") from None

    def find_by_email(self, email: str) -> User:
        for user in self._users.values():
            if user.email == email:
                return _copy(user)
        raise NotFoundError("record not found")

    def find_all(self) -> List[User]:
        return [_copy(u) for u in self._users.values()]

    def delete_by_id(self, user_id: int) -> None:
        self._users.pop(user_id, None)

    def __len__(self):
        return len(self._users)
