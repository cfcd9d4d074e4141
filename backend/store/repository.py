# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
User repository contract.

Both backends (``store.sqlstore`` and ``store.memstore``) implement exactly
this interface and must behave identically, except for the order of
:meth:`UserRepository.find_all`, which callers may not rely on across
backends.  Implementations are injected into the app at construction time.
"""

from abc import ABC, abstractmethod
from typing import List

from models.user import User


class UserRepository(ABC):

    @abstractmethod
    def create(self, user: User) -> int:
        """
        Validate, hash and persist *user*.

        The id is assigned on the passed instance and returned.  Raises
        ``ValidationError`` for bad input and ``ConflictError`` if the email
        is already taken.
        """

    @abstractmethod
    def find_by_id(self, user_id: int) -> User:
        """Return the user or raise ``NotFoundError``."""

    @abstractmethod
    def find_by_email(self, email: str) -> User:
        """Return the user or raise ``NotFoundError``."""

    @abstractmethod
    def find_all(self) -> List[User]:
        """Every stored user; an empty list when there are none."""

    @abstractmethod
    def delete_by_id(self, user_id: int) -> None:
        """
        Remove the user.  Deleting an id that does not exist is a no-op, not
        an error.
        """
