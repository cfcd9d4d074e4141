# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Relational user repository (SQLAlchemy).

Every operation opens its own session and issues a single parameterised
statement.  Concurrency control is left entirely to the database: no
application-level locks, no retries, no multi-statement transactions.
"""

from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError

from core.errors import ConflictError, NotFoundError, StorageError
from core.logger import logger
from models.user import User
from store.repository import UserRepository


class SQLUserRepository(UserRepository):

    def __init__(self, session_factory):
        """*session_factory* is a sessionmaker, see ``database.make_session_factory``."""
        self._session_factory = session_factory

    def create(self, user: User) -> int:
        user.validate()
        previous_hash = user.password_hash
        user.derive_credentials()

        # Insert a fresh row so the caller's instance never gets attached to
        # a session; only the generated id is copied back.
        row = User(email=user.email)
        row.password_hash = user.password_hash
        with self._session_factory() as db:
            try:
                db.add(row)
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                user.password_hash = previous_hash
                raise ConflictError("email already exists") from exc
            except SQLAlchemyError as exc:
                db.rollback()
                user.password_hash = previous_hash
                logger.exception("users insert failed")
                raise StorageError("storage failure") from exc

        user.id = row.id
        return user.id

    def find_by_id(self, user_id: int) -> User:
        return self._find_one(select(User).where(User.id == user_id))

    def find_by_email(self, email: str) -> User:
        return self._find_one(select(User).where(User.email == email))

    def find_all(self) -> List[User]:
        with self._session_factory() as db:
            try:
                return list(db.execute(select(User).order_by(User.id)).scalars().all())
            except SQLAlchemyError as exc:
                logger.exception("users select failed")
                raise StorageError("storage failure") from exc

    def delete_by_id(self, user_id: int) -> None:
        with self._session_factory() as db:
            try:
                db.execute(delete(User).where(User.id == user_id))
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                logger.exception("users delete failed")
                raise StorageError("storage failure") from exc

    def _find_one(self, stmt) -> User:
        with self._session_factory() as db:
            try:
                return db.execute(stmt).scalar_one()
            except NoResultFound as exc:
                raise NotFoundError("record not found") from exc
            except SQLAlchemyError as exc:
                logger.exception("users select failed")
                raise StorageError("storage failure") from exc
