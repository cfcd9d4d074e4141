# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
User ORM model – also the credential model.

The same class is stored by both repositories: the SQL one persists it
through the ``users`` table, the memory one keeps detached instances in a
dict.  ``plaintext_password`` is a plain instance attribute, not a column,
so it can never reach the database.
"""

from typing import Annotated, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field
from pydantic import ValidationError as _PydanticValidationError
from sqlalchemy import Column, Integer, String

from core.errors import HashError, ValidationError
from core.security import hash_password, verify_password
from database import Base

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 30


class _PasswordField(BaseModel):
    """Length rule checked by :meth:`User.validate`."""

    password: Optional[
        Annotated[str, Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)]
    ] = None


def _email_problem(email: str) -> Optional[str]:
    """
    Return why *email* is unusable as a login, or None.

    The address must be stored exactly as typed, so display-name forms
    (``Bob <bob@example.org>``) and surrounding whitespace are rejected
    instead of being normalised away.
    """
    if email != email.strip():
        return "must not start or end with whitespace"
    try:
        validate_email(email, check_deliverability=False, allow_display_name=False)
    except EmailNotValidError as exc:
        return str(exc)
    return None


class User(Base):
    __tablename__ = "users"
    # never hand out a deleted user's id again (matches the memory backend)
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    # Column is called "password" but only ever holds the pbkdf2 hash
    password_hash = Column("password", String(255), nullable=False)

    # Transient, write-only.  Rows loaded from the DB fall back to this
    # class-level default.
    plaintext_password = ""

    def __init__(self, email: Optional[str] = None, password: str = "", **kwargs):
        super().__init__(email=email, **kwargs)
        self.plaintext_password = password or ""

    def __repr__(self):
        return f"<User id={self.id!r} email={self.email!r}>"

    # -- validation ---------------------------------------------------------

    def validate(self) -> None:
        """
        Check every field and raise one ``ValidationError`` listing all
        failures.

        The password is required only while no hash exists, i.e. on first
        creation.  Records loaded from storage carry just the hash and pass.
        """
        errors = {}
        try:
            _PasswordField(password=self.plaintext_password or None)
        except _PydanticValidationError as exc:
            for err in exc.errors():
                errors.setdefault(str(err["loc"][0]), err["msg"])

        if not self.email:
            errors["email"] = "cannot be blank"
        else:
            problem = _email_problem(self.email)
            if problem:
                errors["email"] = problem
        if not self.plaintext_password and not self.password_hash:
            errors["password"] = "cannot be blank"

        if errors:
            raise ValidationError(errors)

    # -- credentials --------------------------------------------------------

    def derive_credentials(self) -> None:
        """Hash the plaintext password into ``password_hash``.  No-op without one."""
        if not self.plaintext_password:
            return
        try:
            self.password_hash = hash_password(self.plaintext_password)
        except (ValueError, TypeError) as exc:
            raise HashError(cause=exc) from exc

    def sanitize(self) -> None:
        """Drop the plaintext password before the record leaves the process."""
        self.plaintext_password = ""

    def verify_password(self, candidate: str) -> bool:
        return verify_password(candidate, self.password_hash)
