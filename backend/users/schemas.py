# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the user endpoints."""

from pydantic import BaseModel


# -- Requests --------------------------------------------------------------


class CreateUserRequest(BaseModel):
    email: str
    password: str


# -- Responses -------------------------------------------------------------


class UserRow(BaseModel):
    """Public view of a user.  Password material never appears here."""

    id: int
    email: str

    model_config = {"from_attributes": True}
