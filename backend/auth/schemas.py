# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the session endpoint."""

from pydantic import BaseModel


# -- Requests --------------------------------------------------------------


class LoginRequest(BaseModel):
    email: str
    password: str


# -- Responses -------------------------------------------------------------


class LoginResponse(BaseModel):
    detail: str
