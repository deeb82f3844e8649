"""Persisted user accounts (auth and RBAC)."""

from typing import Literal

from pydantic import Field

from lifetracker.models.base import Base

Role = Literal["admin", "user"]


class User(Base):
    """
    User account stored in users.json.

    role: 'admin' or 'user'. Accounts are created at boot or by script; there is
    no update or delete endpoint.
    """

    id: str
    username: str = Field(..., min_length=1, max_length=255)
    password_hash: str
    role: Role = "user"
