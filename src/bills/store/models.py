"""
Record types held by the entity store
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    """User role. Carried as data only; no operation checks it."""

    USER = "USER"
    MODERATOR = "MODERATOR"
    SUPERADMIN = "SUPERADMIN"


@dataclass(frozen=True)
class UserRecord:
    """A stored user. ``password_hash`` never leaves the store boundary."""

    id: int
    name: str
    email: str
    password_hash: str
    role: Role = Role.USER
    token: str | None = None


@dataclass(frozen=True)
class BillRecord:
    """A stored bill, linked to its author by user id."""

    title: str
    author_id: int
    text: str | None = None
