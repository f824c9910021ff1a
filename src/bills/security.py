"""Password hashing helpers."""

from __future__ import annotations

from collections.abc import Sequence

from passlib.context import CryptContext

from .config import settings


def create_password_context(schemes: Sequence[str] | None = None) -> CryptContext:
    """Build a passlib context for the configured hash schemes."""
    return CryptContext(schemes=list(schemes or settings.password_schemes), deprecated="auto")


_pwd_context = create_password_context()


def hash_password(password: str, context: CryptContext | None = None) -> str:
    return (context or _pwd_context).hash(password)


def verify_password(password: str, hashed: str, context: CryptContext | None = None) -> bool:
    try:
        return (context or _pwd_context).verify(password, hashed)
    except ValueError:
        # Unrecognised or malformed hash
        return False


__all__ = ["create_password_context", "hash_password", "verify_password"]
