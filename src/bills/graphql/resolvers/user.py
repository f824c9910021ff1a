from __future__ import annotations

import asyncio
import re
from typing import TYPE_CHECKING

import strawberry

from ...errors import NotFoundError
from ...logging import get_logger
from ..context import get_store_from_info

if TYPE_CHECKING:
    from ...store.models import UserRecord
    from ..types.user import User

logger = get_logger(__name__)

_USER_ID_RE = re.compile(r"[+-]?[0-9]+")


def user_from_record(record: UserRecord) -> User:
    """Convert a stored user into its GraphQL type."""
    from ..types.user import User as UserType

    return UserType(
        id=strawberry.ID(str(record.id)),
        name=record.name,
        email=record.email,
        role=record.role,
        token=record.token,
    )


def parse_user_id(id: str) -> int | None:
    """Coerce a GraphQL ID to the store's integer key, or None if it is not one.

    Only ASCII decimal digits are accepted; underscores and other Unicode digits
    are not numbers here.
    """
    text = str(id).strip()
    if not _USER_ID_RE.fullmatch(text):
        return None
    return int(text)


# Query resolvers
async def resolve_users(info: strawberry.Info) -> list[User]:
    store = get_store_from_info(info)
    return [user_from_record(record) for record in store.list_users()]


async def resolve_user_by_id(info: strawberry.Info, id: str) -> User | None:
    """
    Resolve a user by ID.

    Missing and non-numeric ids resolve to null rather than an error.
    """
    store = get_store_from_info(info)

    user_id = parse_user_id(id)
    if user_id is None:
        logger.info("Invalid user id", user_id=str(id))
        return None

    try:
        record = store.get_user(user_id)
    except NotFoundError:
        logger.info("User not found", user_id=user_id)
        return None

    return user_from_record(record)


# Mutation resolvers
async def create_user(info: strawberry.Info, name: str, email: str, password: str) -> User:
    """Create a user. Store errors propagate to the caller unchanged."""
    store = get_store_from_info(info)
    # Password hashing is CPU bound; keep it off the event loop
    record = await asyncio.to_thread(store.create_user, name, email, password)
    return user_from_record(record)
