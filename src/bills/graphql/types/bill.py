"""
Bill GraphQL type definitions
"""

from typing import TYPE_CHECKING, Annotated

import strawberry

if TYPE_CHECKING:
    from .user import User


@strawberry.type
class Bill:
    """Bill type for GraphQL API."""

    title: str
    text: str | None
    author_id: strawberry.Private[int]

    @strawberry.field
    async def author(self, info: strawberry.Info) -> Annotated["User", strawberry.lazy(".user")]:
        """Get the user who wrote this bill."""
        from ..resolvers.bill import resolve_bill_author

        return await resolve_bill_author(self, info)
