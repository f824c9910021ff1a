"""
Root GraphQL query definitions
"""

import strawberry

from ..types.bill import Bill
from ..types.user import User


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def bills(self, info: strawberry.Info) -> list[Bill | None] | None:
        """Get all bills in insertion order."""
        from ..resolvers.bill import resolve_bills

        return await resolve_bills(info)

    @strawberry.field
    async def user(self, info: strawberry.Info, id: strawberry.ID) -> User | None:
        """Get a user by ID."""
        from ..resolvers.user import resolve_user_by_id

        return await resolve_user_by_id(info, id)

    @strawberry.field
    async def users(self, info: strawberry.Info) -> list[User]:
        """Get all users in insertion order."""
        from ..resolvers.user import resolve_users

        return await resolve_users(info)
