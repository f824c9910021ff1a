"""
Root GraphQL mutation definitions
"""

import strawberry

from ..types.user import User


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    @strawberry.mutation(name="createUser")
    async def create_user(
        self, info: strawberry.Info, name: str, email: str, password: str
    ) -> User:
        """Create a new user with the USER role."""
        from ..resolvers.user import create_user

        return await create_user(info, name, email, password)
