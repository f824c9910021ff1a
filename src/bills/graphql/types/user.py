"""
User GraphQL type definitions
"""

import strawberry

from ...store.models import Role as StoreRole

Role = strawberry.enum(StoreRole, name="Role", description="User role enumeration.")


@strawberry.type
class User:
    """User type for GraphQL API.

    The stored password hash is not exposed.
    """

    id: strawberry.ID
    name: str
    email: str
    role: Role
    token: str | None
