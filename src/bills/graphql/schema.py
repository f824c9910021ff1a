"""
Main GraphQL schema definition using Strawberry
"""

from typing import TYPE_CHECKING, Any

import strawberry
from fastapi import Request
from graphql import GraphQLError
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter
from strawberry.http import GraphQLHTTPResponse
from strawberry.types import ExecutionContext, ExecutionResult

from ..errors import BillsError
from ..logging import get_logger
from .executor import serialize_result
from .mutations.root import Mutation
from .queries.root import Query

if TYPE_CHECKING:
    from ..store import EntityStore

logger = get_logger(__name__)


class BillsSchema(strawberry.Schema):
    """Strawberry schema that reports resolver errors through structlog."""

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        for error in errors:
            if isinstance(error.original_error, BillsError):
                logger.info(
                    "GraphQL operation rejected",
                    code=error.original_error.code,
                    error=error.message,
                    path=error.path,
                )
            elif error.original_error is None:
                logger.info("GraphQL request invalid", error=error.message)
            else:
                logger.error(
                    "GraphQL resolver failed",
                    error=error.message,
                    path=error.path,
                    exc_info=error.original_error,
                )


# Create the GraphQL schema
schema = BillsSchema(query=Query, mutation=Mutation)


def validate_schema() -> None:
    """Validate the GraphQL schema at startup.

    Ensures every type reference resolves so the server fails fast instead of
    erroring on the first request.

    Raises:
        Exception: If the schema is invalid or has unresolved types
    """
    try:
        graphql_schema = schema._schema

        errors = gql_validate_schema(graphql_schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise Exception(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

        # Introspection catches most lazy type resolution issues
        from graphql import get_introspection_query, graphql_sync

        result = graphql_sync(graphql_schema, get_introspection_query())

        if result.errors:
            error_messages = [str(e) for e in result.errors]
            raise Exception(f"GraphQL introspection failed: {'; '.join(error_messages)}")

        logger.info("GraphQL schema validation successful")

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise


def print_schema() -> str:
    """Return the schema in GraphQL SDL."""
    return schema.as_str()


class BillsGraphQLRouter(GraphQLRouter[dict[str, Any], None]):
    """GraphQL router whose responses carry error codes in ``extensions``."""

    async def process_result(
        self, request: Request, result: ExecutionResult
    ) -> GraphQLHTTPResponse:
        return serialize_result(result)  # type: ignore[return-value]


def create_graphql_router(store: "EntityStore", graphiql: bool = True) -> BillsGraphQLRouter:
    """Create a GraphQL router for FastAPI bound to ``store``."""

    async def get_context(request: Request) -> dict[str, Any]:
        """Get the context for GraphQL resolvers."""
        return {
            "request": request,
            "store": store,
        }

    return BillsGraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql" if graphiql else None,
        context_getter=get_context,
    )
