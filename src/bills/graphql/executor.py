"""
Request executor: validates a GraphQL request against the schema, dispatches it
to the resolvers and shapes the response.

A request moves through RECEIVED -> VALIDATED -> DISPATCHED -> RESOLVED ->
SERIALIZED and ends in COMPLETED or FAILED. Any failure stops processing for
that request.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from graphql import GraphQLError, get_operation_ast, parse, validate

from ..errors import BillsError, SchemaValidationError, error_code
from ..logging import get_logger

if TYPE_CHECKING:
    import strawberry
    from strawberry.types import ExecutionResult

    from ..store import EntityStore

logger = get_logger(__name__)


class ExecutionState(Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    DISPATCHED = "dispatched"
    RESOLVED = "resolved"
    SERIALIZED = "serialized"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class GraphQLRequest:
    """A structured GraphQL request: document, variables and operation name."""

    query: str
    variables: dict[str, Any] | None = None
    operation_name: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> GraphQLRequest:
        """Build a request from a JSON-style body (``query``, ``variables``, ``operationName``)."""
        query = payload.get("query")
        if not isinstance(query, str) or not query.strip():
            raise SchemaValidationError("Request must include a non-empty 'query' string")

        variables = payload.get("variables")
        if variables is not None and not isinstance(variables, Mapping):
            raise SchemaValidationError("'variables' must be an object")

        operation_name = payload.get("operationName")
        if operation_name is not None and not isinstance(operation_name, str):
            raise SchemaValidationError("'operationName' must be a string")

        return cls(
            query=query,
            variables=dict(variables) if variables is not None else None,
            operation_name=operation_name or None,
        )


@dataclass
class ExecutionResponse:
    """Outcome of one request."""

    data: dict[str, Any] | None
    errors: list[dict[str, Any]] = field(default_factory=list)
    state: ExecutionState = ExecutionState.COMPLETED
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.state is ExecutionState.COMPLETED

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"data": self.data}
        if self.errors:
            payload["errors"] = self.errors
        return payload


def classify_error(error: GraphQLError) -> BaseException:
    """Map a GraphQL error to the exception that caused it."""
    original = error.original_error
    if isinstance(original, BillsError):
        return original
    if error.path is None:
        # Parse, validation and variable coercion errors are not tied to a field
        return SchemaValidationError(error.message)
    return original if original is not None else error


def format_error(error: GraphQLError) -> dict[str, Any]:
    """Format a GraphQL error with a machine-readable code in ``extensions``."""
    formatted = dict(error.formatted)
    cause = classify_error(error)

    extensions = dict(formatted.get("extensions") or {})
    extensions["code"] = error_code(cause)
    if isinstance(cause, BillsError) and cause.details:
        extensions.update(cause.details)

    formatted["extensions"] = extensions
    return formatted


def serialize_result(result: ExecutionResult) -> dict[str, Any]:
    """Shape an execution result into a response payload."""
    payload: dict[str, Any] = {"data": result.data}
    if result.errors:
        payload["errors"] = [format_error(error) for error in result.errors]
    if getattr(result, "extensions", None):
        payload["extensions"] = result.extensions
    return payload


def _failure(error: BaseException, errors: list[dict[str, Any]]) -> ExecutionResponse:
    return ExecutionResponse(data=None, errors=errors, state=ExecutionState.FAILED, error=error)


class RequestExecutor:
    """Executes GraphQL requests against one entity store."""

    def __init__(self, store: EntityStore, schema: strawberry.Schema | None = None):
        if schema is None:
            from .schema import schema as default_schema

            schema = default_schema
        self.store = store
        self.schema = schema

    def check(self, request: GraphQLRequest) -> list[GraphQLError]:
        """
        Check the request against the schema without executing it.

        Returns one error per problem found: a syntax error, each failed
        validation rule, or an unresolvable operation name. An empty list means
        the request may be dispatched.
        """
        try:
            document = parse(request.query)
        except GraphQLError as e:
            return [e]

        errors = validate(self.schema._schema, document)
        if errors:
            return list(errors)

        if get_operation_ast(document, request.operation_name) is None:
            if request.operation_name:
                return [GraphQLError(f"Unknown operation named '{request.operation_name}'")]
            return [
                GraphQLError("Must provide operation name if query contains multiple operations")
            ]

        return []

    def validate(self, request: GraphQLRequest) -> None:
        """
        Like ``check``, but raise instead of returning the errors.

        Raises:
            SchemaValidationError: the document does not parse, references unknown
                operations, fields or arguments, or has mistyped arguments
        """
        errors = self.check(request)
        if errors:
            raise SchemaValidationError(
                "; ".join(error.message for error in errors),
                errors=[error.message for error in errors],
            )

    async def execute(self, request: GraphQLRequest | Mapping[str, Any]) -> ExecutionResponse:
        """Run a request through validation, dispatch and serialization."""
        state = ExecutionState.RECEIVED

        try:
            if not isinstance(request, GraphQLRequest):
                request = GraphQLRequest.from_payload(request)
        except SchemaValidationError as e:
            logger.info("Request rejected", state=state.value, error=e.message)
            extensions = {"code": e.code, **e.details}
            return _failure(e, [{"message": e.message, "extensions": extensions}])

        errors = self.check(request)
        if errors:
            cause = SchemaValidationError("; ".join(error.message for error in errors))
            logger.info("Request rejected", state=state.value, error=cause.message)
            return _failure(cause, [format_error(error) for error in errors])

        state = ExecutionState.VALIDATED
        logger.debug("Request validated", operation=request.operation_name)

        state = ExecutionState.DISPATCHED
        result = await self.schema.execute(
            request.query,
            variable_values=request.variables,
            context_value={"store": self.store},
            operation_name=request.operation_name,
        )
        state = ExecutionState.RESOLVED

        payload = serialize_result(result)
        state = ExecutionState.SERIALIZED

        if result.errors:
            cause = classify_error(result.errors[0])
            logger.info("Request failed", state=state.value, code=error_code(cause))
            return ExecutionResponse(
                data=payload["data"],
                errors=payload["errors"],
                state=ExecutionState.FAILED,
                error=cause,
            )

        return ExecutionResponse(data=payload["data"], state=ExecutionState.COMPLETED)
