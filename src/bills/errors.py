"""
Error taxonomy shared by the entity store, resolvers and request executor
"""


class BillsError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, **details: object):
        super().__init__(message)
        self.message = message
        self.details = details


class SchemaValidationError(BillsError):
    """Request shape does not match the schema."""

    code = "SCHEMA_VALIDATION_FAILED"


class NotFoundError(BillsError):
    """Requested entity does not exist."""

    code = "NOT_FOUND"


class ValidationError(BillsError):
    """Mutation arguments are malformed."""

    code = "VALIDATION_FAILED"


class ConflictError(BillsError):
    """A unique field already holds the requested value."""

    code = "CONFLICT"


def error_code(error: BaseException | None) -> str:
    """Return the public error code for an exception."""
    if isinstance(error, BillsError):
        return error.code
    return BillsError.code
