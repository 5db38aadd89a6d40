"""
Custom Exceptions

Centralized exception definitions for resolver errors.

Resolvers raise these with a message meant for the person using the
client; the message is returned verbatim in the GraphQL error and the
`code` is attached to the error's extensions so the client can branch
on it. Anything that is not an ApiError is treated as a bug and masked
outside of debug mode (see shipyard.api.schema).
"""
from pydantic import ValidationError


class ApiError(Exception):
    """Base class for errors that are safe to show to the client."""

    code = "BAD_REQUEST"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def extensions(self) -> dict:
        return {"code": self.code}


class AuthenticationError(ApiError):
    """Raised when credentials or a session are missing or wrong."""

    code = "UNAUTHENTICATED"


class PermissionDenied(ApiError):
    """Raised when a signed in user may not perform an action."""

    code = "FORBIDDEN"


class NotFoundError(ApiError):
    """Raised when a record does not exist or is not visible to the user."""

    code = "NOT_FOUND"


class InvalidInputError(ApiError):
    """Raised when input validation fails."""

    code = "BAD_USER_INPUT"

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "InvalidInputError":
        """Report the first failing field of a pydantic ValidationError."""
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error.get("loc", ())) or "input"
        return cls(f"Invalid {field}: {error['msg']}")
