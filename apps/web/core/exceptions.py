"""API exceptions - rendered as JSON by APIErrorMiddleware."""

from typing import Any


class APIError(Exception):
    """Base exception for errors surfaced to API callers."""

    status_code = 500
    code = "server_error"

    def __init__(
        self, message: str, details: list[dict[str, Any]] | None = None
    ) -> None:
        self.message = message
        self.details = details or []
        super().__init__(message)


class ValidationError(APIError):
    """Malformed input or a missing field required by a transition."""

    status_code = 400
    code = "validation_error"


class InvalidTransitionError(APIError):
    """Illegal order status transition."""

    status_code = 400
    code = "invalid_transition"


class TransitionConflictError(InvalidTransitionError):
    """Order status changed underneath the caller; nothing was written."""

    status_code = 409
    code = "transition_conflict"


class AuthenticationError(APIError):
    """No caller identity, or an identity that was never synced."""

    status_code = 401
    code = "authentication_required"


class AuthorizationError(APIError):
    """Caller's role or ownership doesn't permit the operation."""

    status_code = 403
    code = "forbidden"


class NotFoundError(APIError):
    """Unknown order, menu item or user."""

    status_code = 404
    code = "not_found"
