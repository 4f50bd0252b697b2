"""
Core middleware - caller resolution and API error rendering.
"""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from django.http import HttpRequest, HttpResponse

from karahi_schemas import ErrorResponse

from apps.web.core.exceptions import APIError
from apps.web.core.http import json_response

if TYPE_CHECKING:
    from .models import User

logger = logging.getLogger(__name__)

CALLER_HEADER = "X-Firebase-UID"


class CallerMiddleware:
    """
    Middleware that attaches the calling user to the request.

    The caller is resolved from the X-Firebase-UID header on every request,
    so the role seen by views always comes from the persisted User record
    and never from anything the client sends.

    Sets request.caller to the User, or None when the header is missing or
    names a UID that was never synced.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        # Skip for admin
        if request.path.startswith("/admin/"):
            return self.get_response(request)

        request.caller = self._get_caller(request)  # type: ignore[attr-defined]
        return self.get_response(request)

    def _get_caller(self, request: HttpRequest) -> "User | None":
        """Resolve caller from request."""
        # Lazy import to avoid circular dependency
        from .models import User

        firebase_uid = request.headers.get(CALLER_HEADER, "").strip()
        if not firebase_uid:
            return None

        try:
            return User.objects.get(firebase_uid=firebase_uid, is_active=True)
        except User.DoesNotExist:
            logger.info("Request from unknown Firebase UID %s", firebase_uid)
            return None


class APIErrorMiddleware:
    """
    Middleware that renders APIError exceptions raised by views as JSON.

    Body: {"error": <code>, "message": <text>, "details": [...]}
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        return self.get_response(request)

    def process_exception(
        self, request: HttpRequest, exception: Exception
    ) -> HttpResponse | None:
        if not isinstance(exception, APIError):
            return None

        if exception.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, exception)
        else:
            logger.info(
                "%s %s -> %d %s: %s",
                request.method,
                request.path,
                exception.status_code,
                exception.code,
                exception.message,
            )

        body = ErrorResponse(
            error=exception.code,
            message=exception.message,
            details=exception.details,
        )
        # details is omitted when empty
        return json_response(
            body.model_dump(mode="json", exclude_defaults=True),
            status=exception.status_code,
        )
