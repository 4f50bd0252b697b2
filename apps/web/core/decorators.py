"""
Decorators for request handling and authorization.
"""

import json
from collections.abc import Callable
from functools import wraps
from typing import Any

from django.core.cache import cache
from django.http import HttpRequest

from apps.web.core.exceptions import AuthenticationError, AuthorizationError
from apps.web.core.http import json_response


def caller_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator that requires a resolved caller (see CallerMiddleware).

    Raises AuthenticationError when the request carries no known identity.
    """

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
        if getattr(request, "caller", None) is None:
            raise AuthenticationError("Sign in to continue")
        return view_func(request, *args, **kwargs)

    return wrapper


def admin_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator that requires the caller to be an admin.

    The role comes from the persisted User record, resolved per request.
    """

    @wraps(view_func)
    @caller_required
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
        if not request.caller.is_admin:  # type: ignore[attr-defined]
            raise AuthorizationError("Admin access required")
        return view_func(request, *args, **kwargs)

    return wrapper


def idempotent(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator that replays the first response for a repeated Idempotency-Key.

    The header is optional; requests without it run normally. Keys are
    scoped to the caller, and only successful responses are cached (24 hours).

    Usage:
        @idempotent
        def create_order(request):
            ...
    """

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
        key = request.headers.get("Idempotency-Key")
        caller = getattr(request, "caller", None)

        if not key or caller is None:
            return view_func(request, *args, **kwargs)

        cache_key = f"idempotency:{caller.firebase_uid}:{key}"
        cached = cache.get(cache_key)

        if cached:
            # Return cached response
            return json_response(
                cached["data"],
                status=cached["status"],
            )

        # Call the actual view
        response = view_func(request, *args, **kwargs)

        # Cache successful responses for 24 hours
        if response.status_code < 400:
            cache.set(
                cache_key,
                {
                    "data": json.loads(response.content),
                    "status": response.status_code,
                },
                timeout=86400,  # 24 hours
            )

        return response

    return wrapper
