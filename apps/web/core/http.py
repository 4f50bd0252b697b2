"""
JSON request/response helpers shared by the API views.
"""

import json
from typing import Any, TypeVar

from django.http import HttpRequest, JsonResponse

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from apps.web.core.exceptions import ValidationError

_M = TypeVar("_M", bound=BaseModel)


def cors_headers() -> dict[str, str]:
    """CORS headers for the browser front-end."""
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, POST, PATCH, DELETE, OPTIONS",
        "Access-Control-Allow-Headers": (
            "Content-Type, Idempotency-Key, X-Firebase-UID"
        ),
    }


def json_response(data: dict[str, Any], status: int = 200) -> JsonResponse:
    """Create a JSON response with CORS headers."""
    response = JsonResponse(data, status=status)
    for key, value in cors_headers().items():
        response[key] = value
    return response


def dump(model: BaseModel) -> dict[str, Any]:
    """Serialize a wire model: JSON types, camelCase keys."""
    return model.model_dump(mode="json", by_alias=True)


def parse_body(request: HttpRequest, schema: type[_M]) -> _M:
    """
    Decode the request body as JSON and validate it against a schema.

    Raises:
        ValidationError: On malformed JSON or schema violations, with one
            detail per failing field.
    """
    try:
        body = json.loads(request.body or b"{}")
    except json.JSONDecodeError as exc:
        raise ValidationError("Invalid JSON in request body") from exc

    try:
        return schema.model_validate(body)
    except PydanticValidationError as exc:
        details = [
            {
                "field": ".".join(str(loc) for loc in err["loc"]) or "body",
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        raise ValidationError("Invalid request body", details=details) from exc
