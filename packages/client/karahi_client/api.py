"""Async HTTP client for the Karahi ordering API."""

import logging
from typing import Any, TypeVar
from uuid import UUID

import httpx
from karahi_schemas import (
    ErrorResponse,
    MenuItemListResponse,
    MenuItemResponse,
    MenuItemSchema,
    OrderCreateRequest,
    OrderListResponse,
    OrderResponse,
    OrderSchema,
    OrderStatus,
    UserResponse,
    UserSchema,
    UserSyncRequest,
    ValidationErrorDetail,
)
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

CALLER_HEADER = "X-Firebase-UID"


class OrderAPIError(Exception):
    """Non-2xx or unparseable response from the ordering API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        details: list[ValidationErrorDetail] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details or []
        super().__init__(message)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "OrderAPIError":
        """Build from an error response, falling back to the raw body."""
        try:
            body = ErrorResponse.model_validate_json(response.content)
        except ValidationError:
            body = None

        if body is not None:
            return cls(
                body.message,
                status_code=response.status_code,
                code=body.error,
                details=body.details,
            )
        return cls(
            f"HTTP {response.status_code}: {response.text[:200]}",
            status_code=response.status_code,
        )


class OrderAPIClient:
    """
    Client for the order, menu and auth endpoints.

    Every request carries the caller's Firebase UID in the X-Firebase-UID
    header; the server resolves role and ownership from it.

    Transport failures surface as httpx.HTTPError; non-2xx responses and
    unparseable 2xx bodies as OrderAPIError. No retries: the pollers built
    on this client simply try again on their next tick.
    """

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        base_url: str,
        firebase_uid: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Server root, e.g. http://localhost:8000.
            firebase_uid: The signed-in caller; None for anonymous requests.
            http_client: Optional HTTP client for dependency injection (testing).
            timeout: Per-request timeout in seconds for the owned client.
        """
        self.base_url = base_url.rstrip("/")
        self.firebase_uid = firebase_uid
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = http_client is None

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "OrderAPIClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # =========================================================================
    # HTTP Helpers
    # =========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        request_headers = dict(headers or {})
        if self.firebase_uid:
            request_headers[CALLER_HEADER] = self.firebase_uid

        response = await self._client.request(
            method,
            f"{self.base_url}{path}",
            json=json,
            params=params,
            headers=request_headers,
        )

        if response.is_error:
            error = OrderAPIError.from_response(response)
            logger.debug(
                "%s %s -> %d %s", method, path, response.status_code, error.code
            )
            raise error
        return response

    @staticmethod
    def _parse(response: httpx.Response, model: type[ResponseT]) -> ResponseT:
        """
        Validate a 2xx body against its response schema.

        A body that is not JSON (e.g. a proxy's HTML error page) or doesn't
        match the schema raises OrderAPIError with code "invalid_response".
        """
        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            logger.debug("Unparseable %s body: %s", model.__name__, e)
            raise OrderAPIError(
                f"Invalid {model.__name__} body: {e.error_count()} error(s)",
                status_code=response.status_code,
                code="invalid_response",
            ) from e

    # =========================================================================
    # Orders
    # =========================================================================

    async def list_orders(self, limit: int | None = None) -> list[OrderSchema]:
        """GET /api/orders (admin): recent orders, newest first."""
        params = {"limit": limit} if limit is not None else None
        response = await self._request("GET", "/api/orders", params=params)
        return self._parse(response, OrderListResponse).orders

    async def user_orders(self, firebase_uid: str | None = None) -> list[OrderSchema]:
        """GET /api/orders/user/{uid}: one user's orders (default: the caller)."""
        uid = firebase_uid or self.firebase_uid
        if not uid:
            raise ValueError("firebase_uid is required")
        response = await self._request("GET", f"/api/orders/user/{uid}")
        return self._parse(response, OrderListResponse).orders

    async def get_order(self, order_id: UUID | str) -> OrderSchema:
        """GET /api/orders/{id}."""
        response = await self._request("GET", f"/api/orders/{order_id}")
        return self._parse(response, OrderResponse).order

    async def create_order(
        self,
        order: OrderCreateRequest,
        *,
        idempotency_key: str | None = None,
    ) -> OrderSchema:
        """
        POST /api/orders.

        Pass the same idempotency_key when retrying a checkout so the server
        returns the first order instead of creating a duplicate.
        """
        headers = {"Idempotency-Key": idempotency_key} if idempotency_key else None
        response = await self._request(
            "POST",
            "/api/orders",
            json=order.model_dump(mode="json", by_alias=True, exclude_none=True),
            headers=headers,
        )
        return self._parse(response, OrderResponse).order

    async def update_status(
        self,
        order_id: UUID | str,
        status: OrderStatus,
        *,
        preparation_time: str | None = None,
        rejection_reason: str | None = None,
    ) -> OrderSchema:
        """PATCH /api/orders/{id}/status."""
        body: dict[str, Any] = {"status": OrderStatus(status).value}
        if preparation_time is not None:
            body["preparationTime"] = preparation_time
        if rejection_reason is not None:
            body["rejectionReason"] = rejection_reason

        response = await self._request(
            "PATCH", f"/api/orders/{order_id}/status", json=body
        )
        return self._parse(response, OrderResponse).order

    async def mark_arrived(self, order_id: UUID | str) -> OrderSchema:
        """PATCH /api/orders/{id}/arrived."""
        response = await self._request("PATCH", f"/api/orders/{order_id}/arrived")
        return self._parse(response, OrderResponse).order

    async def cancel_order(self, order_id: UUID | str) -> OrderSchema:
        """PATCH /api/orders/{id}/cancel."""
        response = await self._request("PATCH", f"/api/orders/{order_id}/cancel")
        return self._parse(response, OrderResponse).order

    # =========================================================================
    # Menu
    # =========================================================================

    async def list_menu(self, category: str | None = None) -> list[MenuItemSchema]:
        """GET /api/menu."""
        params = {"category": category} if category else None
        response = await self._request("GET", "/api/menu", params=params)
        return self._parse(response, MenuItemListResponse).items

    async def get_menu_item(self, item_id: UUID | str) -> MenuItemSchema:
        """GET /api/menu/{id}."""
        response = await self._request("GET", f"/api/menu/{item_id}")
        return self._parse(response, MenuItemResponse).item

    # =========================================================================
    # Auth
    # =========================================================================

    async def sync_user(self, user: UserSyncRequest) -> UserSchema:
        """POST /api/auth/sync."""
        response = await self._request(
            "POST",
            "/api/auth/sync",
            json=user.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return self._parse(response, UserResponse).user

    async def get_user(self, firebase_uid: str | None = None) -> UserSchema:
        """GET /api/auth/user/{uid} (default: the caller)."""
        uid = firebase_uid or self.firebase_uid
        if not uid:
            raise ValueError("firebase_uid is required")
        response = await self._request("GET", f"/api/auth/user/{uid}")
        return self._parse(response, UserResponse).user
