"""Karahi Schemas - Pydantic models for the ordering API contract."""

from karahi_schemas.errors import ErrorResponse, ValidationErrorDetail
from karahi_schemas.menu import (
    MenuItemCreateRequest,
    MenuItemListResponse,
    MenuItemResponse,
    MenuItemSchema,
    MenuItemUpdateRequest,
)
from karahi_schemas.orders import (
    ACTIVE_STATUSES,
    TERMINAL_STATUSES,
    CancelledBy,
    OrderCreateRequest,
    OrderItem,
    OrderListResponse,
    OrderResponse,
    OrderSchema,
    OrderStatus,
    OrderStatusUpdateRequest,
)
from karahi_schemas.users import UserResponse, UserRole, UserSchema, UserSyncRequest

__all__ = [
    # Errors
    "ErrorResponse",
    "ValidationErrorDetail",
    # Menu
    "MenuItemCreateRequest",
    "MenuItemListResponse",
    "MenuItemResponse",
    "MenuItemSchema",
    "MenuItemUpdateRequest",
    # Orders
    "ACTIVE_STATUSES",
    "TERMINAL_STATUSES",
    "CancelledBy",
    "OrderCreateRequest",
    "OrderItem",
    "OrderListResponse",
    "OrderResponse",
    "OrderSchema",
    "OrderStatus",
    "OrderStatusUpdateRequest",
    # Users
    "UserResponse",
    "UserRole",
    "UserSchema",
    "UserSyncRequest",
]
