"""Order schemas - data contracts for the order lifecycle."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel

# =============================================================================
# Enums
# =============================================================================


class OrderStatus(str, Enum):
    """Order lifecycle status."""

    PENDING = "pending"
    PREPARING = "preparing"
    COMPLETED = "completed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class CancelledBy(str, Enum):
    """Who cancelled an order."""

    GUEST = "guest"
    # Never written; kept so rows cancelled by staff stay readable
    ADMIN = "admin"


TERMINAL_STATUSES = frozenset(
    {OrderStatus.COMPLETED, OrderStatus.REJECTED, OrderStatus.CANCELLED}
)
ACTIVE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.PREPARING})


class CamelModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Items
# =============================================================================


class OrderItem(CamelModel):
    """A line item snapshot taken from the customer's cart."""

    name: str = Field(min_length=1, max_length=200)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    quantity: int = Field(ge=1, le=99)
    image: str | None = Field(default=None, max_length=500)
    calories: int | None = Field(default=None, ge=0)
    protein: int | None = Field(default=None, ge=0)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


# =============================================================================
# Requests
# =============================================================================


class OrderCreateRequest(CamelModel):
    """Request body for POST /api/orders."""

    items: list[OrderItem] = Field(..., min_length=1)
    subtotal: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    tax: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    total: Decimal = Field(ge=0, max_digits=10, decimal_places=2)

    @model_validator(mode="after")
    def check_totals(self) -> "OrderCreateRequest":
        """Reject carts whose totals don't add up."""
        items_subtotal = sum((item.line_total for item in self.items), Decimal("0"))
        if items_subtotal != self.subtotal:
            raise ValueError(
                f"subtotal {self.subtotal} does not match items ({items_subtotal})"
            )
        if self.subtotal + self.tax != self.total:
            raise ValueError(
                f"total {self.total} does not equal subtotal + tax "
                f"({self.subtotal + self.tax})"
            )
        return self


class OrderStatusUpdateRequest(CamelModel):
    """Request body for PATCH /api/orders/{id}/status."""

    status: OrderStatus
    preparation_time: str | None = Field(default=None, max_length=50)
    rejection_reason: str | None = Field(default=None, max_length=1000)


# =============================================================================
# Responses
# =============================================================================


class OrderSchema(CamelModel):
    """An order as exposed by the API."""

    id: UUID
    order_number: str
    firebase_uid: str
    user_email: EmailStr
    user_name: str | None = None
    items: list[OrderItem]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    status: OrderStatus
    preparation_time: str | None = None
    rejection_reason: str | None = None
    cancelled_by: CancelledBy | None = None
    guest_arrived: bool = False
    created_at: datetime
    updated_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class OrderResponse(CamelModel):
    """Response wrapping a single order."""

    order: OrderSchema


class OrderListResponse(CamelModel):
    """Response for order list endpoints (newest first)."""

    orders: list[OrderSchema]
