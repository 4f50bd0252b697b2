"""Menu schemas - data contracts for menu item CRUD."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import Field, model_validator

from karahi_schemas.orders import CamelModel


class MenuItemSchema(CamelModel):
    """A menu item as exposed by the API."""

    id: UUID
    name: str
    description: str
    price: Decimal
    calories: int
    protein: int
    image: str
    category: str
    spicy: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class MenuItemCreateRequest(CamelModel):
    """Request body for POST /api/menu."""

    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=2000)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    calories: int = Field(ge=0)
    protein: int = Field(ge=0)
    image: str = Field(min_length=1, max_length=500)
    category: str = Field(min_length=1, max_length=100)
    spicy: str | None = Field(default=None, max_length=50)


class MenuItemUpdateRequest(CamelModel):
    """Request body for PATCH /api/menu/{id}. Omitted fields are left as-is."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1, max_length=2000)
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    calories: int | None = Field(default=None, ge=0)
    protein: int | None = Field(default=None, ge=0)
    image: str | None = Field(default=None, min_length=1, max_length=500)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    spicy: str | None = Field(default=None, max_length=50)

    @model_validator(mode="after")
    def check_required_not_null(self) -> "MenuItemUpdateRequest":
        """Only spicy may be cleared; other fields are required on the item."""
        nulled = [
            name
            for name in self.model_fields_set
            if name != "spicy" and getattr(self, name) is None
        ]
        if nulled:
            raise ValueError(f"cannot be null: {', '.join(sorted(nulled))}")
        return self


class MenuItemResponse(CamelModel):
    """Response wrapping a single menu item."""

    item: MenuItemSchema


class MenuItemListResponse(CamelModel):
    """Response for GET /api/menu (newest first)."""

    items: list[MenuItemSchema]
