"""User schemas - identity sync contracts."""

from enum import Enum

from pydantic import EmailStr, Field

from karahi_schemas.orders import CamelModel


class UserRole(str, Enum):
    """Application role. Admin requires server-side allow-list membership."""

    USER = "user"
    ADMIN = "admin"


class UserSyncRequest(CamelModel):
    """Request body for POST /api/auth/sync.

    ``role`` is advisory only; the server decides from its allow-list.
    """

    firebase_uid: str = Field(min_length=1, max_length=128)
    email: EmailStr
    display_name: str | None = Field(default=None, max_length=200)
    photo_url: str | None = Field(default=None, max_length=500, alias="photoURL")
    role: UserRole | None = None


class UserSchema(CamelModel):
    """A user as exposed by the API."""

    id: int
    firebase_uid: str
    email: EmailStr
    display_name: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserResponse(CamelModel):
    """Response wrapping a single user."""

    user: UserSchema
