"""Error response schemas."""

from pydantic import BaseModel, Field


class ValidationErrorDetail(BaseModel):
    """A single validation error."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Body of every non-2xx API response."""

    error: str
    message: str
    details: list[ValidationErrorDetail] = Field(default_factory=list)
