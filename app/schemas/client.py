"""
Client schemas for request/response validation.
"""

from datetime import datetime
from pydantic import EmailStr, Field, field_validator

from app.schemas.base import BaseSchema, PaginatedResponse


class ClientBase(BaseSchema):
    """Base client schema with common fields."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    address: str | None = None


class ClientCreate(ClientBase):
    """Schema for creating a new client."""
    pass


class ClientUpdate(BaseSchema):
    """Schema for updating a client."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    address: str | None = None

    @field_validator("name")
    @classmethod
    def reject_null_name(cls, value: str | None) -> str | None:
        if value is None:
            raise ValueError("cannot be null")
        return value


class ClientResponse(BaseSchema):
    """Client response schema."""

    id: int
    user_id: int
    name: str
    email: str | None
    phone: str | None
    address: str | None
    created_at: datetime
    updated_at: datetime


class ClientListResponse(PaginatedResponse):
    """Paginated client list response."""

    items: list[ClientResponse]
