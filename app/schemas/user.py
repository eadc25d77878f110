"""
User schemas for request/response validation.
"""

from datetime import datetime
from pydantic import EmailStr, Field

from app.schemas.base import BaseSchema


class UserResponse(BaseSchema):
    """User response schema (public data)."""

    id: int
    email: EmailStr
    name: str
    address: str | None
    phone: str | None
    bank_name: str | None
    bank_account_name: str | None
    bank_account_number: str | None
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(BaseSchema):
    """Schema for updating the user profile."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    address: str | None = None
    phone: str | None = Field(None, max_length=50)


class BankingUpdate(BaseSchema):
    """Schema for updating the banking details printed on invoices."""

    bank_name: str | None = Field(None, max_length=255)
    bank_account_name: str | None = Field(None, max_length=255)
    bank_account_number: str | None = Field(None, max_length=100, pattern=r"^[0-9]+$")


class PasswordChange(BaseSchema):
    """Schema for changing password."""

    current_password: str
    new_password: str = Field(..., min_length=8)
