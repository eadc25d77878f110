"""
Authentication schemas.
"""

from pydantic import EmailStr, Field

from app.schemas.base import BaseSchema


class SignInRequest(BaseSchema):
    """Sign-in request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class SignUpRequest(BaseSchema):
    """
    Sign-up request schema.

    Signing up with the email of a deactivated account reactivates it with
    this profile.
    """

    email: EmailStr
    password: str = Field(..., min_length=8, description="Minimum 8 characters")
    name: str = Field(..., min_length=1, max_length=255)
    address: str | None = None
    phone: str | None = Field(None, max_length=50)
    bank_name: str | None = Field(None, max_length=255)
    bank_account_name: str | None = Field(None, max_length=255)
    bank_account_number: str | None = Field(None, max_length=100)


class TokenPair(BaseSchema):
    """Access and refresh token pair response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshTokenRequest(BaseSchema):
    """Refresh token request schema."""

    refresh_token: str
