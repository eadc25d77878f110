"""
Pydantic schemas for request/response validation.
"""

from app.schemas.user import (
    UserResponse,
    ProfileUpdate,
    BankingUpdate,
    PasswordChange,
)
from app.schemas.client import (
    ClientCreate,
    ClientUpdate,
    ClientResponse,
    ClientListResponse,
)
from app.schemas.invoice import (
    InvoiceCreate,
    InvoiceUpdate,
    InvoiceResponse,
    InvoiceListResponse,
    InvoiceItemCreate,
    InvoiceItemUpdate,
    InvoiceItemResponse,
    InvoiceStatusUpdate,
    InvoiceSummaryResponse,
    InvoicePreviewRequest,
)
from app.schemas.auth import (
    TokenPair,
    SignInRequest,
    SignUpRequest,
    RefreshTokenRequest,
)

__all__ = [
    # User
    "UserResponse",
    "ProfileUpdate",
    "BankingUpdate",
    "PasswordChange",
    # Client
    "ClientCreate",
    "ClientUpdate",
    "ClientResponse",
    "ClientListResponse",
    # Invoice
    "InvoiceCreate",
    "InvoiceUpdate",
    "InvoiceResponse",
    "InvoiceListResponse",
    "InvoiceItemCreate",
    "InvoiceItemUpdate",
    "InvoiceItemResponse",
    "InvoiceStatusUpdate",
    "InvoiceSummaryResponse",
    "InvoicePreviewRequest",
    # Auth
    "TokenPair",
    "SignInRequest",
    "SignUpRequest",
    "RefreshTokenRequest",
]
