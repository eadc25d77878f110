"""
Invoice schemas for request/response validation.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from pydantic import EmailStr, Field, field_validator, model_validator

from app.schemas.base import BaseSchema, PaginatedResponse
from app.schemas.client import ClientResponse
from app.models.invoice import InvoiceStatus


RECIPIENT_FIELDS = ("client_name", "client_email", "client_address", "client_phone")


class InvoiceItemCreate(BaseSchema):
    """Invoice line as sent when creating an invoice."""

    description: str = Field(..., min_length=1)
    quantity: int = Field(default=1, ge=1)
    unit_price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)


class InvoiceItemUpdate(InvoiceItemCreate):
    """
    Invoice line as sent when updating an invoice.

    Lines carrying an id overwrite the stored item with that id, lines
    without one are added.
    """

    id: int | None = None


class InvoiceItemResponse(BaseSchema):
    """Invoice item response schema."""

    id: int
    invoice_id: int
    description: str
    quantity: int
    unit_price: Decimal
    total: Decimal


class InlineRecipient(BaseSchema):
    """Inline client snapshot fields shared by create and update."""

    client_name: str | None = Field(None, min_length=1, max_length=255)
    client_email: EmailStr | None = None
    client_address: str | None = None
    client_phone: str | None = Field(None, max_length=50)

    def recipient_fields_set(self) -> set[str]:
        return {name for name in RECIPIENT_FIELDS if getattr(self, name) is not None}


class InvoiceCreate(InlineRecipient):
    """
    Schema for creating an invoice.

    Either client_id or the complete inline recipient (name, email, address
    and phone) must be given, never both.
    """

    client_id: int | None = None
    invoice_number: str | None = Field(None, min_length=1, max_length=50)
    issue_date: date
    due_date: date
    notes: str | None = None
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0)
    delivery_fee: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    items: list[InvoiceItemCreate] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_recipient(self) -> "InvoiceCreate":
        provided = self.recipient_fields_set()
        if self.client_id is not None:
            if provided:
                raise ValueError("client_id cannot be combined with inline client fields")
        elif provided != set(RECIPIENT_FIELDS):
            missing = ", ".join(f for f in RECIPIENT_FIELDS if f not in provided)
            raise ValueError(f"Either client_id or all inline client fields are required (missing: {missing})")
        return self

    @model_validator(mode="after")
    def check_dates(self) -> "InvoiceCreate":
        if self.due_date < self.issue_date:
            raise ValueError("due_date cannot be before issue_date")
        return self


class InvoiceUpdate(InlineRecipient):
    """
    Schema for updating an invoice.

    Omitted fields are left untouched. When `items` is omitted the stored
    items are kept; an empty list removes them all.
    """

    client_id: int | None = None
    invoice_number: str | None = Field(None, min_length=1, max_length=50)
    issue_date: date | None = None
    due_date: date | None = None
    notes: str | None = None
    status: str | None = None
    tax_rate: Decimal | None = Field(None, ge=0)
    delivery_fee: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    items: list[InvoiceItemUpdate] | None = None

    @field_validator("invoice_number", "issue_date", "due_date", "tax_rate", "delivery_fee")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        # Omit the field to keep the stored value
        if value is None:
            raise ValueError("cannot be null")
        return value

    @model_validator(mode="after")
    def check_recipient(self) -> "InvoiceUpdate":
        if self.client_id is not None and self.recipient_fields_set():
            raise ValueError("client_id cannot be combined with inline client fields")
        return self


class InvoiceStatusUpdate(BaseSchema):
    """Status change request; the value is checked against DRAFT, SENT, PAID."""

    status: str


class RecipientResponse(BaseSchema):
    name: str
    email: str | None
    address: str | None
    phone: str | None


class InvoiceResponse(BaseSchema):
    """Invoice response schema with items and recipient."""

    id: int
    user_id: int
    client_id: int | None
    client_name: str | None
    client_email: str | None
    client_address: str | None
    client_phone: str | None
    invoice_number: str
    status: InvoiceStatus
    issue_date: date
    due_date: date
    notes: str | None
    tax_rate: Decimal
    delivery_fee: Decimal
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    items: list[InvoiceItemResponse] = []
    client: ClientResponse | None = None
    recipient: RecipientResponse
    created_at: datetime
    updated_at: datetime

    @field_validator("recipient", mode="before")
    @classmethod
    def unpack_recipient(cls, value: Any) -> Any:
        # Invoice.recipient is a NamedTuple
        if isinstance(value, tuple) and hasattr(value, "_asdict"):
            return value._asdict()
        return value


class InvoiceListResponse(PaginatedResponse):
    """Paginated invoice list response."""

    items: list[InvoiceResponse]


class InvoiceSummaryResponse(BaseSchema):
    """Revenue figures over the user's active invoices."""

    paid_total: Decimal
    revenue_total: Decimal


class SenderInfo(BaseSchema):
    """Issuer printed on a public invoice preview."""

    name: str = Field(..., min_length=1)
    email: EmailStr | None = None
    address: str | None = None
    phone: str | None = None
    bank_name: str = Field(..., min_length=1)
    bank_account_name: str = Field(..., min_length=1)
    bank_account_number: str = Field(..., min_length=1)


class RecipientInfo(BaseSchema):
    """Recipient printed on a public invoice preview."""

    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    email: EmailStr | None = None
    phone: str | None = None


class InvoicePreviewRequest(BaseSchema):
    """
    Unauthenticated request to render an invoice PDF without storing it.
    """

    invoice_number: str = Field(..., min_length=1, max_length=50)
    issue_date: date
    due_date: date
    sender: SenderInfo
    recipient: RecipientInfo
    items: list[InvoiceItemCreate] = Field(default_factory=list)
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0)
    delivery_fee: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    notes: str | None = None
