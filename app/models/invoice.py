"""
Invoice and InvoiceItem models for billing.
Supports draft, sent and paid statuses.
"""

from typing import NamedTuple, Optional, List, TYPE_CHECKING
from decimal import Decimal
from datetime import date
from enum import Enum
from sqlalchemy import (
    String,
    Text,
    ForeignKey,
    Integer,
    Numeric,
    Date,
    Enum as SQLEnum,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel, SoftDeleteMixin

if TYPE_CHECKING:
    from app.models.client import Client


class InvoiceStatus(str, Enum):
    """Invoice status enumeration."""
    DRAFT = "DRAFT"
    SENT = "SENT"
    PAID = "PAID"


class Recipient(NamedTuple):
    """Billing recipient as printed on the invoice."""
    name: str
    email: Optional[str]
    address: Optional[str]
    phone: Optional[str]


class Invoice(BaseModel, SoftDeleteMixin):
    """
    Invoice model.

    An invoice is billed either to a linked client (client_id) or to an
    inline recipient snapshot (client_name, client_email, client_address,
    client_phone), never both.

    Attributes:
        user_id: Foreign key to the owning user
        client_id: Optional foreign key to a client
        invoice_number: Invoice number, unique per user
        status: Current invoice status
        issue_date: Date when invoice was issued
        due_date: Payment due date
        notes: Additional notes/terms
        tax_rate: Tax percentage applied to the subtotal
        delivery_fee: Flat fee added after tax
        subtotal: Sum of line totals
        tax: subtotal * tax_rate / 100
        total: subtotal + tax + delivery_fee
    """

    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint("user_id", "invoice_number", name="uq_invoices_user_number"),
    )

    # Relationships
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    client_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("clients.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Inline recipient snapshot
    client_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    client_email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    client_address: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    client_phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    # Invoice info
    invoice_number: Mapped[str] = mapped_column(
        String(50),
        index=True,
        nullable=False,
    )
    status: Mapped[InvoiceStatus] = mapped_column(
        SQLEnum(InvoiceStatus, name="invoice_status"),
        default=InvoiceStatus.DRAFT,
        nullable=False,
    )

    # Dates
    issue_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )
    due_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    # Pricing inputs
    tax_rate: Mapped[Decimal] = mapped_column(
        Numeric(precision=5, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    delivery_fee: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )

    # Totals (calculated from items)
    subtotal: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    tax: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    total: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )

    # Relationships
    client: Mapped[Optional["Client"]] = relationship(
        "Client",
        lazy="selectin",
    )
    items: Mapped[List["InvoiceItem"]] = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.id",
        lazy="selectin",
    )

    @property
    def recipient(self) -> Recipient:
        """Who the invoice is addressed to: linked client or inline snapshot."""
        if self.client_id is not None and self.client is not None:
            return Recipient(
                name=self.client.name,
                email=self.client.email,
                address=self.client.address,
                phone=self.client.phone,
            )
        return Recipient(
            name=self.client_name or "",
            email=self.client_email,
            address=self.client_address,
            phone=self.client_phone,
        )

    def __repr__(self) -> str:
        return f"<Invoice(id={self.id}, number='{self.invoice_number}', total={self.total})>"


class InvoiceItem(BaseModel):
    """
    Invoice line item model.

    Attributes:
        invoice_id: Foreign key to the invoice
        description: Item description
        quantity: Number of units
        unit_price: Price per unit
        total: quantity * unit_price
    """

    __tablename__ = "invoice_items"

    invoice_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Item info
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(
        Integer,
        default=1,
        nullable=False,
    )
    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
    )
    total: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )

    # Relationships
    invoice: Mapped["Invoice"] = relationship(
        "Invoice",
        back_populates="items",
    )

    def __repr__(self) -> str:
        return f"<InvoiceItem(id={self.id}, description='{self.description[:30]}...', total={self.total})>"
