"""
User model for authentication and invoice ownership.
Each user is an account owner issuing invoices to its clients.
"""

from typing import Optional
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel, SoftDeleteMixin


class User(BaseModel, SoftDeleteMixin):
    """
    User model representing an account owner.

    Attributes:
        name: Owner's display name, printed as the invoice sender
        email: Unique email for authentication
        hashed_password: Bcrypt hashed password
        address: Postal address printed on invoices
        phone: Contact phone number
        bank_name: Bank printed in the payment details
        bank_account_name: Holder of the bank account
        bank_account_number: Account number for transfers
        deleted_at: Set while the account is deactivated
    """

    __tablename__ = "users"

    # Authentication
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # Profile
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    address: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    # Banking
    bank_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    bank_account_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    bank_account_number: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', active={self.is_active})>"
