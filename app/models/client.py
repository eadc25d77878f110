"""
Client model for managing customers.
Each client belongs to a user (account owner).
"""

from typing import Optional
from sqlalchemy import String, Text, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel, SoftDeleteMixin


class Client(BaseModel, SoftDeleteMixin):
    """
    Client model representing a customer.

    Attributes:
        user_id: Foreign key to the owning user
        name: Client's full name or company name
        email: Client's email address
        phone: Client's phone number
        address: Client's physical address
    """

    __tablename__ = "clients"

    # Owner relationship
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Client info
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    address: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name='{self.name}', user_id={self.user_id})>"
