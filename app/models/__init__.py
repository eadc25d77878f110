"""
Database models module.
All SQLAlchemy models are exported from here for easy imports.
"""

from app.models.user import User
from app.models.client import Client
from app.models.invoice import Invoice, InvoiceItem, InvoiceStatus


__all__ = [
    "User",
    "Client",
    "Invoice",
    "InvoiceItem",
    "InvoiceStatus",
]
