"""
Invoice service.
Handles invoice CRUD, line item reconciliation, status changes and
revenue figures.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import unit_of_work
from app.core.exceptions import AlreadyExistsError, BusinessValidationError, NotFoundError
from app.models.base import utcnow
from app.models.invoice import Invoice, InvoiceItem, InvoiceStatus
from app.models.user import User
from app.repositories.client import ClientRepository
from app.repositories.invoice import InvoiceRepository
from app.schemas.invoice import (
    RECIPIENT_FIELDS,
    InvoiceCreate,
    InvoicePreviewRequest,
    InvoiceUpdate,
)
from app.services.invoice_status import INITIAL_STATUS, parse_status, transition
from app.services.reconciler import reconcile_items
from app.services.totals import calculate, line_total, to_decimal


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvoiceSummary:
    paid_total: Decimal
    revenue_total: Decimal


class InvoiceService:
    """Service for invoice operations."""

    def __init__(self, db: AsyncSession, number_prefix: str = "INV"):
        self.db = db
        self.number_prefix = number_prefix
        self.invoices = InvoiceRepository(db)
        self.clients = ClientRepository(db)

    async def _generate_invoice_number(self, user_id: int) -> str:
        """
        Generate unique invoice number.
        Format: {PREFIX}-{year}-{sequence}
        """
        prefix = f"{self.number_prefix}-{date.today().year}-"
        sequence = await self.invoices.count_numbers_with_prefix(user_id, prefix) + 1

        number = f"{prefix}{str(sequence).zfill(5)}"
        while await self.invoices.number_exists(user_id, number):
            sequence += 1
            number = f"{prefix}{str(sequence).zfill(5)}"
        return number

    async def _ensure_client(self, client_id: int, user_id: int) -> None:
        if not await self.clients.get_by_id(client_id, user_id):
            raise NotFoundError(f"Client with ID {client_id} not found")

    async def create(self, user_id: int, data: InvoiceCreate) -> Invoice:
        """
        Create a new invoice with items.

        Totals are computed from the items, the tax rate and the delivery
        fee; the invoice starts as DRAFT.

        Args:
            user_id: Owner's user ID
            data: Invoice data with items

        Returns:
            Created invoice

        Raises:
            NotFoundError: If the linked client is not an active client of the user
            AlreadyExistsError: If the user already has this invoice number
        """
        if data.client_id is not None:
            await self._ensure_client(data.client_id, user_id)

        if data.invoice_number:
            if await self.invoices.number_exists(user_id, data.invoice_number):
                raise AlreadyExistsError(f"Invoice number {data.invoice_number} already exists")
            invoice_number = data.invoice_number
        else:
            invoice_number = await self._generate_invoice_number(user_id)

        totals = calculate(data.items, data.tax_rate, data.delivery_fee)

        invoice = Invoice(
            user_id=user_id,
            client_id=data.client_id,
            client_name=data.client_name,
            client_email=data.client_email,
            client_address=data.client_address,
            client_phone=data.client_phone,
            invoice_number=invoice_number,
            status=INITIAL_STATUS,
            issue_date=data.issue_date,
            due_date=data.due_date,
            notes=data.notes,
            tax_rate=data.tax_rate,
            delivery_fee=data.delivery_fee,
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
            items=[
                InvoiceItem(
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total=line_total(item.quantity, item.unit_price),
                )
                for item in data.items
            ],
        )

        async with unit_of_work(self.db):
            invoice = await self.invoices.create(invoice)

        logger.info(f"Created invoice {invoice.invoice_number} (id={invoice.id}) for user {user_id}")
        return invoice

    async def get_or_404(self, invoice_id: int, user_id: int) -> Invoice:
        """Get invoice by ID or raise 404."""
        invoice = await self.invoices.get_by_id(invoice_id, user_id)
        if not invoice:
            raise NotFoundError(f"Invoice with ID {invoice_id} not found")
        return invoice

    async def list(
        self,
        user_id: int,
        skip: int = 0,
        limit: int = 20,
        status: str | None = None,
        search: str | None = None,
    ) -> tuple[list[Invoice], int]:
        """
        List invoices with pagination and filters.
        """
        status_filter = parse_status(status) if status else None
        return await self.invoices.list_by_owner(user_id, skip, limit, status_filter, search)

    def _recipient_changes(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Switching to a linked client clears the snapshot and vice versa."""
        if fields.get("client_id") is not None:
            return {name: None for name in RECIPIENT_FIELDS}
        if any(name in fields for name in RECIPIENT_FIELDS):
            return {"client_id": None}
        return {}

    async def update(self, invoice_id: int, user_id: int, data: InvoiceUpdate) -> Invoice:
        """
        Update invoice fields and reconcile its items.

        Items carrying an id overwrite the stored item, items without one are
        inserted, and stored items absent from the request are deleted.
        Totals are recomputed in every case. The whole update is applied
        atomically: when any item id is unknown nothing changes.

        Raises:
            NotFoundError: If the invoice or the new linked client does not exist
            ItemNotFoundError: If an item id does not belong to the invoice
            AlreadyExistsError: If the new invoice number is taken
            InvalidStatusError: If the requested status is unknown
        """
        invoice = await self.get_or_404(invoice_id, user_id)
        fields = data.model_dump(exclude_unset=True, exclude={"items", "status"})

        if fields.get("client_id") is not None:
            await self._ensure_client(fields["client_id"], user_id)

        number = fields.get("invoice_number")
        if number and number != invoice.invoice_number:
            if await self.invoices.number_exists(user_id, number):
                raise AlreadyExistsError(f"Invoice number {number} already exists")

        new_status = transition(invoice.status, data.status) if data.status is not None else None

        targets = data.items if data.items is not None else invoice.items
        plan = reconcile_items(
            invoice.items,
            targets,
            fields.get("tax_rate", invoice.tax_rate),
            fields.get("delivery_fee", invoice.delivery_fee),
            invoice_id=invoice.id,
        )

        async with unit_of_work(self.db):
            fields.update(self._recipient_changes(fields))
            for name, value in fields.items():
                setattr(invoice, name, value)
            if new_status is not None:
                invoice.status = new_status

            if invoice.client_id is None and any(
                not getattr(invoice, name) for name in RECIPIENT_FIELDS
            ):
                raise BusinessValidationError(
                    "An invoice without client_id needs client name, email, address and phone",
                    error_code="INCOMPLETE_RECIPIENT",
                )
            if invoice.due_date < invoice.issue_date:
                raise BusinessValidationError("due_date cannot be before issue_date")

            invoice = await self.invoices.apply_item_plan(invoice, plan)

        logger.info(
            f"Updated invoice {invoice.id}: {len(plan.updated)} kept, "
            f"{len(plan.inserted)} added, {len(plan.deleted_ids)} removed"
        )
        return invoice

    async def update_status(self, invoice_id: int, user_id: int, status: str) -> Invoice:
        """
        Change only the status of an invoice.

        Raises:
            InvalidStatusError: If status is not DRAFT, SENT or PAID
            NotFoundError: If the invoice does not exist under this user
        """
        requested = parse_status(status)
        invoice = await self.get_or_404(invoice_id, user_id)

        previous = invoice.status
        invoice.status = transition(previous, requested)
        invoice = await self.invoices.save(invoice)

        logger.info(f"Invoice {invoice_id} status {previous.value} -> {invoice.status.value}")
        return invoice

    async def delete(self, invoice_id: int, user_id: int) -> None:
        """Soft-delete an invoice."""
        invoice = await self.get_or_404(invoice_id, user_id)
        await self.invoices.soft_delete(invoice, utcnow())
        logger.info(f"Deleted invoice {invoice_id}")

    async def summary(self, user_id: int) -> InvoiceSummary:
        """
        Revenue figures over the user's active invoices.

        Returns:
            paid_total: sum of totals of PAID invoices
            revenue_total: sum of totals of all invoices
        """
        paid = await self.invoices.sum_totals(user_id, InvoiceStatus.PAID)
        revenue = await self.invoices.sum_totals(user_id)
        return InvoiceSummary(paid_total=to_decimal(paid), revenue_total=to_decimal(revenue))

    @staticmethod
    def build_preview(data: InvoicePreviewRequest) -> tuple[Invoice, User]:
        """
        Build a transient invoice and issuer for a public PDF preview.

        Nothing is attached to a session; totals are computed exactly as
        for stored invoices.
        """
        totals = calculate(data.items, data.tax_rate, data.delivery_fee)
        sender = User(
            name=data.sender.name,
            email=data.sender.email,
            address=data.sender.address,
            phone=data.sender.phone,
            bank_name=data.sender.bank_name,
            bank_account_name=data.sender.bank_account_name,
            bank_account_number=data.sender.bank_account_number,
        )
        invoice = Invoice(
            client_id=None,
            client_name=data.recipient.name,
            client_email=data.recipient.email,
            client_address=data.recipient.address,
            client_phone=data.recipient.phone,
            invoice_number=data.invoice_number,
            status=INITIAL_STATUS,
            issue_date=data.issue_date,
            due_date=data.due_date,
            notes=data.notes,
            tax_rate=data.tax_rate,
            delivery_fee=data.delivery_fee,
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
            items=[
                InvoiceItem(
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total=line_total(item.quantity, item.unit_price),
                )
                for item in data.items
            ],
        )
        return invoice, sender
