"""
Invoice store.
Invoices with their line items, scoped by owner and soft-delete aware.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, func, update, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.client import Client
from app.models.invoice import Invoice, InvoiceItem, InvoiceStatus
from app.services.reconciler import ReconciliationPlan


class InvoiceRepository:
    """Data access for invoices and invoice items."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, invoice: Invoice) -> Invoice:
        self.db.add(invoice)
        await self.db.flush()
        return await self.reload(invoice.id, invoice.user_id)

    async def get_by_id(self, invoice_id: int, user_id: int) -> Invoice | None:
        """
        Get an active invoice by ID with items and client loaded.

        Args:
            invoice_id: Invoice ID
            user_id: Owner's user ID

        Returns:
            Invoice if found and owned by user, None otherwise
        """
        result = await self.db.execute(
            select(Invoice).where(
                Invoice.id == invoice_id,
                Invoice.user_id == user_id,
                Invoice.deleted_at.is_(None),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def reload(self, invoice_id: int, user_id: int) -> Invoice:
        """Re-read an invoice, overwriting whatever the session holds for it."""
        result = await self.db.execute(
            select(Invoice)
            .where(Invoice.id == invoice_id, Invoice.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def list_by_owner(
        self,
        user_id: int,
        skip: int = 0,
        limit: int = 20,
        status: InvoiceStatus | None = None,
        search: str | None = None,
    ) -> tuple[list[Invoice], int]:
        """
        List active invoices with pagination, status filter and search.

        The search term matches the invoice number, the notes, the inline
        recipient fields and the name, email, phone or address of the
        linked client.

        Returns:
            Tuple of (invoices list, total count)
        """
        conditions = [Invoice.user_id == user_id, Invoice.deleted_at.is_(None)]

        if status:
            conditions.append(Invoice.status == status)

        if search:
            search_filter = f"%{search}%"
            matching_clients = select(Client.id).where(
                Client.user_id == user_id,
                or_(
                    Client.name.ilike(search_filter),
                    Client.email.ilike(search_filter),
                    Client.phone.ilike(search_filter),
                    Client.address.ilike(search_filter),
                ),
            )
            conditions.append(
                or_(
                    Invoice.invoice_number.ilike(search_filter),
                    Invoice.notes.ilike(search_filter),
                    Invoice.client_name.ilike(search_filter),
                    Invoice.client_email.ilike(search_filter),
                    Invoice.client_id.in_(matching_clients),
                )
            )

        total_result = await self.db.execute(
            select(func.count(Invoice.id)).where(*conditions)
        )
        total = total_result.scalar() or 0

        result = await self.db.execute(
            select(Invoice)
            .where(*conditions)
            .order_by(Invoice.id.desc())
            .offset(skip)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all()), total

    async def number_exists(self, user_id: int, invoice_number: str) -> bool:
        """Whether the user already holds this number, including deleted invoices."""
        result = await self.db.execute(
            select(Invoice.id)
            .where(Invoice.user_id == user_id, Invoice.invoice_number == invoice_number)
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def count_numbers_with_prefix(self, user_id: int, prefix: str) -> int:
        result = await self.db.execute(
            select(func.count(Invoice.id)).where(
                Invoice.user_id == user_id,
                Invoice.invoice_number.like(f"{prefix}%"),
            )
        )
        return result.scalar() or 0

    async def save(self, invoice: Invoice) -> Invoice:
        await self.db.flush()
        return await self.reload(invoice.id, invoice.user_id)

    async def apply_item_plan(self, invoice: Invoice, plan: ReconciliationPlan) -> Invoice:
        """
        Make the invoice's items match a reconciliation plan.

        Kept items are overwritten in place, new lines are inserted and the
        items the plan drops are removed through the delete-orphan cascade.
        Stored totals are replaced with the plan's totals.
        """
        existing = {item.id: item for item in invoice.items}
        items: list[InvoiceItem] = []

        for line in plan.lines:
            if line.is_new:
                item = InvoiceItem(
                    description=line.description,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    total=line.total,
                )
            else:
                item = existing[line.item_id]
                item.description = line.description
                item.quantity = line.quantity
                item.unit_price = line.unit_price
                item.total = line.total
            items.append(item)

        invoice.items = items
        invoice.subtotal = plan.totals.subtotal
        invoice.tax = plan.totals.tax
        invoice.total = plan.totals.total
        return await self.save(invoice)

    async def soft_delete(self, invoice: Invoice, deleted_at: datetime) -> None:
        invoice.deleted_at = deleted_at
        await self.db.flush()

    async def soft_delete_by_owner(self, user_id: int, deleted_at: datetime) -> int:
        """Soft-delete every active invoice of a user. Returns affected rows."""
        result = await self.db.execute(
            update(Invoice)
            .where(Invoice.user_id == user_id, Invoice.deleted_at.is_(None))
            .values(deleted_at=deleted_at)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def restore_by_owner(self, user_id: int) -> int:
        """Clear the soft-delete marker on every invoice of a user. Returns affected rows."""
        result = await self.db.execute(
            update(Invoice)
            .where(Invoice.user_id == user_id, Invoice.deleted_at.is_not(None))
            .values(deleted_at=None)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def sum_totals(self, user_id: int, status: InvoiceStatus | None = None) -> Decimal:
        """Sum of `total` over the user's active invoices, optionally by status."""
        query = select(func.sum(Invoice.total)).where(
            Invoice.user_id == user_id,
            Invoice.deleted_at.is_(None),
        )
        if status is not None:
            query = query.where(Invoice.status == status)

        result = await self.db.execute(query)
        return result.scalar() or Decimal("0.00")
