"""
Invoice item reconciliation.

Diffs the line items requested by an update against the items stored on
the invoice and produces the plan to apply: which stored items are kept and
overwritten, which lines are new, which stored items go away, and the
totals of the resulting set.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from app.core.exceptions import BusinessValidationError, ItemNotFoundError
from app.services.totals import InvoiceTotals, Number, compute_totals, line_total, to_decimal


class StoredItem(Protocol):
    id: int
    description: str
    quantity: int
    unit_price: Decimal


class TargetItem(Protocol):
    id: Optional[int]
    description: str
    quantity: int
    unit_price: Decimal


@dataclass(frozen=True)
class ReconciledLine:
    """One line of the resulting item set, in request order."""

    item_id: Optional[int]
    description: str
    quantity: int
    unit_price: Decimal
    total: Decimal

    @property
    def is_new(self) -> bool:
        return self.item_id is None


@dataclass
class ReconciliationPlan:
    lines: list[ReconciledLine] = field(default_factory=list)
    deleted_ids: list[int] = field(default_factory=list)
    totals: Optional[InvoiceTotals] = None

    @property
    def updated(self) -> list[ReconciledLine]:
        return [line for line in self.lines if not line.is_new]

    @property
    def inserted(self) -> list[ReconciledLine]:
        return [line for line in self.lines if line.is_new]


def reconcile_items(
    stored: Sequence[StoredItem],
    targets: Sequence[TargetItem],
    tax_rate: Number,
    delivery_fee: Number,
    invoice_id: Optional[int] = None,
) -> ReconciliationPlan:
    """
    Build the plan turning ``stored`` into ``targets``.

    Raises:
        ItemNotFoundError: A target carries an id the invoice does not own.
            Nothing is applied in that case.
        BusinessValidationError: The same id is referenced twice.
    """
    lookup = {item.id: item for item in stored}
    kept: set[int] = set()
    plan = ReconciliationPlan()

    for target in targets:
        if target.id is not None:
            if target.id not in lookup:
                raise ItemNotFoundError(target.id, invoice_id)
            if target.id in kept:
                raise BusinessValidationError(
                    f"Invoice item {target.id} is referenced more than once",
                    error_code="DUPLICATE_INVOICE_ITEM",
                )
            kept.add(target.id)

        unit_price = to_decimal(target.unit_price)
        plan.lines.append(
            ReconciledLine(
                item_id=target.id,
                description=target.description,
                quantity=target.quantity,
                unit_price=unit_price,
                total=line_total(target.quantity, unit_price),
            )
        )

    plan.deleted_ids = [item.id for item in stored if item.id not in kept]
    plan.totals = compute_totals((line.total for line in plan.lines), tax_rate, delivery_fee)
    return plan
