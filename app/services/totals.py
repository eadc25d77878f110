"""
Invoice money calculations.

Pure functions shared by invoice creation, invoice update and the public
PDF preview so that all of them produce the same figures.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Protocol, Union

from app.core.exceptions import InvalidAmountError


logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, float, str]


class PricedLine(Protocol):
    """Anything carrying a quantity and a unit price."""

    quantity: int
    unit_price: Decimal


@dataclass(frozen=True)
class InvoiceTotals:
    """Aggregate amounts of an invoice."""

    subtotal: Decimal
    tax: Decimal
    total: Decimal


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _ensure_non_negative(label: str, amount: Decimal) -> Decimal:
    if amount < 0:
        logger.error(f"Negative {label} computed: {amount}")
        raise InvalidAmountError(f"Computed {label} is negative ({amount})")
    return amount


def line_total(quantity: int, unit_price: Number) -> Decimal:
    """Total of a single line: quantity * unit_price."""
    amount = (to_decimal(quantity) * to_decimal(unit_price)).quantize(CENTS, rounding=ROUND_HALF_UP)
    return _ensure_non_negative("line total", amount)


def compute_totals(
    line_totals: Iterable[Number],
    tax_rate: Number,
    delivery_fee: Number,
) -> InvoiceTotals:
    """
    Aggregate already computed line totals.

    The order of operations is fixed: sum the lines, apply the tax
    percentage to the subtotal, then add the delivery fee.
    """
    subtotal = sum((to_decimal(t) for t in line_totals), ZERO)
    subtotal = _ensure_non_negative("subtotal", subtotal)

    tax = (subtotal * to_decimal(tax_rate) / Decimal(100)).quantize(CENTS, rounding=ROUND_HALF_UP)
    tax = _ensure_non_negative("tax", tax)

    total = subtotal + tax + to_decimal(delivery_fee)
    total = _ensure_non_negative("total", total.quantize(CENTS, rounding=ROUND_HALF_UP))

    return InvoiceTotals(subtotal=subtotal, tax=tax, total=total)


def calculate(
    lines: Iterable[PricedLine],
    tax_rate: Number,
    delivery_fee: Number,
) -> InvoiceTotals:
    """Compute invoice totals from priced lines."""
    return compute_totals(
        (line_total(line.quantity, line.unit_price) for line in lines),
        tax_rate,
        delivery_fee,
    )
