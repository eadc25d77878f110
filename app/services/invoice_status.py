"""
Invoice status transitions.
"""

from typing import Union

from app.core.exceptions import InvalidStatusError
from app.models.invoice import InvoiceStatus


INITIAL_STATUS = InvoiceStatus.DRAFT


def parse_status(value: Union[str, InvoiceStatus]) -> InvoiceStatus:
    """
    Map a raw value onto a recognised status.

    Raises:
        InvalidStatusError: If the value is not DRAFT, SENT or PAID
    """
    if isinstance(value, InvoiceStatus):
        return value
    try:
        return InvoiceStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in InvoiceStatus)
        raise InvalidStatusError(
            f"Invalid status '{value}', expected one of: {allowed}",
            extra={"allowed": [s.value for s in InvoiceStatus]},
        ) from None


def transition(current: InvoiceStatus, requested: Union[str, InvoiceStatus]) -> InvoiceStatus:
    """
    Return the status an invoice moves to.

    Any recognised status may follow any other, including the current one.
    """
    return parse_status(requested)
