"""Invoice status transitions."""

from datetime import datetime

from src.core.entities.invoice import Invoice, InvoiceStatus
from src.core.exceptions import InvalidStatusTransitionError

ALLOWED_TRANSITIONS: dict[InvoiceStatus, frozenset[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.SENT, InvoiceStatus.CANCELLED}),
    InvoiceStatus.SENT: frozenset(
        {InvoiceStatus.PAID, InvoiceStatus.LATE, InvoiceStatus.CANCELLED}
    ),
    InvoiceStatus.LATE: frozenset({InvoiceStatus.PAID, InvoiceStatus.CANCELLED}),
    InvoiceStatus.PAID: frozenset(),
    InvoiceStatus.CANCELLED: frozenset(),
}


def can_transition(current: InvoiceStatus, target: InvoiceStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def transition_status(
    invoice: Invoice,
    target: InvoiceStatus,
    now: datetime | None = None,
) -> Invoice:
    """
    Move an invoice to ``target`` status.

    Returns an updated copy; the given invoice is left untouched.

    Raises:
        InvalidStatusTransitionError: If the move is not allowed, including
            any move out of a terminal status.
    """
    if not can_transition(invoice.status, target):
        raise InvalidStatusTransitionError(
            invoice.invoice_number, invoice.status.value, target.value
        )
    return invoice.model_copy(
        update={"status": target, "updated_at": now or datetime.utcnow()}
    )
