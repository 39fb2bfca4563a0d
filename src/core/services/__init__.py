"""
Core business logic services.

Layer-pure functions that depend only on:
- src/core/entities/*
- src/core/exceptions.py

NO infrastructure imports, no logging, no I/O.
"""

from src.core.services.invoice_assembler import (
    AssemblyResult,
    FieldError,
    InvoiceDefaults,
    InvoiceDraft,
    apply_default_tax_rate,
    assemble_invoice,
    replace_items,
    validate_draft,
)
from src.core.services.invoice_status import (
    ALLOWED_TRANSITIONS,
    can_transition,
    transition_status,
)
from src.core.services.money import (
    format_amount,
    presented_amounts,
    quantize_amount,
    to_decimal,
)
from src.core.services.numbering import (
    format_invoice_number,
    malformed_invoice_numbers,
    next_invoice_number,
    parse_invoice_number,
)
from src.core.services.totals import (
    compute_line_amounts,
    compute_line_breakdown,
    compute_totals,
)

__all__ = [
    # Totals
    "compute_totals",
    "compute_line_amounts",
    "compute_line_breakdown",
    # Money
    "to_decimal",
    "quantize_amount",
    "format_amount",
    "presented_amounts",
    # Numbering
    "next_invoice_number",
    "parse_invoice_number",
    "format_invoice_number",
    "malformed_invoice_numbers",
    # Assembly
    "assemble_invoice",
    "validate_draft",
    "apply_default_tax_rate",
    "replace_items",
    "AssemblyResult",
    "FieldError",
    "InvoiceDraft",
    "InvoiceDefaults",
    # Status
    "transition_status",
    "can_transition",
    "ALLOWED_TRANSITIONS",
]
