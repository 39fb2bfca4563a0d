"""
Service factory functions for dependency injection.

Wires configuration and infrastructure implementations into the objects
use cases need. Use cases should import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from src.config import Settings, get_settings
from src.core.entities.company import Company
from src.core.services import InvoiceDefaults

if TYPE_CHECKING:
    from src.infrastructure.pdf import IInvoicePdfRenderer


# Singleton service instances
_pdf_renderer: "IInvoicePdfRenderer | None" = None


def get_invoice_defaults(
    company: Company | None = None,
    settings: Settings | None = None,
) -> InvoiceDefaults:
    """
    Build invoice defaults from settings.

    The company's own tax rate, when a profile exists, replaces the
    configured default rate.

    Args:
        company: Optional tenant company profile
        settings: Optional settings override

    Returns:
        InvoiceDefaults for assembling new invoices
    """
    invoice_settings = (settings or get_settings()).invoice
    return InvoiceDefaults(
        currency=invoice_settings.default_currency,
        tax_rate=company.tax_rate if company else invoice_settings.default_tax_rate,
        payment_days=invoice_settings.payment_days,
        payment_terms=invoice_settings.payment_terms,
        language=invoice_settings.default_language,
    )


def get_pdf_renderer() -> "IInvoicePdfRenderer":
    """Get or create the invoice PDF renderer."""
    global _pdf_renderer

    if _pdf_renderer is None:
        # Lazy import infrastructure to avoid circular imports
        from src.infrastructure.pdf import Fpdf2InvoiceRenderer

        _pdf_renderer = Fpdf2InvoiceRenderer(get_settings().pdf)
    return _pdf_renderer


def reset_services() -> None:
    """Reset all service singletons (for testing)."""
    global _pdf_renderer
    _pdf_renderer = None
