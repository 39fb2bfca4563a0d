"""
Invoice PDF renderer using fpdf2.

Lays out a Swedish (or English) invoice: company header with optional logo,
recipient block, paginated line-item table with a repeated header row,
totals, payment details and statutory notice. Amounts come from the
invoice's stored totals and the totals engine; nothing is recomputed here
beyond per-line display amounts.
"""

import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from decimal import Decimal

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from src.config.settings import PdfSettings, get_settings
from src.core.entities.company import Company
from src.core.entities.customer import Customer
from src.core.entities.invoice import Invoice
from src.core.services.money import format_amount, presented_amounts
from src.core.services.totals import compute_line_amounts

LABELS: dict[str, dict[str, str]] = {
    "sv": {
        "title": "FAKTURA",
        "credit_title": "KREDITFAKTURA",
        "number": "Fakturanummer",
        "date": "Fakturadatum",
        "due_date": "Förfallodatum",
        "recipient": "Fakturamottagare",
        "org_number": "Org.nr",
        "vat_number": "Momsreg.nr",
        "reference": "Er referens",
        "our_reference": "Vår referens",
        "phone": "Tel",
        "email": "E-post",
        "description": "Beskrivning",
        "quantity": "Antal",
        "unit": "Enhet",
        "price": "Pris",
        "tax": "Moms",
        "amount": "Summa",
        "net": "Netto",
        "total": "Att betala",
        "payment": "Betalningsinformation",
        "terms": "Betalningsvillkor",
        "pay_reference": "Ange fakturanummer {number} som referens",
        "page": "Sida {page} av {{nb}}",
    },
    "en": {
        "title": "INVOICE",
        "credit_title": "CREDIT NOTE",
        "number": "Invoice number",
        "date": "Invoice date",
        "due_date": "Due date",
        "recipient": "Bill to",
        "org_number": "Reg. no",
        "vat_number": "VAT no",
        "reference": "Your reference",
        "our_reference": "Our reference",
        "phone": "Phone",
        "email": "Email",
        "description": "Description",
        "quantity": "Qty",
        "unit": "Unit",
        "price": "Price",
        "tax": "VAT",
        "amount": "Amount",
        "net": "Net",
        "total": "Amount due",
        "payment": "Payment details",
        "terms": "Payment terms",
        "pay_reference": "Please quote invoice number {number} with your payment",
        "page": "Page {page} of {{nb}}",
    },
}

LEGAL_NOTICE = (
    "Innehar F-skattebevis",
    "Vid försenad betalning debiteras dröjsmålsränta enligt räntelagen.",
    "Mervärdesskatt beräknad enligt svenska momsregler.",
)

# Description | Qty | Unit | Price | VAT | Amount
COL_WIDTHS = (72, 18, 16, 30, 16, 38)


def _safe_text(text: str | None) -> str:
    """Replace characters the core PDF fonts cannot encode."""
    if not text:
        return ""
    return text.encode("latin-1", errors="replace").decode("latin-1")


def _format_quantity(value: Decimal | None, language: str) -> str:
    if value is None:
        return ""
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text.replace(".", ",") if language == "sv" else text


class IInvoicePdfRenderer(ABC):
    """Interface for invoice PDF rendering implementations."""

    @abstractmethod
    def render(
        self,
        invoice: Invoice,
        company: Company | None = None,
        customer: Customer | None = None,
    ) -> bytes:
        """Render an invoice into PDF bytes."""
        ...


class _InvoicePdf(FPDF):
    """FPDF subclass that renders a page-numbered footer."""

    def __init__(self, pdf_settings: PdfSettings, labels: dict[str, str]) -> None:
        super().__init__()
        self._pdf_settings = pdf_settings
        self._labels = labels

    def footer(self) -> None:
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        if self._pdf_settings.footer_text:
            self.cell(0, 5, _safe_text(self._pdf_settings.footer_text), align="L")
            self.set_x(self.l_margin)
        self.cell(0, 5, self._labels["page"].format(page=self.page_no()), align="R")


class Fpdf2InvoiceRenderer(IInvoicePdfRenderer):
    """Renders invoice PDFs using fpdf2 core fonts."""

    def __init__(self, pdf_settings: PdfSettings | None = None) -> None:
        if pdf_settings is None:
            pdf_settings = get_settings().pdf
        self._settings = pdf_settings

    def render(
        self,
        invoice: Invoice,
        company: Company | None = None,
        customer: Customer | None = None,
    ) -> bytes:
        labels = LABELS.get(invoice.language, LABELS["sv"])

        pdf = _InvoicePdf(self._settings, labels)
        pdf.set_title(_safe_text(f"{labels['title']} {invoice.invoice_number}"))
        pdf.set_creation_date(datetime.now(timezone.utc))
        pdf.alias_nb_pages()
        pdf.set_auto_page_break(auto=True, margin=20)
        pdf.add_page()

        self._render_header(pdf, invoice, company, labels)
        self._render_recipient(pdf, invoice, customer, labels)
        self._render_items_table(pdf, invoice, labels)
        self._render_summary(pdf, invoice, labels)
        self._render_payment(pdf, invoice, company, labels)
        if self._settings.show_legal_notice and invoice.language == "sv":
            self._render_legal_notice(pdf)

        return bytes(pdf.output())

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _render_header(
        self,
        pdf: FPDF,
        invoice: Invoice,
        company: Company | None,
        labels: dict[str, str],
    ) -> None:
        top = pdf.get_y()

        if company and company.logo_path and os.path.isfile(company.logo_path):
            pdf.image(
                company.logo_path,
                x=10,
                y=top,
                w=self._settings.logo_max_width,
                h=self._settings.logo_max_height,
                keep_aspect_ratio=True,
            )
            pdf.set_y(top + self._settings.logo_max_height + 2)

        title = labels["credit_title"] if invoice.is_credit else labels["title"]
        pdf.set_font("Helvetica", "B", 18)
        pdf.cell(0, 10, title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        pdf.set_font("Helvetica", "", 10)
        for label, value in (
            (labels["number"], invoice.invoice_number),
            (labels["date"], invoice.issue_date.isoformat()),
            (labels["due_date"], invoice.due_date.isoformat()),
        ):
            pdf.cell(0, 5, _safe_text(f"{label}: {value}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        if invoice.reference:
            pdf.cell(
                0, 5, _safe_text(f"{labels['our_reference']}: {invoice.reference}"),
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        left_bottom = pdf.get_y()

        # Company block, right aligned
        if company:
            lines = [
                company.address.street,
                f"{company.address.postal_code} {company.address.city}".strip(),
                company.address.country,
                f"{labels['org_number']}: {company.org_number}" if company.org_number else "",
                f"{labels['vat_number']}: {company.vat_number}" if company.vat_number else "",
                f"{labels['phone']}: {company.contact.phone}" if company.contact.phone else "",
                f"{labels['email']}: {company.contact.email}" if company.contact.email else "",
            ]
            pdf.set_xy(110, top)
            pdf.set_font("Helvetica", "B", 12)
            pdf.cell(90, 6, _safe_text(company.name), align="R", new_x=XPos.LEFT, new_y=YPos.NEXT)
            pdf.set_font("Helvetica", "", 9)
            for line in filter(None, lines):
                pdf.cell(90, 4.5, _safe_text(line), align="R", new_x=XPos.LEFT, new_y=YPos.NEXT)

        pdf.set_xy(pdf.l_margin, max(left_bottom, pdf.get_y()) + 4)
        self._render_separator(pdf)

    @staticmethod
    def _render_recipient(
        pdf: FPDF,
        invoice: Invoice,
        customer: Customer | None,
        labels: dict[str, str],
    ) -> None:
        pdf.set_font("Helvetica", "B", 10)
        pdf.cell(0, 6, f"{labels['recipient']}:", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_font("Helvetica", "", 10)

        if customer is None:
            pdf.cell(0, 5, invoice.customer_id, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        else:
            lines = [
                customer.name,
                f"{labels['org_number']}: {customer.org_number}" if customer.org_number else "",
                customer.address.street,
                f"{customer.address.postal_code} {customer.address.city}".strip(),
                customer.address.country,
            ]
            for line in filter(None, lines):
                pdf.cell(0, 5, _safe_text(line), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        if invoice.customer_reference:
            pdf.cell(
                0, 5, _safe_text(f"{labels['reference']}: {invoice.customer_reference}"),
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        pdf.ln(4)

    @staticmethod
    def _render_separator(pdf: FPDF) -> None:
        y = pdf.get_y()
        pdf.set_draw_color(100, 100, 100)
        pdf.line(10, y, 200, y)
        pdf.set_draw_color(0, 0, 0)
        pdf.ln(4)

    @staticmethod
    def _render_table_header(pdf: FPDF, labels: dict[str, str]) -> None:
        headers = (
            labels["description"],
            labels["quantity"],
            labels["unit"],
            labels["price"],
            labels["tax"],
            labels["amount"],
        )
        pdf.set_font("Helvetica", "B", 9)
        pdf.set_fill_color(235, 235, 235)
        for i, header in enumerate(headers):
            pdf.cell(COL_WIDTHS[i], 7, header, border="B", fill=True, align="L" if i == 0 else "R")
        pdf.ln()
        pdf.set_font("Helvetica", "", 9)

    def _render_items_table(
        self, pdf: FPDF, invoice: Invoice, labels: dict[str, str]
    ) -> None:
        """Item rows; the header row is repeated after every page break."""
        language = invoice.language
        self._render_table_header(pdf, labels)
        row_height = 6

        for item in invoice.items:
            if pdf.will_page_break(row_height):
                pdf.add_page()
                self._render_table_header(pdf, labels)

            line = compute_line_amounts(item)
            description = item.description or ""
            if item.article_number:
                description = f"{item.article_number}  {description}"
            if item.discount_percent:
                description = f"{description} (-{_format_quantity(item.discount_percent, language)}%)"

            pdf.cell(COL_WIDTHS[0], row_height, _safe_text(description[:48]), border="B")
            pdf.cell(
                COL_WIDTHS[1], row_height, _format_quantity(item.quantity, language),
                border="B", align="R",
            )
            pdf.cell(COL_WIDTHS[2], row_height, _safe_text(item.unit), border="B", align="R")
            pdf.cell(
                COL_WIDTHS[3], row_height,
                format_amount(item.unit_price or Decimal("0"), language=language),
                border="B", align="R",
            )
            pdf.cell(
                COL_WIDTHS[4], row_height,
                f"{_format_quantity(item.tax_rate_percent, language)}%",
                border="B", align="R",
            )
            pdf.cell(
                COL_WIDTHS[5], row_height, format_amount(line.net, language=language),
                border="B", align="R",
            )
            pdf.ln()

        pdf.ln(4)

    @staticmethod
    def _render_summary(pdf: FPDF, invoice: Invoice, labels: dict[str, str]) -> None:
        net, tax, gross = presented_amounts(invoice.totals.net, invoice.totals.tax)
        rows = (
            (labels["net"], net, False),
            (labels["tax"], tax, False),
            (labels["total"], gross, True),
        )
        if pdf.will_page_break(8 * len(rows)):
            pdf.add_page()

        for label, amount, bold in rows:
            pdf.set_font("Helvetica", "B" if bold else "", 12 if bold else 10)
            pdf.cell(130, 7, f"{label}:", align="R")
            pdf.cell(
                0, 7, format_amount(amount, invoice.currency, invoice.language),
                align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        pdf.ln(4)

    @staticmethod
    def _render_payment(
        pdf: FPDF,
        invoice: Invoice,
        company: Company | None,
        labels: dict[str, str],
    ) -> None:
        lines = [
            f"{labels['terms']}: {invoice.payment_terms}" if invoice.payment_terms else "",
            f"{labels['due_date']}: {invoice.due_date.isoformat()}",
        ]
        if company:
            lines += [
                f"Bankgiro: {company.bankgiro}" if company.bankgiro else "",
                f"Plusgiro: {company.plusgiro}" if company.plusgiro else "",
                f"Swish: {company.swish}" if company.swish else "",
                f"IBAN: {company.iban}" if company.iban else "",
                f"BIC/SWIFT: {company.swift}" if company.swift else "",
            ]
        lines.append(labels["pay_reference"].format(number=invoice.invoice_number))

        pdf.set_font("Helvetica", "B", 10)
        pdf.cell(0, 6, labels["payment"], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_font("Helvetica", "", 9)
        for line in filter(None, lines):
            pdf.cell(0, 5, _safe_text(line), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        if invoice.notes:
            pdf.ln(2)
            pdf.multi_cell(0, 5, _safe_text(invoice.notes), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    @staticmethod
    def _render_legal_notice(pdf: FPDF) -> None:
        pdf.ln(6)
        pdf.set_font("Helvetica", "", 7)
        pdf.set_text_color(110, 110, 110)
        for line in LEGAL_NOTICE:
            pdf.cell(0, 4, _safe_text(line), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_text_color(0, 0, 0)
