"""Unit tests for GenerateInvoicePdfUseCase."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.application.use_cases.generate_invoice_pdf import GenerateInvoicePdfUseCase
from src.core.exceptions import InvoiceNotFoundError

FAKE_PDF = b"%PDF-1.4 fake"


@pytest.fixture
def mock_invoice_store(sample_invoice):
    store = AsyncMock()
    store.get_invoice = AsyncMock(return_value=sample_invoice)
    return store


@pytest.fixture
def mock_customer_store(sample_customer):
    store = AsyncMock()
    store.get_customer = AsyncMock(return_value=sample_customer)
    return store


@pytest.fixture
def mock_company_store(sample_company):
    store = AsyncMock()
    store.get_company = AsyncMock(return_value=sample_company)
    return store


@pytest.fixture
def mock_renderer():
    renderer = MagicMock()
    renderer.render.return_value = FAKE_PDF
    return renderer


@pytest.fixture
def use_case(mock_invoice_store, mock_customer_store, mock_company_store, mock_renderer):
    return GenerateInvoicePdfUseCase(
        invoice_store=mock_invoice_store,
        customer_store=mock_customer_store,
        company_store=mock_company_store,
        renderer=mock_renderer,
    )


class TestGenerateInvoicePdfUseCase:
    """Tests for GenerateInvoicePdfUseCase."""

    async def test_renders_with_company_and_customer(
        self, use_case, mock_renderer, sample_invoice, sample_company, sample_customer
    ):
        result = await use_case.execute("tenant-a", "inv-1")

        assert result.pdf_bytes == FAKE_PDF
        assert result.file_size == len(FAKE_PDF)
        assert result.invoice_number == "20240001"
        mock_renderer.render.assert_called_once_with(
            sample_invoice, company=sample_company, customer=sample_customer
        )

    async def test_swedish_file_name(self, use_case):
        result = await use_case.execute("tenant-a", "inv-1")

        assert result.file_name == "faktura_20240001.pdf"

    async def test_english_file_name(self, use_case, sample_invoice):
        sample_invoice.language = "en"

        result = await use_case.execute("tenant-a", "inv-1")

        assert result.file_name == "invoice_20240001.pdf"

    async def test_renders_without_company_profile(
        self, use_case, mock_company_store, mock_renderer
    ):
        mock_company_store.get_company.return_value = None

        result = await use_case.execute("tenant-a", "inv-1")

        assert result.pdf_bytes == FAKE_PDF
        assert mock_renderer.render.call_args.kwargs["company"] is None

    async def test_not_found(self, use_case, mock_invoice_store, mock_renderer):
        mock_invoice_store.get_invoice.return_value = None

        with pytest.raises(InvoiceNotFoundError):
            await use_case.execute("tenant-a", "missing")

        mock_renderer.render.assert_not_called()
