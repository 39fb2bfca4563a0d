"""API tests for invoice endpoints."""

from src.core.entities.invoice import InvoiceStatus
from src.core.exceptions import NumberingConflictError

LINE = {
    "description": "Konsulttjänster",
    "quantity": "8",
    "unit": "tim",
    "unit_price": "1500",
}


class TestTenantHeader:
    """Every invoice endpoint needs a tenant."""

    async def test_missing_header_rejected(self, client):
        response = await client.get("/api/invoices")

        assert response.status_code == 401
        body = response.json()
        assert body["error_code"] == "MISSING_TENANT"
        assert body["hint"]

    async def test_blank_header_rejected(self, client):
        response = await client.get("/api/invoices", headers={"X-Tenant-ID": "  "})

        assert response.status_code == 401


class TestPreviewTotals:
    """Tests for POST /api/invoices/totals."""

    async def test_live_totals(self, client, headers):
        response = await client.post(
            "/api/invoices/totals", json={"items": [LINE]}, headers=headers
        )

        assert response.status_code == 200
        totals = response.json()["totals"]
        assert totals["net"] == "12000.00"
        assert totals["tax"] == "3000.00"
        assert totals["gross"] == "15000.00"
        assert totals["gross_formatted"] == "15 000,00 SEK"

    async def test_half_filled_row_is_zero(self, client, headers):
        response = await client.post(
            "/api/invoices/totals",
            json={"items": [{"description": "Ny rad"}]},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["totals"]["gross"] == "0.00"

    async def test_gross_matches_rounded_net_plus_tax(self, client, headers):
        response = await client.post(
            "/api/invoices/totals",
            json={"items": [{"description": "Frakt", "quantity": "1.5", "unit_price": "3.33"}]},
            headers=headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["totals"]["net"] == "5.00"
        assert data["totals"]["tax"] == "1.25"
        assert data["totals"]["gross"] == "6.25"
        assert data["totals"]["gross_formatted"] == "6,25 SEK"
        assert data["items"][0]["gross"] == "6.25"

    async def test_out_of_range_rate_is_422(self, client, headers):
        response = await client.post(
            "/api/invoices/totals",
            json={"items": [{**LINE, "tax_rate_percent": "150"}]},
            headers=headers,
        )

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestNextNumber:
    async def test_next_number(self, client, headers, mock_invoice_store):
        mock_invoice_store.list_invoice_numbers.return_value = ["20240041", "2024-042"]

        response = await client.get("/api/invoices/next-number?year=2024", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["invoice_number"] == "20240042"
        assert data["skipped"] == ["2024-042"]


class TestCreateInvoice:
    """Tests for POST /api/invoices."""

    async def test_created(self, client, headers):
        response = await client.post(
            "/api/invoices",
            json={"customer_id": "cust-1", "items": [LINE]},
            headers=headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["invoice_number"] == "20240002"
        assert data["status"] == "draft"
        assert data["customer_name"] == "Byggmästarna AB"
        assert data["due_date"] == "2024-06-09"
        assert data["items"][0]["gross"] == "15000.00"

    async def test_all_form_errors_returned(self, client, headers, mock_invoice_store):
        response = await client.post(
            "/api/invoices",
            json={
                "items": [{"quantity": "1"}],
                "issue_date": "2024-05-10",
                "due_date": "2024-05-01",
            },
            headers=headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "INVOICE_VALIDATION_FAILED"
        assert [e["field"] for e in body["errors"]] == ["customer", "items[0]", "due_date"]
        mock_invoice_store.create_invoice.assert_not_awaited()

    async def test_unknown_customer(self, client, headers, mock_customer_store):
        mock_customer_store.get_customer.return_value = None

        response = await client.post(
            "/api/invoices",
            json={"customer_id": "nope", "items": [LINE]},
            headers=headers,
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "CUSTOMER_NOT_FOUND"

    async def test_invoice_number_charset_enforced(self, client, headers, mock_invoice_store):
        response = await client.post(
            "/api/invoices",
            json={"customer_id": "cust-1", "items": [LINE], "invoice_number": 'F"2024€1'},
            headers=headers,
        )

        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "invoice_number"
        mock_invoice_store.create_invoice.assert_not_awaited()

    async def test_persistent_number_conflict(self, client, headers, mock_invoice_store):
        mock_invoice_store.create_invoice.side_effect = NumberingConflictError(
            "20240002", "tenant-a"
        )

        response = await client.post(
            "/api/invoices",
            json={"customer_id": "cust-1", "items": [LINE]},
            headers=headers,
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "INVOICE_NUMBER_CONFLICT"
        assert mock_invoice_store.create_invoice.await_count == 2


class TestReadInvoices:
    async def test_list(self, client, headers):
        response = await client.get("/api/invoices", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["invoices"][0]["customer_name"] == "Byggmästarna AB"

    async def test_list_status_filter(self, client, headers, mock_invoice_store):
        await client.get("/api/invoices?status=paid", headers=headers)

        kwargs = mock_invoice_store.list_invoices.await_args.kwargs
        assert kwargs["status"] == InvoiceStatus.PAID

    async def test_list_search_and_total(
        self, client, headers, mock_invoice_store, mock_customer_store
    ):
        mock_invoice_store.count_invoices.return_value = 42

        response = await client.get("/api/invoices?q=bygg&limit=1", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 42
        assert data["invoices"][0]["customer_name"] == "Byggmästarna AB"
        assert mock_invoice_store.list_invoices.await_args.kwargs["search"] == "bygg"
        mock_invoice_store.count_invoices.assert_awaited_once_with(
            "tenant-a", status=None, search="bygg"
        )
        mock_customer_store.get_customers.assert_awaited_once_with("tenant-a", ["cust-1"])

    async def test_get(self, client, headers):
        response = await client.get("/api/invoices/inv-1", headers=headers)

        assert response.status_code == 200
        assert response.json()["totals"]["net_formatted"] == "12 000,00 SEK"

    async def test_get_missing(self, client, headers, mock_invoice_store):
        mock_invoice_store.get_invoice.return_value = None

        response = await client.get("/api/invoices/missing", headers=headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "INVOICE_NOT_FOUND"


class TestUpdateInvoice:
    async def test_update(self, client, headers):
        response = await client.put(
            "/api/invoices/inv-1",
            json={"customer_id": "cust-1", "items": [{**LINE, "quantity": "10"}]},
            headers=headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["invoice_number"] == "20240001"
        assert data["totals"]["gross"] == "18750.00"

    async def test_paid_invoice_frozen(self, client, headers, sample_invoice):
        sample_invoice.status = InvoiceStatus.PAID

        response = await client.put(
            "/api/invoices/inv-1",
            json={"customer_id": "cust-1", "items": [LINE]},
            headers=headers,
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "TERMINAL_STATE"


class TestChangeStatus:
    async def test_send(self, client, headers):
        response = await client.post(
            "/api/invoices/inv-1/status", json={"status": "sent"}, headers=headers
        )

        assert response.status_code == 200
        assert response.json()["status"] == "sent"

    async def test_disallowed_transition(self, client, headers):
        response = await client.post(
            "/api/invoices/inv-1/status", json={"status": "paid"}, headers=headers
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_STATUS_TRANSITION"

    async def test_unknown_status_is_422(self, client, headers):
        response = await client.post(
            "/api/invoices/inv-1/status", json={"status": "archived"}, headers=headers
        )

        assert response.status_code == 422


class TestDeleteInvoice:
    async def test_delete_draft(self, client, headers, mock_invoice_store):
        response = await client.delete("/api/invoices/inv-1", headers=headers)

        assert response.status_code == 204
        mock_invoice_store.delete_invoice.assert_awaited_once_with("tenant-a", "inv-1")

    async def test_cancelled_invoice_kept(self, client, headers, sample_invoice, mock_invoice_store):
        sample_invoice.status = InvoiceStatus.CANCELLED

        response = await client.delete("/api/invoices/inv-1", headers=headers)

        assert response.status_code == 409
        mock_invoice_store.delete_invoice.assert_not_awaited()


class TestDownloadPdf:
    async def test_attachment(self, client, headers):
        response = await client.get("/api/invoices/inv-1/pdf", headers=headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == (
            'attachment; filename="faktura_20240001.pdf"; '
            "filename*=UTF-8''faktura_20240001.pdf"
        )
        assert response.content.startswith(b"%PDF")

    async def test_non_latin1_number_in_file_name(self, client, headers, sample_invoice):
        sample_invoice.invoice_number = 'Nr "2024€1"'

        response = await client.get("/api/invoices/inv-1/pdf", headers=headers)

        assert response.status_code == 200
        assert response.headers["content-disposition"] == (
            'attachment; filename="faktura_Nr _2024_1_.pdf"; '
            "filename*=UTF-8''faktura_Nr%20%222024%E2%82%AC1%22.pdf"
        )

    async def test_inline(self, client, headers):
        response = await client.get("/api/invoices/inv-1/pdf?inline=true", headers=headers)

        assert response.headers["content-disposition"].startswith("inline;")
