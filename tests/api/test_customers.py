"""API tests for customer and company endpoints."""

from src.core.exceptions import CustomerInUseError


class TestCustomers:
    """Tests for /api/customers."""

    async def test_list(self, client, headers):
        response = await client.get("/api/customers", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["customers"][0]["name"] == "Byggmästarna AB"

    async def test_search(self, client, headers, mock_customer_store):
        mock_customer_store.count_customers.return_value = 7

        response = await client.get("/api/customers?q=bygg&limit=1", headers=headers)

        assert response.status_code == 200
        assert response.json()["total"] == 7
        assert mock_customer_store.list_customers.await_args.kwargs["search"] == "bygg"
        mock_customer_store.count_customers.assert_awaited_once_with("tenant-a", search="bygg")

    async def test_create(self, client, headers, mock_customer_store):
        response = await client.post(
            "/api/customers",
            json={
                "name": "  Nya Kunden AB ",
                "org_number": "556000-0001",
                "address": {"street": "Kungsgatan 2", "postal_code": "411 19", "city": "Göteborg"},
            },
            headers=headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Nya Kunden AB"
        assert data["address"]["country"] == "Sverige"
        stored = mock_customer_store.create_customer.await_args.args[0]
        assert stored.tenant_id == "tenant-a"

    async def test_create_requires_name(self, client, headers):
        response = await client.post("/api/customers", json={"name": ""}, headers=headers)

        assert response.status_code == 422

    async def test_blank_name_rejected(self, client, headers, mock_customer_store):
        response = await client.post("/api/customers", json={"name": "   "}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        mock_customer_store.create_customer.assert_not_awaited()

    async def test_get_missing(self, client, headers, mock_customer_store):
        mock_customer_store.get_customer.return_value = None

        response = await client.get("/api/customers/nope", headers=headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "CUSTOMER_NOT_FOUND"

    async def test_update(self, client, headers):
        response = await client.put(
            "/api/customers/cust-1",
            json={"name": "Byggmästarna Norr AB", "reference": "Per Ek"},
            headers=headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "cust-1"
        assert data["reference"] == "Per Ek"

    async def test_delete(self, client, headers):
        response = await client.delete("/api/customers/cust-1", headers=headers)

        assert response.status_code == 204

    async def test_delete_customer_with_invoices(self, client, headers, mock_customer_store):
        mock_customer_store.delete_customer.side_effect = CustomerInUseError("cust-1")

        response = await client.delete("/api/customers/cust-1", headers=headers)

        assert response.status_code == 409
        assert response.json()["error_code"] == "CUSTOMER_IN_USE"


class TestCompany:
    """Tests for /api/company."""

    async def test_get(self, client, headers):
        response = await client.get("/api/company", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["bankgiro"] == "123-4567"
        assert data["tax_rate"] == "25"

    async def test_get_before_saved(self, client, headers, mock_company_store):
        mock_company_store.get_company.return_value = None

        response = await client.get("/api/company", headers=headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "COMPANY_NOT_FOUND"

    async def test_save(self, client, headers, mock_company_store):
        response = await client.put(
            "/api/company",
            json={"name": "Konsultbolaget i Norr AB", "tax_rate": "12", "swish": "1231234567"},
            headers=headers,
        )

        assert response.status_code == 200
        saved = mock_company_store.save_company.await_args.args[0]
        assert saved.tenant_id == "tenant-a"
        assert str(saved.tax_rate) == "12"


class TestDashboard:
    async def test_summary(self, client, headers):
        response = await client.get("/api/dashboard", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total_invoices"] == 1
        assert data["draft_invoices"] == 1
        assert data["paid_percentage"] == 0
        assert data["customer_count"] == 1
        assert data["total_revenue_formatted"] == "0,00 SEK"
