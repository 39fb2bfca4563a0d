"""Tests for SQLiteCustomerStore."""

import pytest

from src.core.entities.customer import Contact, Customer
from src.core.exceptions import CustomerInUseError, CustomerNotFoundError
from src.infrastructure.storage.sqlite.customer_store import SQLiteCustomerStore
from src.infrastructure.storage.sqlite.invoice_store import SQLiteInvoiceStore


@pytest.fixture
def store(db) -> SQLiteCustomerStore:
    return SQLiteCustomerStore()


class TestSQLiteCustomerStore:
    """Tests for customer persistence."""

    async def test_round_trip(self, store, sample_customer):
        await store.create_customer(sample_customer)

        loaded = await store.get_customer("tenant-a", "cust-1")

        assert loaded.name == "Byggmästarna AB"
        assert loaded.address.city == "Stockholm"
        assert loaded.contact.email == "anna@byggmastarna.se"
        assert loaded.reference == "Anna Svensson"

    async def test_tenant_isolation(self, store, sample_customer):
        await store.create_customer(sample_customer)

        assert await store.get_customer("tenant-b", "cust-1") is None
        assert await store.count_customers("tenant-b") == 0

    async def test_update(self, store, sample_customer):
        await store.create_customer(sample_customer)
        sample_customer.name = "Byggmästarna i Stockholm AB"

        await store.update_customer(sample_customer)

        assert (await store.get_customer("tenant-a", "cust-1")).name == (
            "Byggmästarna i Stockholm AB"
        )

    async def test_update_missing(self, store, sample_customer):
        with pytest.raises(CustomerNotFoundError):
            await store.update_customer(sample_customer)

    async def test_list_sorted_by_name_case_insensitive(self, store):
        for cid, name in [("c1", "beta AB"), ("c2", "Alfa AB"), ("c3", "Gamma HB")]:
            await store.create_customer(Customer(id=cid, tenant_id="tenant-a", name=name))

        customers = await store.list_customers("tenant-a")

        assert [c.name for c in customers] == ["Alfa AB", "beta AB", "Gamma HB"]
        assert await store.count_customers("tenant-a") == 3

    async def test_delete(self, store, sample_customer):
        await store.create_customer(sample_customer)

        assert await store.delete_customer("tenant-a", "cust-1") is True
        assert await store.delete_customer("tenant-a", "cust-1") is False

    async def test_delete_with_invoices_refused(self, store, sample_customer, sample_invoice):
        await store.create_customer(sample_customer)
        await SQLiteInvoiceStore().create_invoice(sample_invoice)

        with pytest.raises(CustomerInUseError):
            await store.delete_customer("tenant-a", "cust-1")

        assert await store.get_customer("tenant-a", "cust-1") is not None


class TestCustomerSearch:
    """Tests for searching and batch lookup."""

    @pytest.fixture
    async def seeded(self, store, sample_customer):
        await store.create_customer(sample_customer)
        await store.create_customer(
            Customer(
                id="cust-2",
                tenant_id="tenant-a",
                name="Målerifirman HB",
                contact=Contact(email="info@malare.se"),
            )
        )
        await store.create_customer(
            Customer(id="cust-3", tenant_id="tenant-b", name="Byggmästarna Syd AB")
        )
        return store

    async def test_by_name(self, seeded):
        found = await seeded.list_customers("tenant-a", search="bygg")

        assert [c.id for c in found] == ["cust-1"]
        assert await seeded.count_customers("tenant-a", search="bygg") == 1

    async def test_by_email(self, seeded):
        found = await seeded.list_customers("tenant-a", search="@malare")

        assert [c.name for c in found] == ["Målerifirman HB"]

    async def test_percent_is_literal(self, seeded):
        assert await seeded.list_customers("tenant-a", search="%") == []

    async def test_get_customers_by_ids(self, seeded):
        found = await seeded.get_customers("tenant-a", ["cust-2", "cust-1", "cust-3", "cust-1"])

        assert sorted(c.id for c in found) == ["cust-1", "cust-2"]
        assert await seeded.get_customers("tenant-a", []) == []
