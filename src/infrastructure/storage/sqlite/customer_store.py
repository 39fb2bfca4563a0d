"""SQLite implementation of customer storage."""

from datetime import datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.customer import Address, Contact, Customer
from src.core.exceptions import CustomerInUseError, CustomerNotFoundError
from src.core.interfaces.storage import ICustomerStore
from src.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
    like_pattern,
)

logger = get_logger(__name__)


class SQLiteCustomerStore(ICustomerStore):
    """SQLite implementation of customer storage."""

    async def create_customer(self, customer: Customer) -> Customer:
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO customers (
                    id, tenant_id, name, org_number, vat_number, reference,
                    address, contact, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    customer.id,
                    customer.tenant_id,
                    customer.name,
                    customer.org_number,
                    customer.vat_number,
                    customer.reference,
                    customer.address.model_dump_json(),
                    customer.contact.model_dump_json(),
                    customer.created_at.isoformat(),
                    customer.updated_at.isoformat(),
                ),
            )
        logger.info("customer_created", customer_id=customer.id)
        return customer

    async def update_customer(self, customer: Customer) -> Customer:
        customer.updated_at = datetime.utcnow()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE customers SET
                    name = ?, org_number = ?, vat_number = ?, reference = ?,
                    address = ?, contact = ?, updated_at = ?
                WHERE id = ? AND tenant_id = ?
                """,
                (
                    customer.name,
                    customer.org_number,
                    customer.vat_number,
                    customer.reference,
                    customer.address.model_dump_json(),
                    customer.contact.model_dump_json(),
                    customer.updated_at.isoformat(),
                    customer.id,
                    customer.tenant_id,
                ),
            )
            if cursor.rowcount == 0:
                raise CustomerNotFoundError(customer.id)
        return customer

    async def get_customer(self, tenant_id: str, customer_id: str) -> Customer | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM customers WHERE id = ? AND tenant_id = ?",
                (customer_id, tenant_id),
            )
            row = await cursor.fetchone()
            return self._row_to_customer(row) if row else None

    async def delete_customer(self, tenant_id: str, customer_id: str) -> bool:
        """
        Delete a customer.

        Raises:
            CustomerInUseError: If invoices still reference the customer.
        """
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    "DELETE FROM customers WHERE id = ? AND tenant_id = ?",
                    (customer_id, tenant_id),
                )
                deleted = cursor.rowcount > 0
        except aiosqlite.IntegrityError as e:
            raise CustomerInUseError(customer_id) from e

        if deleted:
            logger.info("customer_deleted", customer_id=customer_id)
        return deleted

    async def list_customers(
        self,
        tenant_id: str,
        limit: int = 100,
        offset: int = 0,
        search: str | None = None,
    ) -> list[Customer]:
        where, params = self._filters(tenant_id, search)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM customers WHERE {where}
                ORDER BY name COLLATE NOCASE LIMIT ? OFFSET ?
                """,
                [*params, limit, offset],
            )
            return [self._row_to_customer(row) for row in await cursor.fetchall()]

    async def get_customers(self, tenant_id: str, customer_ids: list[str]) -> list[Customer]:
        """Customers with the given IDs, for labelling a page of invoices."""
        ids = list(dict.fromkeys(customer_ids))
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM customers WHERE tenant_id = ? AND id IN ({placeholders})",
                [tenant_id, *ids],
            )
            return [self._row_to_customer(row) for row in await cursor.fetchall()]

    async def count_customers(self, tenant_id: str, search: str | None = None) -> int:
        where, params = self._filters(tenant_id, search)
        async with get_connection() as conn:
            cursor = await conn.execute(f"SELECT COUNT(*) FROM customers WHERE {where}", params)
            row = await cursor.fetchone()
            return int(row[0]) if row else 0

    @staticmethod
    def _filters(tenant_id: str, search: str | None) -> tuple[str, list]:
        conditions = ["tenant_id = ?"]
        params: list = [tenant_id]
        if search and search.strip():
            pattern = like_pattern(search.strip())
            conditions.append(
                "(name LIKE ? ESCAPE '\\' OR json_extract(contact, '$.email') LIKE ? ESCAPE '\\')"
            )
            params.extend([pattern, pattern])
        return " AND ".join(conditions), params

    @staticmethod
    def _row_to_customer(row: aiosqlite.Row) -> Customer:
        return Customer(
            id=row["id"],
            tenant_id=row["tenant_id"],
            name=row["name"],
            org_number=row["org_number"],
            vat_number=row["vat_number"],
            reference=row["reference"],
            address=Address.model_validate_json(row["address"]),
            contact=Contact.model_validate_json(row["contact"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
