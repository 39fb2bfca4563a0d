"""SQLite implementation of invoice storage."""

from datetime import date, datetime
from decimal import Decimal

import aiosqlite

from src.config import get_logger
from src.core.entities.invoice import (
    Invoice,
    InvoiceStatus,
    InvoiceTotals,
    InvoiceType,
    LineItem,
)
from src.core.exceptions import InvoiceNotFoundError, NumberingConflictError
from src.core.interfaces.storage import IInvoiceStore
from src.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
    like_pattern,
)

logger = get_logger(__name__)


def _dec(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


def _to_dec(value: str | None) -> Decimal | None:
    return None if value is None else Decimal(value)


class SQLiteInvoiceStore(IInvoiceStore):
    """
    SQLite implementation of invoice storage.

    Amounts are stored as decimal strings, so a stored totals snapshot reads
    back identical to what was written.
    """

    async def create_invoice(self, invoice: Invoice) -> Invoice:
        """Insert a new invoice with its items."""
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO invoices (
                        id, tenant_id, invoice_number, customer_id,
                        issue_date, due_date, currency, status, invoice_type,
                        total_net, total_tax, total_gross,
                        notes, payment_terms, reference, customer_reference,
                        language, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        invoice.id,
                        invoice.tenant_id,
                        invoice.invoice_number,
                        invoice.customer_id,
                        *self._header_values(invoice),
                        invoice.created_at.isoformat(),
                        invoice.updated_at.isoformat(),
                    ),
                )
                await self._insert_items(conn, invoice)
        except aiosqlite.IntegrityError as e:
            if "invoice_number" in str(e):
                raise NumberingConflictError(invoice.invoice_number, invoice.tenant_id) from e
            raise

        logger.info(
            "invoice_created",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            items=len(invoice.items),
        )
        return invoice

    async def update_invoice(self, invoice: Invoice) -> Invoice:
        """Replace a stored invoice header and all of its items."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE invoices SET
                    issue_date = ?, due_date = ?, currency = ?, status = ?,
                    invoice_type = ?, total_net = ?, total_tax = ?, total_gross = ?,
                    notes = ?, payment_terms = ?, reference = ?,
                    customer_reference = ?, language = ?,
                    customer_id = ?, updated_at = ?
                WHERE id = ? AND tenant_id = ?
                """,
                (
                    *self._header_values(invoice),
                    invoice.customer_id,
                    invoice.updated_at.isoformat(),
                    invoice.id,
                    invoice.tenant_id,
                ),
            )
            if cursor.rowcount == 0:
                raise InvoiceNotFoundError(invoice.id)

            await conn.execute(
                "DELETE FROM invoice_items WHERE invoice_id = ?", (invoice.id,)
            )
            await self._insert_items(conn, invoice)

        logger.info(
            "invoice_updated",
            invoice_id=invoice.id,
            status=invoice.status.value,
        )
        return invoice

    async def get_invoice(self, tenant_id: str, invoice_id: str) -> Invoice | None:
        """Get invoice by ID with items."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM invoices WHERE id = ? AND tenant_id = ?",
                (invoice_id, tenant_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            items = await self._load_items(conn, invoice_id)
            return self._row_to_invoice(row, items)

    async def delete_invoice(self, tenant_id: str, invoice_id: str) -> bool:
        """Delete invoice; items go with it via ON DELETE CASCADE."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM invoices WHERE id = ? AND tenant_id = ?",
                (invoice_id, tenant_id),
            )
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("invoice_deleted", invoice_id=invoice_id)
        return deleted

    async def list_invoices(
        self,
        tenant_id: str,
        status: InvoiceStatus | None = None,
        limit: int = 100,
        offset: int = 0,
        search: str | None = None,
    ) -> list[Invoice]:
        """List invoices, newest issue date first."""
        where, params = self._filters(tenant_id, status, search)
        query = (
            f"SELECT * FROM invoices WHERE {where}"
            " ORDER BY issue_date DESC, invoice_number DESC LIMIT ? OFFSET ?"
        )
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            invoices = []
            for row in rows:
                items = await self._load_items(conn, row["id"])
                invoices.append(self._row_to_invoice(row, items))
            return invoices

    async def count_invoices(
        self,
        tenant_id: str,
        status: InvoiceStatus | None = None,
        search: str | None = None,
    ) -> int:
        where, params = self._filters(tenant_id, status, search)
        async with get_connection() as conn:
            cursor = await conn.execute(f"SELECT COUNT(*) FROM invoices WHERE {where}", params)
            row = await cursor.fetchone()
            return int(row[0]) if row else 0

    async def list_invoice_numbers(self, tenant_id: str) -> list[str]:
        """All invoice numbers of the tenant."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT invoice_number FROM invoices WHERE tenant_id = ?",
                (tenant_id,),
            )
            return [row[0] for row in await cursor.fetchall()]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _filters(
        tenant_id: str, status: InvoiceStatus | None, search: str | None
    ) -> tuple[str, list]:
        """WHERE clause shared by list and count; search hits number or customer name."""
        conditions = ["tenant_id = ?"]
        params: list = [tenant_id]
        if status is not None:
            conditions.append("status = ?")
            params.append(status.value)
        if search and search.strip():
            pattern = like_pattern(search.strip())
            conditions.append(
                "(invoice_number LIKE ? ESCAPE '\\' OR customer_id IN ("
                "SELECT id FROM customers WHERE tenant_id = ? AND name LIKE ? ESCAPE '\\'))"
            )
            params.extend([pattern, tenant_id, pattern])
        return " AND ".join(conditions), params

    @staticmethod
    def _header_values(invoice: Invoice) -> tuple:
        """Column values shared by INSERT and UPDATE, in schema order."""
        return (
            invoice.issue_date.isoformat(),
            invoice.due_date.isoformat(),
            invoice.currency,
            invoice.status.value,
            invoice.invoice_type.value,
            str(invoice.totals.net),
            str(invoice.totals.tax),
            str(invoice.totals.gross),
            invoice.notes,
            invoice.payment_terms,
            invoice.reference,
            invoice.customer_reference,
            invoice.language,
        )

    @staticmethod
    async def _insert_items(conn: aiosqlite.Connection, invoice: Invoice) -> None:
        await conn.executemany(
            """
            INSERT INTO invoice_items (
                invoice_id, position, id, article_number, description,
                quantity, unit, unit_price, tax_rate_percent,
                discount_percent, account
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    invoice.id,
                    position,
                    item.id,
                    item.article_number,
                    item.description,
                    _dec(item.quantity),
                    item.unit,
                    _dec(item.unit_price),
                    _dec(item.tax_rate_percent),
                    _dec(item.discount_percent),
                    item.account,
                )
                for position, item in enumerate(invoice.items)
            ],
        )

    @staticmethod
    async def _load_items(conn: aiosqlite.Connection, invoice_id: str) -> list[LineItem]:
        cursor = await conn.execute(
            "SELECT * FROM invoice_items WHERE invoice_id = ? ORDER BY position",
            (invoice_id,),
        )
        return [
            LineItem(
                id=row["id"],
                article_number=row["article_number"],
                description=row["description"],
                quantity=_to_dec(row["quantity"]),
                unit=row["unit"],
                unit_price=_to_dec(row["unit_price"]),
                tax_rate_percent=_to_dec(row["tax_rate_percent"]),
                discount_percent=_to_dec(row["discount_percent"]),
                account=row["account"],
            )
            for row in await cursor.fetchall()
        ]

    @staticmethod
    def _row_to_invoice(row: aiosqlite.Row, items: list[LineItem]) -> Invoice:
        """Convert a database row to an Invoice entity.

        ``total_gross`` is stored for reporting queries only; gross is
        always derived from the stored net and tax.
        """
        return Invoice(
            id=row["id"],
            tenant_id=row["tenant_id"],
            invoice_number=row["invoice_number"],
            customer_id=row["customer_id"],
            issue_date=date.fromisoformat(row["issue_date"]),
            due_date=date.fromisoformat(row["due_date"]),
            currency=row["currency"],
            items=items,
            status=InvoiceStatus(row["status"]),
            invoice_type=InvoiceType(row["invoice_type"]),
            totals=InvoiceTotals(
                net=Decimal(row["total_net"]),
                tax=Decimal(row["total_tax"]),
            ),
            notes=row["notes"],
            payment_terms=row["payment_terms"],
            reference=row["reference"],
            customer_reference=row["customer_reference"],
            language=row["language"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
