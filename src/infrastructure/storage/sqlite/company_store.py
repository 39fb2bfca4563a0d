"""SQLite implementation of the tenant company profile store."""

import json
from datetime import datetime
from decimal import Decimal

import aiosqlite

from src.config import get_logger
from src.core.entities.company import Company
from src.core.entities.customer import Address, Contact
from src.core.interfaces.storage import ICompanyStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

PAYMENT_FIELDS = (
    "bankgiro",
    "plusgiro",
    "iban",
    "swish",
    "account_number",
    "clearing_number",
    "bank_name",
    "swift",
)


class SQLiteCompanyStore(ICompanyStore):
    """One company row per tenant; payment details kept as a JSON object."""

    async def get_company(self, tenant_id: str) -> Company | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM companies WHERE tenant_id = ?", (tenant_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_company(row) if row else None

    async def save_company(self, company: Company) -> Company:
        company.updated_at = datetime.utcnow()
        payment = {name: getattr(company, name) for name in PAYMENT_FIELDS}
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO companies (
                    tenant_id, name, org_number, vat_number, address, contact,
                    payment_details, tax_rate, logo_path, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(tenant_id) DO UPDATE SET
                    name = excluded.name,
                    org_number = excluded.org_number,
                    vat_number = excluded.vat_number,
                    address = excluded.address,
                    contact = excluded.contact,
                    payment_details = excluded.payment_details,
                    tax_rate = excluded.tax_rate,
                    logo_path = excluded.logo_path,
                    updated_at = excluded.updated_at
                """,
                (
                    company.tenant_id,
                    company.name,
                    company.org_number,
                    company.vat_number,
                    company.address.model_dump_json(),
                    company.contact.model_dump_json(),
                    json.dumps(payment),
                    str(company.tax_rate),
                    company.logo_path,
                    company.updated_at.isoformat(),
                ),
            )
        logger.info("company_saved", tenant_id=company.tenant_id)
        return company

    @staticmethod
    def _row_to_company(row: aiosqlite.Row) -> Company:
        payment = json.loads(row["payment_details"] or "{}")
        return Company(
            tenant_id=row["tenant_id"],
            name=row["name"],
            org_number=row["org_number"],
            vat_number=row["vat_number"],
            address=Address.model_validate_json(row["address"]),
            contact=Contact.model_validate_json(row["contact"]),
            tax_rate=Decimal(row["tax_rate"]),
            logo_path=row["logo_path"],
            updated_at=datetime.fromisoformat(row["updated_at"]),
            **{name: payment.get(name) for name in PAYMENT_FIELDS},
        )
