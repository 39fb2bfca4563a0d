"""
Company profile endpoints.

One profile per tenant: header, payment details and default VAT rate
used on invoices.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_comp_store, get_tenant_id
from src.application.dto.requests import CompanyRequest
from src.application.dto.responses import CompanyResponse, ErrorResponse
from src.core.entities.company import Company
from src.core.exceptions import CompanyNotFoundError
from src.core.interfaces import ICompanyStore

router = APIRouter(prefix="/api/company", tags=["company"])


@router.get(
    "",
    response_model=CompanyResponse,
    responses={404: {"model": ErrorResponse, "description": "No profile saved yet"}},
)
async def get_company(
    tenant_id: str = Depends(get_tenant_id),
    store: ICompanyStore = Depends(get_comp_store),
) -> CompanyResponse:
    """Get the tenant's company profile."""
    company = await store.get_company(tenant_id)
    if company is None:
        raise CompanyNotFoundError(tenant_id)
    return CompanyResponse.from_entity(company)


@router.put("", response_model=CompanyResponse)
async def save_company(
    request: CompanyRequest,
    tenant_id: str = Depends(get_tenant_id),
    store: ICompanyStore = Depends(get_comp_store),
) -> CompanyResponse:
    """Create or replace the tenant's company profile."""
    company = Company(tenant_id=tenant_id, **request.model_dump())
    company = await store.save_company(company)
    return CompanyResponse.from_entity(company)
