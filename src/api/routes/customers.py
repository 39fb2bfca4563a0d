"""
Customer register endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_cust_store, get_tenant_id
from src.application.dto.requests import CustomerRequest
from src.application.dto.responses import (
    CustomerListResponse,
    CustomerResponse,
    ErrorResponse,
)
from src.config import get_logger
from src.core.entities.customer import Address, Contact, Customer
from src.core.exceptions import CustomerNotFoundError, ValidationError
from src.core.interfaces import ICustomerStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/customers", tags=["customers"])


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValidationError("name", "must not be blank", name)
    return cleaned


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    q: str | None = Query(default=None, max_length=100, description="Part of the name or email"),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    tenant_id: str = Depends(get_tenant_id),
    store: ICustomerStore = Depends(get_cust_store),
) -> CustomerListResponse:
    """List customers ordered by name, optionally narrowed by search text."""
    customers = await store.list_customers(tenant_id, limit=limit, offset=offset, search=q)
    return CustomerListResponse(
        customers=[CustomerResponse.from_entity(c) for c in customers],
        total=await store.count_customers(tenant_id, search=q),
    )


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    request: CustomerRequest,
    tenant_id: str = Depends(get_tenant_id),
    store: ICustomerStore = Depends(get_cust_store),
) -> CustomerResponse:
    """Add a customer to the register."""
    customer = Customer(
        tenant_id=tenant_id,
        name=_clean_name(request.name),
        org_number=request.org_number,
        vat_number=request.vat_number,
        reference=request.reference,
        address=Address(**request.address.model_dump()),
        contact=Contact(**request.contact.model_dump()),
    )
    customer = await store.create_customer(customer)
    return CustomerResponse.from_entity(customer)


@router.get(
    "/{customer_id}",
    response_model=CustomerResponse,
    responses={404: {"model": ErrorResponse, "description": "Customer not found"}},
)
async def get_customer(
    customer_id: str,
    tenant_id: str = Depends(get_tenant_id),
    store: ICustomerStore = Depends(get_cust_store),
) -> CustomerResponse:
    """Get customer by ID."""
    customer = await store.get_customer(tenant_id, customer_id)
    if customer is None:
        raise CustomerNotFoundError(customer_id)
    return CustomerResponse.from_entity(customer)


@router.put(
    "/{customer_id}",
    response_model=CustomerResponse,
    responses={404: {"model": ErrorResponse, "description": "Customer not found"}},
)
async def update_customer(
    customer_id: str,
    request: CustomerRequest,
    tenant_id: str = Depends(get_tenant_id),
    store: ICustomerStore = Depends(get_cust_store),
) -> CustomerResponse:
    """Replace a customer's details."""
    existing = await store.get_customer(tenant_id, customer_id)
    if existing is None:
        raise CustomerNotFoundError(customer_id)

    updated = existing.model_copy(
        update={
            "name": _clean_name(request.name),
            "org_number": request.org_number,
            "vat_number": request.vat_number,
            "reference": request.reference,
            "address": Address(**request.address.model_dump()),
            "contact": Contact(**request.contact.model_dump()),
            "updated_at": datetime.utcnow(),
        }
    )
    updated = await store.update_customer(updated)
    logger.info("customer_updated", customer_id=customer_id)
    return CustomerResponse.from_entity(updated)


@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"model": ErrorResponse, "description": "Customer not found"},
        409: {"model": ErrorResponse, "description": "Customer has invoices"},
    },
)
async def delete_customer(
    customer_id: str,
    tenant_id: str = Depends(get_tenant_id),
    store: ICustomerStore = Depends(get_cust_store),
) -> None:
    """Delete a customer that has no invoices."""
    if not await store.delete_customer(tenant_id, customer_id):
        raise CustomerNotFoundError(customer_id)
