"""
Dashboard endpoint.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_dashboard_use_case, get_tenant_id
from src.application.dto.responses import DashboardResponse
from src.application.use_cases import GetDashboardSummaryUseCase

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def dashboard(
    tenant_id: str = Depends(get_tenant_id),
    use_case: GetDashboardSummaryUseCase = Depends(get_dashboard_use_case),
) -> DashboardResponse:
    """Invoice counts, paid share and revenue from paid invoices."""
    summary = await use_case.execute(tenant_id)
    return use_case.to_response(summary)
