"""API route modules."""

from src.api.routes.company import router as company_router
from src.api.routes.customers import router as customers_router
from src.api.routes.dashboard import router as dashboard_router
from src.api.routes.health import router as health_router
from src.api.routes.invoices import router as invoices_router

__all__ = [
    "health_router",
    "company_router",
    "customers_router",
    "invoices_router",
    "dashboard_router",
]
