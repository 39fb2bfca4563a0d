"""
Request logging middleware.
"""

import time
import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from structlog.contextvars import bound_contextvars

from src.config import get_logger, get_settings

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one event when a request arrives and one when it completes.

    The request ID (taken from the caller's X-Request-ID when present) and
    the tenant are bound to the structlog context for the whole request,
    so events from use cases and stores carry them too.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        tenant_id = request.headers.get(get_settings().api.tenant_header)

        with bound_contextvars(request_id=request_id, tenant_id=tenant_id):
            started = time.perf_counter()
            logger.info("request_started", method=request.method, path=request.url.path)

            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    "request_failed",
                    method=request.method,
                    path=request.url.path,
                    error=str(e),
                )
                raise

            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round(elapsed_ms, 2),
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"
        return response
