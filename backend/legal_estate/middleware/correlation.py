"""
Correlation ID middleware

Tags every request with an X-Correlation-ID (taken from the client or
generated) so log lines for one HTTP call can be grouped, and logs the
request's method, path, status and duration.
"""
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from legal_estate.core.logger import logger

HEADER = "X-Correlation-ID"


class CorrelationMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        logger.info(
            f"[{correlation_id}] {request.method} {request.url.path} "
            f"-> {response.status_code} ({elapsed_ms:.1f} ms)"
        )
        response.headers[HEADER] = correlation_id
        return response
