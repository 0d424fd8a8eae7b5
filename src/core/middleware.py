"""
Request middleware.
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.shared.context import bind_request, clear_request
from src.shared.logging import get_logger

logger = get_logger(__name__)


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Binds request/trace IDs for the request and logs its outcome.

    The IDs end up in every log record (via the logger patcher), in error
    bodies and in the ``X-Request-ID`` / ``X-Trace-ID`` response headers.
    """

    SKIP_LOG_ENDPOINTS: set[str] = {
        "/observability/health",
        "/observability/ready",
        "/observability/live",
    }

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = bind_request(
            request_id=request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID"),
            trace_id=request.headers.get("X-Trace-ID"),
        )
        request.state.request_id = request_id
        trace_id = request.headers.get("X-Trace-ID") or request_id

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Trace-ID"] = trace_id
            self._log_request(request, response, duration)
            return response

        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.opt(exception=e).error(
                "Request failed",
                method=request.method,
                path=str(request.url.path),
                duration_ms=round(duration * 1000, 2),
                error=str(e),
            )
            raise

        finally:
            clear_request()

    def _log_request(self, request: Request, response: Response, duration: float) -> None:
        """Log method, path, status and latency."""
        if request.url.path in self.SKIP_LOG_ENDPOINTS:
            return

        log_level = "info" if response.status_code < 400 else "warning"
        if response.status_code >= 500:
            log_level = "error"

        log_method = getattr(logger, log_level)
        log_method(
            f"{request.method} {request.url.path}",
            method=request.method,
            path=str(request.url.path),
            query_string=str(request.query_params) if request.query_params else None,
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
            client_ip=self._get_client_ip(request),
        )

    def _get_client_ip(self, request: Request) -> str:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return "unknown"
