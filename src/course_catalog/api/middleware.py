"""HTTP request/response logging middleware."""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log HTTP requests with method, path, status code, and latency.

    A request id, the method and the path are bound to the structlog context
    for the duration of the request, so log lines emitted by handlers can be
    correlated. The id is echoed back in the ``X-Request-ID`` header.
    """

    SKIP_PATHS: frozenset[str] = frozenset(
        {"/health", "/docs", "/openapi.json", "/redoc"}
    )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process request and log timing information."""
        if request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        request_id = uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        ):
            start = time.perf_counter()
            response = await call_next(request)
            latency_ms = int((time.perf_counter() - start) * 1000)

            # Bindings made by dependencies stay in the endpoint's task.
            user = getattr(request.state, "user", None)
            logger.info(
                "http_request",
                status_code=response.status_code,
                latency_ms=latency_ms,
                user_id=str(user.user_id) if user is not None else None,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
