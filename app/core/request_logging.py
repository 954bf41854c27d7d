"""Logging setup and per-request tracing middleware.

Every request gets a short random id. It is attached to ``request.state`` so
route handlers can include it in their own log lines, and returned to the
caller in the ``X-Request-ID`` header.
"""

import logging
import secrets
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once at process start."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def generate_request_id() -> str:
    """Return a 10 character hex id from 5 random bytes."""
    return secrets.token_hex(5)


def client_ip(request: Request) -> str | None:
    """Best-effort client address, preferring the proxy's forwarded header."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None


def get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or "-"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware that tags each request with an id and logs its outcome."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = generate_request_id()
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "request_id=%s %s %s status=%s ip=%s duration_ms=%.1f",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            client_ip(request),
            elapsed_ms,
        )
        return response
