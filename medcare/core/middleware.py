"""
HTTP middleware: request correlation ids and access logging.
"""
import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with a correlation id and logs its outcome.

    An incoming X-Request-ID is reused so ids can be followed across
    services; otherwise a fresh one is generated. The id and the elapsed
    time are echoed back as response headers.
    """
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        route = f"{request.method} {request.url.path}"
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(f"[{request_id}] {route} raised {type(e).__name__} after {time.perf_counter() - started:.4f}s")
            raise

        elapsed = time.perf_counter() - started
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(level, f"[{request_id}] {route} -> {response.status_code} in {elapsed:.4f}s")
        return response


def setup_middlewares(app):
    app.add_middleware(RequestLoggingMiddleware)
