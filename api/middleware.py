"""
HTTP middleware for the TRADELANE API.

Every request gets a correlation id, a JSON access-log line tagged
with the route it concerns, basic security headers and, if a handler
blows up, a sanitized 500 body instead of a traceback.
"""
import json
import logging
import re
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time-Ms"

# Catalog route id in paths such as /api/routes/route1/metrics or
# /api/simulation/route2/run
_ROUTE_ID_PATTERN = re.compile(r"^/api/(?:routes|weather/route|simulation)/([^/]+)")

request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    """Correlation id of the request being handled, if any."""
    return request_id_ctx.get()


def route_id_from_path(path: str) -> Optional[str]:
    """Catalog route id addressed by a request path, if it names one."""
    match = _ROUTE_ID_PATTERN.match(path)
    if match is None or match.group(1) == "distance":
        return None
    return match.group(1)


class StructuredLogger:
    """
    Logger writing one JSON object per line.

    Each entry carries the service name and the current request id;
    keyword arguments become extra fields and None values are dropped.
    """

    def __init__(self, name: str, service: str = "tradelane-api"):
        self.logger = logging.getLogger(name)
        self.service = service

    def _log(self, level: int, message: str, **fields):
        if not self.logger.isEnabledFor(level):
            return
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": logging.getLevelName(level),
            "service": self.service,
            "message": message,
            "request_id": get_request_id(),
        }
        entry.update(fields)
        self.logger.log(
            level,
            json.dumps({k: v for k, v in entry.items() if v is not None}, default=str),
        )

    def debug(self, message: str, **fields):
        self._log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields):
        self._log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields):
        self._log(logging.WARNING, message, **fields)

    def error(self, message: str, **fields):
        self._log(logging.ERROR, message, **fields)


structured_logger = StructuredLogger("tradelane.api")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds basic security headers to all responses."""

    HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "strict-origin-when-cross-origin",
    }

    def __init__(self, app, enable_hsts: bool = False):
        super().__init__(app)
        self.headers = dict(self.HEADERS)
        if enable_hsts:
            self.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers.update(self.headers)
        return response


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Assigns each request a correlation id.

    A client-supplied X-Request-ID is reused, otherwise a UUID4 is
    generated. The id is echoed in the response header and readable
    through get_request_id() for the lifetime of the request.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_ctx.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Access log with timing.

    Requests slower than ``slow_request_ms`` (typically whole-route
    weather fetches) are logged as warnings. Health probes are not
    logged.
    """

    EXCLUDED_PATHS = {"/api/health"}

    def __init__(self, app, slow_request_ms: float = 5000.0):
        super().__init__(app)
        self.slow_request_ms = slow_request_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            structured_logger.error(
                "Request failed",
                method=request.method,
                path=path,
                route_id=route_id_from_path(path),
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        response.headers[RESPONSE_TIME_HEADER] = str(duration_ms)
        if path in self.EXCLUDED_PATHS:
            return response

        log = structured_logger.warning if duration_ms > self.slow_request_ms else structured_logger.info
        log(
            "Request completed",
            method=request.method,
            path=path,
            route_id=route_id_from_path(path),
            query=str(request.query_params) or None,
            status_code=response.status_code,
            duration_ms=duration_ms,
            client_ip=request.client.host if request.client else None,
        )
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Converts unhandled exceptions into a 500 JSON body.

    The exception message is only returned in debug mode; otherwise the
    client gets the request id to quote.
    """

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            request_id = get_request_id()
            structured_logger.error(
                "Unhandled exception",
                method=request.method,
                path=request.url.path,
                error=str(e),
                error_type=type(e).__name__,
            )
            detail = str(e) if self.debug else "Internal error, quote the request id when reporting it."
            return JSONResponse(
                status_code=500,
                content={"error": "Internal Server Error", "detail": detail, "request_id": request_id},
                headers={REQUEST_ID_HEADER: request_id} if request_id else None,
            )


def setup_middleware(app: FastAPI, debug: bool = False, enable_hsts: bool = False):
    """
    Install the middleware stack.

    Starlette runs middleware in reverse order of addition, so error
    handling is outermost and request logging sees the request id.
    """
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=enable_hsts)
    app.add_middleware(ErrorHandlingMiddleware, debug=debug)
