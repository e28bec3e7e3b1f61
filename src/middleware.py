import re
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from src.logging_config import get_logger

REPEATED_SLASHES = re.compile(r"/{2,}")
REPEATED_SLASHES_RAW = re.compile(rb"/{2,}")


def normalize_path(path: str) -> str:
    """Merge repeated slashes and trim the trailing one, keeping ``/``."""
    return REPEATED_SLASHES.sub("/", path).rstrip("/") or "/"


class NormalizePathMiddleware:
    """Route ``//api//urls/`` like ``/api/urls``."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] == "http":
            path = scope["path"]
            normalized = normalize_path(path)
            if normalized != path:
                scope = dict(scope, path=normalized)
                raw_path = scope.get("raw_path")
                if raw_path is not None:
                    scope["raw_path"] = REPEATED_SLASHES_RAW.sub(b"/", raw_path).rstrip(b"/") or b"/"
        await self.app(scope, receive, send)


class LoggingMiddleware(BaseHTTPMiddleware):
    """One access line per request."""

    def __init__(self, app, logger=None):
        super().__init__(app)
        self.logger = logger or get_logger("access")

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        client = request.client.host if request.client else "-"
        request_line = f"{request.method} {request.url.path}"
        if request.url.query:
            request_line += f"?{request.url.query}"
        headers = request.headers
        self.logger.info(
            '%s "%s" %s %s (%s %s) "%s" "%s" %.6f',
            client,
            request_line,
            response.status_code,
            response.headers.get("content-length", "-"),
            headers.get("content-length", "-"),
            headers.get("content-type", "-"),
            headers.get("referer", "-"),
            headers.get("user-agent", "-"),
            duration,
        )
        return response
