"""Middleware: request timing and body size limits."""

from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

# Model output can carry a whole multi-file project.
_TEXT_PATHS = ("/extract", "/assemble", "/projects")
_MAX_BODY_TEXT = 5 * 1024 * 1024  # 5 MB for model output
_MAX_BODY_DEFAULT = 1 * 1024 * 1024  # 1 MB for everything else


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Add X-Request-Duration header with processing time."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-Duration-Ms"] = f"{duration_ms:.1f}"
        return response


def _too_large(limit: int) -> JSONResponse:
    if limit % (1024 * 1024) == 0:
        readable = f"{limit // (1024 * 1024)} MB"
    else:
        readable = f"{limit} bytes"
    return JSONResponse(
        status_code=413,
        content={"detail": f"Request body too large (max {readable})"},
    )


class RequestBodyLimitMiddleware(BaseHTTPMiddleware):
    """Reject request bodies that exceed size limits.

    Paths ending in one of ``_TEXT_PATHS`` carry model output and get
    ``text_limit``; every other path gets ``default_limit``.

    The ``Content-Length`` header gives an early rejection when it is a
    plain non-negative integer.  Otherwise the body is counted while it
    streams in, and the consumed bytes are cached on ``request._body`` so
    handlers can still ``await request.body()``.
    """

    def __init__(
        self,
        app: ASGIApp,
        text_limit: int = _MAX_BODY_TEXT,
        default_limit: int = _MAX_BODY_DEFAULT,
    ) -> None:
        super().__init__(app)
        self.text_limit = text_limit
        self.default_limit = default_limit

    def limit_for(self, path: str) -> int:
        return self.text_limit if path.endswith(_TEXT_PATHS) else self.default_limit

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        limit = self.limit_for(request.url.path)

        content_length = request.headers.get("content-length")
        if content_length is not None and content_length.isdigit() and int(content_length) > limit:
            return _too_large(limit)

        if request.method in ("POST", "PUT", "PATCH"):
            chunks: list[bytes] = []
            total = 0
            async for chunk in request.stream():
                total += len(chunk)
                if total > limit:
                    return _too_large(limit)
                chunks.append(chunk)
            request._body = b"".join(chunks)  # noqa: SLF001

        return await call_next(request)
