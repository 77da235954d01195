"""Reject request bodies that are not declared as JSON."""

import logging

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

# Methods that carry no body
BODYLESS_METHODS = frozenset({"GET", "DELETE", "HEAD", "OPTIONS"})


class ContentTypeMiddleware(BaseHTTPMiddleware):
    """Return 400 unless a body-carrying request declares application/json."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method in BODYLESS_METHODS:
            return await call_next(request)

        content_type = request.headers.get("Content-Type", "")
        media_type = content_type.split(";", 1)[0].strip().lower()
        if media_type != "application/json":
            logger.warning(
                f"Unknown Content-Type {content_type!r} for {request.method} {request.url.path}"
            )
            return JSONResponse(status_code=400, content={"detail": "unknown Content-Type"})

        return await call_next(request)
