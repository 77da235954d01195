"""Bearer token authentication middleware.

Every request except registration, login and health checks must carry a
valid access token in ``Authorization: Bearer <token>``. On success the
token's identity payload is attached to ``request.state`` for the handlers.
"""

import logging

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

from gophkeeper.core.identity import put_identity
from gophkeeper.services.auth import Authorizer, TokenError, TokenExpiredError

logger = logging.getLogger(__name__)

# Paths that don't require a token (exact match)
EXCLUDED_PATHS = [
    "/v1/users/register",
    "/v1/users/login",
    "/health",
]


def _unauthorized(detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content={"detail": detail},
        headers={"WWW-Authenticate": "Bearer"},
    )


class BearerAuthMiddleware(BaseHTTPMiddleware):
    """Middleware to authenticate API requests using JWT.

    - Token must be in: Authorization: Bearer <token>
    - Returns 401 Unauthorized if the token is missing, expired or invalid
    - Uses the Authorizer stored on ``app.state.authorizer``
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path

        # Skip auth for CORS preflight requests (OPTIONS)
        if request.method == "OPTIONS":
            return await call_next(request)

        if path.rstrip("/") in EXCLUDED_PATHS:
            return await call_next(request)

        token = self._extract_token(request)
        if not token:
            logger.warning(f"Request without token: {request.method} {path}")
            return _unauthorized(
                "Authentication required. Include JWT token in Authorization: Bearer <token> header."
            )

        authorizer: Authorizer = request.app.state.authorizer
        try:
            payload = authorizer.verify(token)
        except TokenExpiredError:
            logger.debug(f"Expired token for: {request.method} {path}")
            return _unauthorized("Token has expired")
        except TokenError as e:
            logger.warning(f"Invalid token for: {request.method} {path} - {type(e).__name__}")
            return _unauthorized("Invalid token")

        if not payload.is_authenticated:
            logger.warning(f"Token without identity for: {request.method} {path}")
            return _unauthorized("Invalid token")

        put_identity(request, payload)
        return await call_next(request)

    def _extract_token(self, request: Request) -> str | None:
        """Extract JWT token from the Authorization header."""
        auth_header = request.headers.get("Authorization", "")
        scheme, _, token = auth_header.partition(" ")
        if scheme.lower() != "bearer":
            return None
        token = token.strip()
        return token or None
