"""Middleware module for the GophKeeper server."""

from gophkeeper.middleware.auth import BearerAuthMiddleware
from gophkeeper.middleware.content_type import ContentTypeMiddleware

__all__ = [
    "BearerAuthMiddleware",
    "ContentTypeMiddleware",
]
