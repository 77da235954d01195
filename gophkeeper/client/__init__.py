# GophKeeper Client
from gophkeeper.client.api import ClientError, ConflictError, GophKeeperClient, UnauthorizedError
from gophkeeper.client.config import ClientSettings
from gophkeeper.client.session import SessionStore

__all__ = [
    "ClientError",
    "ClientSettings",
    "ConflictError",
    "GophKeeperClient",
    "SessionStore",
    "UnauthorizedError",
]
