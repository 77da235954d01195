# GophKeeper API Routes
from gophkeeper.api.router import api_router

__all__ = ["api_router"]
