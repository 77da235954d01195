"""GophKeeper API Router - aggregates all API routes."""

from fastapi import APIRouter

from gophkeeper.api import secrets, users

# Main API router - all routes will be prefixed with /v1
api_router = APIRouter(prefix="/v1")

# Include routers
api_router.include_router(users.router)
api_router.include_router(secrets.cards_router)
api_router.include_router(secrets.notes_router)
api_router.include_router(secrets.passwords_router)
api_router.include_router(secrets.medias_router)
