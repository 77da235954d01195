"""Shared FastAPI dependencies and provider error mapping."""

import logging
from typing import NoReturn

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from gophkeeper.core import get_db
from gophkeeper.core.errors import (
    InvalidInputError,
    InvalidPasswordError,
    NoIdentityError,
    NotFoundError,
    ProviderError,
)
from gophkeeper.core.identity import IdentityPayload, get_identity
from gophkeeper.services.auth import Authorizer
from gophkeeper.services.crypto import Cipher
from gophkeeper.services.entities import Card, Media, Note, Password
from gophkeeper.services.secrets import (
    SecretProvider,
    card_provider,
    media_provider,
    note_provider,
    password_provider,
)
from gophkeeper.services.storage import (
    UserStorage,
    card_storage,
    media_storage,
    note_storage,
    password_storage,
)
from gophkeeper.services.users import UserSessionProvider

logger = logging.getLogger(__name__)


def get_authorizer(request: Request) -> Authorizer:
    return request.app.state.authorizer


def get_cipher(request: Request) -> Cipher:
    return request.app.state.cipher


def get_current_identity(request: Request) -> IdentityPayload | None:
    """Identity attached by BearerAuthMiddleware, or None.

    Providers reject a missing identity themselves.
    """
    try:
        return get_identity(request)
    except NoIdentityError:
        return None


def get_user_provider(
    db: AsyncSession = Depends(get_db),
    authorizer: Authorizer = Depends(get_authorizer),
) -> UserSessionProvider:
    """Dependency to get the user/session provider."""
    return UserSessionProvider(UserStorage(db), authorizer)


def get_card_provider(
    db: AsyncSession = Depends(get_db), cipher: Cipher = Depends(get_cipher)
) -> SecretProvider[Card]:
    return card_provider(card_storage(db), cipher)


def get_note_provider(
    db: AsyncSession = Depends(get_db), cipher: Cipher = Depends(get_cipher)
) -> SecretProvider[Note]:
    return note_provider(note_storage(db), cipher)


def get_password_provider(
    db: AsyncSession = Depends(get_db), cipher: Cipher = Depends(get_cipher)
) -> SecretProvider[Password]:
    return password_provider(password_storage(db), cipher)


def get_media_provider(
    db: AsyncSession = Depends(get_db), cipher: Cipher = Depends(get_cipher)
) -> SecretProvider[Media]:
    return media_provider(media_storage(db), cipher)


def raise_http_error(error: ProviderError, action: str) -> NoReturn:
    """Translate a provider error into an HTTPException.

    Internal failures are logged with their cause chain and reported
    without detail.
    """
    if error.is_caused_by(NotFoundError):
        logger.info(f"{action}: not found")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{action}: not found")

    if error.is_caused_by(NoIdentityError):
        logger.warning(f"{action}: no identity")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if error.is_caused_by(InvalidPasswordError):
        logger.info(f"{action}: invalid password")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=f"{action}: invalid password"
        )

    if error.is_caused_by(InvalidInputError):
        logger.info(f"{action}: invalid input")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"{action}: invalid input"
        )

    logger.error(f"{action}: {error}", exc_info=error)
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"{action}: internal error"
    )
