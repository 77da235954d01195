"""CRUD endpoints for the four secret kinds.

All kinds expose the same surface, built by :func:`build_secret_router`:

- ``POST   /v1/{kind}``       create, 201
- ``PUT    /v1/{kind}``       update by body id, 202
- ``GET    /v1/{kind}``       list, 404 when the owner has none
- ``DELETE /v1/{kind}/{id}``  delete, 204
"""

import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, Response, status

from gophkeeper.api.deps import (
    get_card_provider,
    get_current_identity,
    get_media_provider,
    get_note_provider,
    get_password_provider,
    raise_http_error,
)
from gophkeeper.core.errors import ProviderError
from gophkeeper.core.identity import IdentityPayload
from gophkeeper.schemas.secrets import (
    CardIn,
    CardOut,
    MediaIn,
    MediaOut,
    MessageResponse,
    NoteIn,
    NoteOut,
    PasswordIn,
    PasswordOut,
)
from gophkeeper.services.secrets import SecretProvider

logger = logging.getLogger(__name__)


def build_secret_router(
    path: str,
    label: str,
    schema_in: type[Any],
    schema_out: type[Any],
    get_provider: Callable[..., SecretProvider[Any]],
) -> APIRouter:
    """Create the router for one secret kind.

    Args:
        path: URL segment under /v1 (e.g. "cards").
        label: Singular name used in messages (e.g. "card").
        schema_in: Request schema with ``to_entity()``.
        schema_out: Response schema with ``from_entity()``.
        get_provider: Dependency returning the kind's SecretProvider.
    """
    router = APIRouter(prefix=f"/{path}", tags=[path])

    @router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
    async def create_secret(
        data: schema_in,  # type: ignore[valid-type]
        identity: IdentityPayload | None = Depends(get_current_identity),
        provider: SecretProvider[Any] = Depends(get_provider),
    ) -> MessageResponse:
        try:
            await provider.create(identity, data.to_entity())
        except ProviderError as e:
            raise_http_error(e, f"failed {label} create")
        logger.debug(f"Created {label}")
        return MessageResponse(message=f"{label} created")

    @router.put("", response_model=MessageResponse, status_code=status.HTTP_202_ACCEPTED)
    async def update_secret(
        data: schema_in,  # type: ignore[valid-type]
        identity: IdentityPayload | None = Depends(get_current_identity),
        provider: SecretProvider[Any] = Depends(get_provider),
    ) -> MessageResponse:
        try:
            await provider.update(identity, data.to_entity())
        except ProviderError as e:
            raise_http_error(e, f"failed {label} update")
        return MessageResponse(message=f"{label} updated")

    @router.get("", response_model=list[schema_out])  # type: ignore[valid-type]
    async def list_secrets(
        identity: IdentityPayload | None = Depends(get_current_identity),
        provider: SecretProvider[Any] = Depends(get_provider),
    ) -> list[Any]:
        try:
            items = await provider.list(identity)
        except ProviderError as e:
            raise_http_error(e, f"failed get {path}")
        return [schema_out.from_entity(item) for item in items]

    @router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_secret(
        item_id: int,
        identity: IdentityPayload | None = Depends(get_current_identity),
        provider: SecretProvider[Any] = Depends(get_provider),
    ) -> Response:
        try:
            await provider.delete(identity, item_id)
        except ProviderError as e:
            raise_http_error(e, f"failed {label} delete")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


cards_router = build_secret_router("cards", "card", CardIn, CardOut, get_card_provider)
notes_router = build_secret_router("notes", "note", NoteIn, NoteOut, get_note_provider)
passwords_router = build_secret_router(
    "passwords", "password", PasswordIn, PasswordOut, get_password_provider
)
medias_router = build_secret_router("medias", "media", MediaIn, MediaOut, get_media_provider)
