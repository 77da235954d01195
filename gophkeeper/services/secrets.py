"""Secret providers: encrypt designated fields before storage, decrypt after.

The four secret kinds share one implementation, parameterised by a
:class:`SecretKind` describing which fields are sealed and which error
type wraps failures.
"""

import dataclasses
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Generic, Protocol, TypeVar

from gophkeeper.core.errors import (
    CardsProviderError,
    MediaProviderError,
    NoIdentityError,
    NotesProviderError,
    NotFoundError,
    PasswordsProviderError,
    ProviderError,
)
from gophkeeper.core.identity import IdentityPayload
from gophkeeper.services.crypto import Cipher, CipherError
from gophkeeper.services.entities import Card, Media, Note, Password

logger = logging.getLogger(__name__)

E = TypeVar("E")


class SecretStore(Protocol[E]):
    async def create(self, item: E, owner_id: int) -> None: ...

    async def update(self, item: E, owner_id: int) -> None: ...

    async def delete(self, item_id: int, owner_id: int) -> None: ...

    async def list(self, owner_id: int) -> list[E]: ...


@dataclass(frozen=True)
class SecretKind:
    """What a provider needs to know about one secret type."""

    name: str
    error: type[ProviderError]
    sealed_fields: tuple[str, ...]


CARDS = SecretKind("cards", CardsProviderError, ("number", "cvc"))
NOTES = SecretKind("notes", NotesProviderError, ("text",))
PASSWORDS = SecretKind("passwords", PasswordsProviderError, ("password",))
MEDIA = SecretKind("media", MediaProviderError, ("body",))


def _seal(cipher: Cipher, value: Any) -> Any:
    # Binary values are encrypted through their latin-1 image so every byte survives
    if isinstance(value, bytes):
        return cipher.encrypt(value.decode("latin-1")).encode("ascii")
    return cipher.encrypt(value)


def _open(cipher: Cipher, value: Any) -> Any:
    if isinstance(value, bytes):
        return cipher.decrypt(value.decode("ascii")).encode("latin-1")
    return cipher.decrypt(value)


class SecretProvider(Generic[E]):
    """Owner-scoped create/update/delete/list with field encryption.

    Every operation requires an authenticated identity. Without one it
    raises the kind's provider error chained from NoIdentityError and
    touches neither the cipher nor storage.
    """

    def __init__(self, kind: SecretKind, storage: SecretStore[E], cipher: Cipher):
        self.kind = kind
        self.storage = storage
        self.cipher = cipher

    def _fail(self, action: str, cause: BaseException) -> ProviderError:
        return self.kind.error(f"{self.kind.name} provider error: {action}: {cause}")

    def _owner(self, identity: IdentityPayload | None, action: str) -> int:
        if identity is None or not identity.is_authenticated:
            cause = NoIdentityError("identity payload not found in request")
            raise self._fail(action, cause) from cause
        return identity.id

    def _sealed(self, item: E, action: str) -> E:
        try:
            changes = {
                name: _seal(self.cipher, getattr(item, name)) for name in self.kind.sealed_fields
            }
        except CipherError as e:
            logger.error(f"Failed to encrypt {self.kind.name} entry: {type(e).__name__}")
            raise self._fail(action, e) from e
        return dataclasses.replace(item, **changes)  # type: ignore[type-var]

    def _opened(self, item: E) -> E:
        try:
            changes = {
                name: _open(self.cipher, getattr(item, name)) for name in self.kind.sealed_fields
            }
        except (CipherError, UnicodeError) as e:
            logger.error(
                f"Failed to decrypt {self.kind.name} entry {getattr(item, 'id', '?')}: "
                f"{type(e).__name__}"
            )
            raise self._fail("list", e) from e
        return dataclasses.replace(item, **changes)  # type: ignore[type-var]

    async def create(self, identity: IdentityPayload | None, item: E) -> None:
        owner_id = self._owner(identity, "create")
        now = datetime.now(UTC)
        sealed = dataclasses.replace(  # type: ignore[type-var]
            self._sealed(item, "create"), created_at=now, updated_at=now
        )
        try:
            await self.storage.create(sealed, owner_id)
        except Exception as e:
            raise self._fail("create", e) from e

    async def update(self, identity: IdentityPayload | None, item: E) -> None:
        """Re-encrypt and store an entry owned by identity.

        Raises:
            ProviderError: Chained from NotFoundError when no entry with this id
                belongs to identity.
        """
        owner_id = self._owner(identity, "update")
        sealed = dataclasses.replace(  # type: ignore[type-var]
            self._sealed(item, "update"), updated_at=datetime.now(UTC)
        )
        try:
            await self.storage.update(sealed, owner_id)
        except Exception as e:
            raise self._fail("update", e) from e

    async def delete(self, identity: IdentityPayload | None, item_id: int) -> None:
        owner_id = self._owner(identity, "delete")
        try:
            await self.storage.delete(item_id, owner_id)
        except Exception as e:
            raise self._fail("delete", e) from e

    async def list(self, identity: IdentityPayload | None) -> list[E]:
        """Return every entry owned by identity, decrypted.

        Raises:
            ProviderError: Chained from NotFoundError when the owner has no
                entries; an empty result is never returned.
        """
        owner_id = self._owner(identity, "list")
        try:
            items = await self.storage.list(owner_id)
        except Exception as e:
            raise self._fail("list", e) from e

        if not items:
            cause = NotFoundError(f"no {self.kind.name} found")
            raise self._fail("list", cause) from cause

        return [self._opened(item) for item in items]


def card_provider(storage: SecretStore[Card], cipher: Cipher) -> SecretProvider[Card]:
    return SecretProvider(CARDS, storage, cipher)


def note_provider(storage: SecretStore[Note], cipher: Cipher) -> SecretProvider[Note]:
    return SecretProvider(NOTES, storage, cipher)


def password_provider(
    storage: SecretStore[Password], cipher: Cipher
) -> SecretProvider[Password]:
    return SecretProvider(PASSWORDS, storage, cipher)


def media_provider(storage: SecretStore[Media], cipher: Cipher) -> SecretProvider[Media]:
    return SecretProvider(MEDIA, storage, cipher)
