"""Tests for the encrypting secret providers."""

import dataclasses
from unittest.mock import AsyncMock, MagicMock

import pytest

from gophkeeper.core.errors import (
    CardsProviderError,
    MediaProviderError,
    NoIdentityError,
    NotesProviderError,
    NotFoundError,
    PasswordsProviderError,
)
from gophkeeper.core.identity import IdentityPayload
from gophkeeper.services.crypto import AuthenticationFailedError, CipherError
from gophkeeper.services.entities import Card, Media, Note, Password
from gophkeeper.services.secrets import (
    card_provider,
    media_provider,
    note_provider,
    password_provider,
)

pytestmark = pytest.mark.asyncio

ALICE = IdentityPayload(id=1)
BOB = IdentityPayload(id=2)

CASES = [
    pytest.param(
        card_provider,
        CardsProviderError,
        Card(name="visa", number="4111111111111111", cvc="123", exp_month=12, exp_year=2030),
        ("number", "cvc"),
        id="cards",
    ),
    pytest.param(
        note_provider,
        NotesProviderError,
        Note(title="todo", text="buy milk"),
        ("text",),
        id="notes",
    ),
    pytest.param(
        password_provider,
        PasswordsProviderError,
        Password(title="mail", login="alice", password="hunter2", url="https://mail", note="x"),
        ("password",),
        id="passwords",
    ),
    pytest.param(
        media_provider,
        MediaProviderError,
        Media(title="scan", body=bytes(range(256)), media_type="image/png", note="id card"),
        ("body",),
        id="media",
    ),
]


@pytest.mark.parametrize("factory,error,item,sealed", CASES)
class TestSecretProvider:
    """Behaviour shared by every secret kind."""

    async def test_create_then_list(
        self, factory, error, item, sealed, cipher, secret_store_factory
    ):
        """Test that a created entry lists back with the same plaintext."""
        provider = factory(secret_store_factory(), cipher)
        await provider.create(ALICE, item)

        [listed] = await provider.list(ALICE)
        for name in sealed:
            assert getattr(listed, name) == getattr(item, name)
        assert listed.id > 0
        assert listed.created_at is not None

    async def test_stored_fields_are_encrypted(
        self, factory, error, item, sealed, cipher, secret_store_factory
    ):
        """Test that storage receives ciphertext for sealed fields only."""
        store = secret_store_factory()
        await factory(store, cipher).create(ALICE, item)

        [stored] = store.stored(ALICE.id)
        for field in dataclasses.fields(item):
            value = getattr(stored, field.name)
            if field.name in sealed:
                assert value != getattr(item, field.name)
            elif field.name not in ("id", "created_at", "updated_at"):
                assert value == getattr(item, field.name)

    async def test_input_not_mutated(
        self, factory, error, item, sealed, cipher, secret_store_factory
    ):
        """Test that the caller's entity keeps its plaintext."""
        original = dataclasses.replace(item)
        await factory(secret_store_factory(), cipher).create(ALICE, item)
        assert item == original

    async def test_empty_list_is_not_found(
        self, factory, error, item, sealed, cipher, secret_store_factory
    ):
        """Test that an owner with no entries gets NotFound, not []."""
        provider = factory(secret_store_factory(), cipher)
        with pytest.raises(error) as exc_info:
            await provider.list(ALICE)
        assert exc_info.value.is_caused_by(NotFoundError)

    @pytest.mark.parametrize("identity", [None, IdentityPayload(id=0)])
    async def test_no_identity(self, factory, error, item, sealed, identity):
        """Test that every operation refuses an anonymous caller untouched."""
        store = MagicMock()
        store.create = AsyncMock()
        store.update = AsyncMock()
        store.delete = AsyncMock()
        store.list = AsyncMock()
        cipher = MagicMock()
        provider = factory(store, cipher)

        for call in (
            provider.create(identity, item),
            provider.update(identity, item),
            provider.delete(identity, 1),
            provider.list(identity),
        ):
            with pytest.raises(error) as exc_info:
                await call
            assert exc_info.value.is_caused_by(NoIdentityError)

        store.create.assert_not_called()
        store.update.assert_not_called()
        store.delete.assert_not_called()
        store.list.assert_not_called()
        cipher.encrypt.assert_not_called()
        cipher.decrypt.assert_not_called()

    async def test_entries_scoped_to_owner(
        self, factory, error, item, sealed, cipher, secret_store_factory
    ):
        """Test that one user never sees, changes or deletes another's entries."""
        provider = factory(secret_store_factory(), cipher)
        await provider.create(ALICE, item)
        [entry] = await provider.list(ALICE)

        with pytest.raises(error) as exc_info:
            await provider.list(BOB)
        assert exc_info.value.is_caused_by(NotFoundError)

        with pytest.raises(error) as exc_info:
            await provider.update(BOB, entry)
        assert exc_info.value.is_caused_by(NotFoundError)

        with pytest.raises(error) as exc_info:
            await provider.delete(BOB, entry.id)
        assert exc_info.value.is_caused_by(NotFoundError)

        assert len(await provider.list(ALICE)) == 1

    async def test_delete(self, factory, error, item, sealed, cipher, secret_store_factory):
        """Test that a deleted entry is gone."""
        provider = factory(secret_store_factory(), cipher)
        await provider.create(ALICE, item)
        [entry] = await provider.list(ALICE)

        await provider.delete(ALICE, entry.id)

        with pytest.raises(error):
            await provider.list(ALICE)

    async def test_storage_failure_wrapped(
        self, factory, error, item, sealed, cipher, secret_store_factory
    ):
        """Test that storage errors are wrapped in the kind's error."""
        store = secret_store_factory()
        store.fail_with = RuntimeError("connection lost")
        provider = factory(store, cipher)

        with pytest.raises(error, match="provider error: create: connection lost") as exc_info:
            await provider.create(ALICE, item)
        assert exc_info.value.is_caused_by(RuntimeError)

    async def test_undecryptable_entry(
        self, factory, error, item, sealed, cipher, secret_store_factory
    ):
        """Test that ciphertext under another key fails the whole list."""
        store = secret_store_factory()
        await factory(store, cipher).create(ALICE, item)

        other = MagicMock()
        other.decrypt.side_effect = AuthenticationFailedError("bad tag")
        with pytest.raises(error) as exc_info:
            await factory(store, other).list(ALICE)
        assert exc_info.value.is_caused_by(CipherError)


class TestUpdates:
    """Update-specific behaviour."""

    async def test_update_replaces_plaintext(self, cipher, secret_store_factory):
        """Test that an update is re-encrypted and visible on list."""
        provider = note_provider(secret_store_factory(), cipher)
        await provider.create(ALICE, Note(title="todo", text="buy milk"))
        [entry] = await provider.list(ALICE)

        await provider.update(ALICE, dataclasses.replace(entry, text="buy bread"))

        [updated] = await provider.list(ALICE)
        assert updated.text == "buy bread"
        assert updated.updated_at >= entry.updated_at

    async def test_update_unknown_id(self, cipher, secret_store_factory):
        """Test that updating a missing id reports NotFound."""
        provider = card_provider(secret_store_factory(), cipher)
        with pytest.raises(CardsProviderError) as exc_info:
            await provider.update(ALICE, Card(id=99, number="1", cvc="2"))
        assert exc_info.value.is_caused_by(NotFoundError)

    async def test_error_message_prefix(self, cipher, secret_store_factory):
        """Test the provider error message format."""
        provider = password_provider(secret_store_factory(), cipher)
        with pytest.raises(PasswordsProviderError, match=r"^passwords provider error: list: "):
            await provider.list(ALICE)


class TestMediaBodies:
    """Binary media payloads."""

    @pytest.mark.parametrize(
        "body",
        [b"", b"\x00\xff\x00", "naïve".encode("utf-8"), bytes(range(256)) * 4],
        ids=["empty", "nul-bytes", "utf8", "all-bytes"],
    )
    async def test_body_roundtrip(self, body, cipher, secret_store_factory):
        """Test that arbitrary bytes survive encryption."""
        store = secret_store_factory()
        provider = media_provider(store, cipher)
        await provider.create(ALICE, Media(title="blob", body=body, media_type="x/y"))

        [stored] = store.stored(ALICE.id)
        assert isinstance(stored.body, bytes)
        bytes.fromhex(stored.body.decode("ascii"))

        [listed] = await provider.list(ALICE)
        assert listed.body == body
