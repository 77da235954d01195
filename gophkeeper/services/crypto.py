"""Symmetric encryption for secret fields stored at rest.

The AES-256-GCM key is derived once from a passphrase and salt with
Argon2id. Ciphertext is hex(nonce || sealed body || tag).
"""

import logging
import os
import secrets

from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

logger = logging.getLogger(__name__)

# Argon2id parameters for key derivation
KEY_LENGTH = 32  # bytes -> AES-256
KDF_MEMORY_COST = 64 * 1024  # KiB (64 MiB)
KDF_TIME_COST = 1
NONCE_SIZE = 12  # GCM standard nonce


class CipherError(Exception):
    """Base exception for cipher operations."""


class InvalidCipherConfigError(CipherError):
    """Raised when the passphrase or salt is unusable."""


class KeyDerivationError(CipherError):
    """Raised when the KDF fails."""


class MalformedCiphertextError(CipherError):
    """Raised when the ciphertext is not a hex string."""


class InvalidCiphertextLengthError(CipherError):
    """Raised when the decoded ciphertext is not longer than the nonce."""


class AuthenticationFailedError(CipherError):
    """Raised when the GCM tag check fails.

    Wrong passphrase, wrong salt and corrupted data all end up here.
    """


def derive_key(passphrase: str, salt: str, parallelism: int | None = None) -> bytes:
    """Derive a KEY_LENGTH-byte key from passphrase and salt with Argon2id.

    Parallelism defaults to the number of available CPUs. It is an input
    of the KDF, so data encrypted on one host only decrypts on a host that
    derives with the same value.

    Raises:
        InvalidCipherConfigError: If passphrase or salt is empty.
        KeyDerivationError: If Argon2 rejects the input (e.g. salt under 8 bytes).
    """
    if not passphrase or not salt:
        raise InvalidCipherConfigError("cipher passphrase and salt must not be empty")

    lanes = parallelism or os.cpu_count() or 1
    try:
        return hash_secret_raw(
            secret=passphrase.encode("utf-8"),
            salt=salt.encode("utf-8"),
            time_cost=KDF_TIME_COST,
            memory_cost=KDF_MEMORY_COST,
            parallelism=lanes,
            hash_len=KEY_LENGTH,
            type=Type.ID,
        )
    except HashingError as e:
        raise KeyDerivationError(f"key derivation failed: {e}") from e


class Cipher:
    """Authenticated encryption of strings under a derived key.

    Immutable after construction; safe to share between concurrent requests.
    """

    def __init__(self, passphrase: str, salt: str, parallelism: int | None = None):
        self._aesgcm = AESGCM(derive_key(passphrase, salt, parallelism))

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a string, returning hex(nonce || ciphertext || tag).

        Raises:
            CipherError: If randomness or the cipher fails.
        """
        try:
            nonce = secrets.token_bytes(NONCE_SIZE)
            sealed = self._aesgcm.encrypt(
                nonce, plaintext.encode("utf-8", "surrogatepass"), None
            )
        except Exception as e:
            raise CipherError(f"encryption failed: {type(e).__name__}") from e
        return (nonce + sealed).hex()

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt a value produced by encrypt().

        Raises:
            MalformedCiphertextError: If the input is not hex.
            InvalidCiphertextLengthError: If it is not longer than the nonce.
            AuthenticationFailedError: If the tag check fails.
        """
        try:
            data = bytes.fromhex(ciphertext)
        except (TypeError, ValueError) as e:
            raise MalformedCiphertextError("ciphertext is not a hex string") from e

        if len(data) <= NONCE_SIZE:
            raise InvalidCiphertextLengthError(
                f"invalid ciphertext length: {len(data)} bytes, "
                f"must be more than {NONCE_SIZE}"
            )

        nonce, sealed = data[:NONCE_SIZE], data[NONCE_SIZE:]
        try:
            plaintext = self._aesgcm.decrypt(nonce, sealed, None)
        except InvalidTag as e:
            raise AuthenticationFailedError("ciphertext authentication failed") from e

        try:
            return plaintext.decode("utf-8", "surrogatepass")
        except UnicodeDecodeError as e:
            raise CipherError("decrypted value is not valid text") from e
