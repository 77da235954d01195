"""Password hashing for stored user credentials."""

import logging

from argon2 import PasswordHasher
from argon2.exceptions import (
    HashingError,
    InvalidHashError,
    VerificationError,
    VerifyMismatchError,
)

logger = logging.getLogger(__name__)

# Argon2 password hasher with recommended parameters
# Memory: 64 MiB, Time: 3 iterations, Parallelism: 4
ph = PasswordHasher(
    time_cost=3,
    memory_cost=65536,
    parallelism=4,
    hash_len=32,
    salt_len=16,
)


class HashError(Exception):
    """Hashing failed or the stored hash is unreadable."""


class PasswordMismatchError(Exception):
    """Password does not match the stored hash."""


def hash_password(password: str) -> str:
    """Hash a password using Argon2id."""
    try:
        return ph.hash(password)
    except HashingError as e:
        raise HashError(f"password hashing failed: {e}") from e


def verify_password(password: str, password_hash: str) -> None:
    """Verify a password against its hash using constant-time comparison.

    Raises:
        PasswordMismatchError: If the password does not match.
        HashError: If the stored hash cannot be parsed.
    """
    try:
        ph.verify(password_hash, password)
    except VerifyMismatchError as e:
        raise PasswordMismatchError("password does not match") from e
    except InvalidHashError as e:
        raise HashError("stored password hash is invalid") from e
    except VerificationError as e:
        raise PasswordMismatchError("password verification failed") from e
