"""Access token issuance and verification (JWT, HMAC-signed)."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt.exceptions import PyJWTError

from gophkeeper.core.config import Settings
from gophkeeper.core.durations import parse_duration
from gophkeeper.core.errors import InvalidIdentityError
from gophkeeper.core.identity import IdentityPayload

logger = logging.getLogger(__name__)

SIGNING_ALGORITHM = "HS256"
# Any HMAC variant is accepted on verify; other families are rejected outright
ACCEPTED_ALGORITHMS = ("HS256", "HS384", "HS512")
LEEWAY_SECONDS = 5


class AuthError(Exception):
    """Base authentication error."""

    pass


class InvalidConfigError(AuthError):
    """Authorizer secret or lifetimes are unusable."""

    pass


class TokenError(AuthError):
    """JWT token error."""

    pass


class TokenExpiredError(TokenError):
    """JWT token has expired."""

    pass


class UnexpectedSigningMethodError(TokenError):
    """JWT token was signed with an algorithm outside the HMAC family."""

    pass


class TokenParseError(TokenError):
    """JWT token is malformed or its signature does not verify."""

    pass


class SigningError(TokenError):
    """JWT token could not be signed."""

    pass


def _parse_lifetime(name: str, value: str) -> timedelta:
    try:
        lifetime = parse_duration(value)
    except (TypeError, ValueError) as e:
        raise InvalidConfigError(f"failed to parse {name} lifetime {value!r}") from e

    # Expiry timestamps are computed as now + lifetime
    try:
        datetime.now(UTC) + lifetime
    except OverflowError as e:
        raise InvalidConfigError(f"{name} lifetime {value!r} is too large") from e
    return lifetime


class Authorizer:
    """Issues and verifies access tokens.

    Immutable after construction; safe to share between concurrent requests.
    Tokens are never revoked: a correctly signed, unexpired token is accepted
    regardless of whether its session row still exists.
    """

    def __init__(self, secret: str, access_lifetime: str, refresh_lifetime: str):
        if not secret:
            raise InvalidConfigError("jwt secret must not be empty")

        access = _parse_lifetime("access", access_lifetime)
        refresh = _parse_lifetime("refresh", refresh_lifetime)
        if access < timedelta(0):
            raise InvalidConfigError("access lifetime must not be negative")
        if refresh <= timedelta(0):
            raise InvalidConfigError("refresh lifetime must be positive")

        self._secret = secret
        self._access_lifetime = access
        self._refresh_lifetime = refresh

    @classmethod
    def from_settings(cls, settings: Settings) -> "Authorizer":
        return cls(
            secret=settings.jwt_secret,
            access_lifetime=settings.jwt_access_lifetime,
            refresh_lifetime=settings.jwt_refresh_lifetime,
        )

    def refresh_lifetime(self) -> timedelta:
        """Lifetime used to stamp session refresh expiry."""
        return self._refresh_lifetime

    def issue(self, payload: IdentityPayload) -> str:
        """Create a signed access token carrying the identity payload."""
        now = datetime.now(UTC)
        claims: dict[str, Any] = {
            **payload.to_claims(),
            "iat": now,
            "exp": now + self._access_lifetime,
        }
        try:
            token = jwt.encode(claims, self._secret, algorithm=SIGNING_ALGORITHM)
        except (PyJWTError, TypeError, ValueError) as e:
            raise SigningError("failed to sign access token") from e
        # PyJWT 2.x returns str; older type stubs may declare bytes
        return str(token)

    def verify(self, token: str) -> IdentityPayload:
        """Verify a token and return the identity it carries.

        Raises:
            UnexpectedSigningMethodError: If the header names a non-HMAC algorithm.
            TokenExpiredError: If the token is past its expiry.
            TokenParseError: For any other malformed or forged token.
        """
        try:
            header = jwt.get_unverified_header(token)
        except PyJWTError as e:
            raise TokenParseError(f"Invalid token: {e}") from e

        alg = header.get("alg")
        if alg not in ACCEPTED_ALGORITHMS:
            raise UnexpectedSigningMethodError(f"unexpected signing method: {alg}")

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=list(ACCEPTED_ALGORITHMS),
                leeway=LEEWAY_SECONDS,
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except PyJWTError as e:
            raise TokenParseError(f"Invalid token: {e}") from e

        # Second expiry check against the decoded claim, without leeway
        exp = claims.get("exp")
        if not isinstance(exp, int | float) or datetime.now(UTC).timestamp() > exp:
            raise TokenExpiredError("Token has expired")

        try:
            return IdentityPayload.from_claims(claims)
        except InvalidIdentityError as e:
            raise TokenParseError("Invalid token: bad identity claim") from e
