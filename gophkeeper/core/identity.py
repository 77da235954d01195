"""Identity payload and its request-scoped carrier."""

from dataclasses import dataclass
from typing import Any

from gophkeeper.core.errors import InvalidIdentityError, NoIdentityError


@dataclass(frozen=True)
class IdentityPayload:
    """The user identity embedded in access tokens.

    An id of zero means "no identity".
    """

    id: int

    @property
    def is_authenticated(self) -> bool:
        return self.id != 0

    def to_claims(self) -> dict[str, Any]:
        return {"id": self.id}

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "IdentityPayload":
        """Build a payload from decoded token claims.

        Raises:
            InvalidIdentityError: If the id claim is missing or not an integer.
        """
        value = claims.get("id")
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidIdentityError("token payload id must be an integer")
        return cls(id=value)


IDENTITY_STATE_KEY = "identity"


def put_identity(request: Any, payload: IdentityPayload) -> None:
    """Attach an identity payload to a request's state."""
    setattr(request.state, IDENTITY_STATE_KEY, payload)


def get_identity(request: Any) -> IdentityPayload:
    """Fetch the identity payload attached to a request.

    Raises:
        NoIdentityError: If nothing was attached.
        InvalidIdentityError: If the attached value is not an IdentityPayload.
    """
    value = getattr(request.state, IDENTITY_STATE_KEY, None)
    if value is None:
        raise NoIdentityError("identity payload not found in request")
    if not isinstance(value, IdentityPayload):
        raise InvalidIdentityError("identity payload is invalid")
    return value
