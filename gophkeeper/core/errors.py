"""Errors that cross layers (storage -> provider -> HTTP boundary).

Callers tell these apart by type, never by message.
"""


class NotFoundError(Exception):
    """Raised when an object, resource or user was not found."""


class InvalidPasswordError(Exception):
    """Raised when a login attempt used the wrong password."""


class InvalidInputError(Exception):
    """Raised when the submitted data is invalid (e.g. duplicate login)."""


class NoIdentityError(Exception):
    """Raised when no identity payload is attached to the request."""


class InvalidIdentityError(NoIdentityError):
    """Raised when the value stored as identity is not a usable payload."""


class ProviderError(Exception):
    """Base error raised by the user/session and secret providers.

    A provider always raises its own error chained from the underlying
    cause (``raise ... from exc``), so logs keep the full chain while callers
    can still ask what went wrong with :meth:`is_caused_by`.
    """

    def is_caused_by(self, *error_types: type[BaseException]) -> bool:
        """Return True if any exception in the cause chain matches."""
        seen: set[int] = set()
        exc: BaseException | None = self.__cause__
        while exc is not None and id(exc) not in seen:
            if isinstance(exc, error_types):
                return True
            seen.add(id(exc))
            exc = exc.__cause__
        return False


class UserProviderError(ProviderError):
    """User/session provider failure."""


class CardsProviderError(ProviderError):
    """Cards provider failure."""


class NotesProviderError(ProviderError):
    """Notes provider failure."""


class PasswordsProviderError(ProviderError):
    """Passwords provider failure."""


class MediaProviderError(ProviderError):
    """Media provider failure."""
