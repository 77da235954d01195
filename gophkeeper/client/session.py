"""In-memory holder for the client's current session."""

from gophkeeper.schemas.users import SessionResponse


class SessionStore:
    """Keeps the session returned by the last register or login."""

    def __init__(self) -> None:
        self._session: SessionResponse | None = None

    def get(self) -> SessionResponse | None:
        return self._session

    def save(self, session: SessionResponse) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None

    @property
    def access_token(self) -> str | None:
        return self._session.access_token if self._session else None
