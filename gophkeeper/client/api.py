"""Async HTTP client for the GophKeeper server."""

import logging
import ssl
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter

from gophkeeper.client.config import ClientSettings
from gophkeeper.client.session import SessionStore
from gophkeeper.core.errors import InvalidPasswordError, NotFoundError
from gophkeeper.core.retry import RetryConfig, retry_async
from gophkeeper.schemas.secrets import (
    CardIn,
    CardOut,
    MediaIn,
    MediaOut,
    NoteIn,
    NoteOut,
    PasswordIn,
    PasswordOut,
)
from gophkeeper.schemas.users import SessionResponse

logger = logging.getLogger(__name__)

REGISTER_PATH = "/v1/users/register"
LOGIN_PATH = "/v1/users/login"

In = TypeVar("In", bound=BaseModel)
Out = TypeVar("Out", bound=BaseModel)


class ClientError(Exception):
    """Request failed with an unexpected status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UnauthorizedError(ClientError):
    """No session, or the server rejected the access token."""


class ConflictError(ClientError):
    """The login is already registered."""


def build_ssl_context(settings: ClientSettings) -> ssl.SSLContext:
    """TLS context that verifies the server and presents the client certificate."""
    context = ssl.create_default_context(cafile=str(settings.tls_ca_path))
    context.load_cert_chain(str(settings.tls_cert_path), str(settings.tls_key_path))
    return context


class SecretsAPI(Generic[In, Out]):
    """CRUD calls for one secret kind."""

    def __init__(self, client: "GophKeeperClient", path: str, schema_out: type[Out]):
        self._client = client
        self._path = path
        self._list_adapter = TypeAdapter(list[schema_out])  # type: ignore[valid-type]

    async def create(self, item: In) -> None:
        await self._client._request("POST", self._path, json=item.model_dump(mode="json"))

    async def update(self, item: In) -> None:
        await self._client._request("PUT", self._path, json=item.model_dump(mode="json"))

    async def delete(self, item_id: int) -> None:
        await self._client._request("DELETE", f"{self._path}/{item_id}")

    async def list(self) -> list[Out]:
        """Fetch all entries.

        Raises:
            NotFoundError: If the user has none.
        """
        response = await self._client._request("GET", self._path)
        return self._list_adapter.validate_python(response.json())


class GophKeeperClient:
    """Client for registration, login and secret CRUD over mutual TLS.

    Usage:
        async with GophKeeperClient(settings) as client:
            await client.login("alice", "secret")
            notes = await client.notes.list()
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        session_store: SessionStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_config: RetryConfig | None = None,
    ):
        self.settings = settings or ClientSettings()
        self.session_store = session_store or SessionStore()
        self.retry_config = retry_config or RetryConfig(
            max_retries=self.settings.max_retries,
            base_delay=self.settings.retry_base_delay,
        )

        client_kwargs: dict[str, Any] = {
            "base_url": self.settings.base_url,
            "timeout": self.settings.request_timeout,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        else:
            client_kwargs["verify"] = build_ssl_context(self.settings)
        self._http = httpx.AsyncClient(**client_kwargs)

        self.cards: SecretsAPI[CardIn, CardOut] = SecretsAPI(self, "/v1/cards", CardOut)
        self.notes: SecretsAPI[NoteIn, NoteOut] = SecretsAPI(self, "/v1/notes", NoteOut)
        self.passwords: SecretsAPI[PasswordIn, PasswordOut] = SecretsAPI(
            self, "/v1/passwords", PasswordOut
        )
        self.medias: SecretsAPI[MediaIn, MediaOut] = SecretsAPI(self, "/v1/medias", MediaOut)

    async def __aenter__(self) -> "GophKeeperClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    async def register(self, login: str, password: str) -> SessionResponse:
        """Create an account and keep the returned session.

        Raises:
            ConflictError: If the login is taken.
        """
        return await self._open_session(REGISTER_PATH, login, password)

    async def login(self, login: str, password: str) -> SessionResponse:
        """Log in and keep the returned session.

        Raises:
            NotFoundError: If the login is unknown.
            InvalidPasswordError: If the password is wrong.
        """
        return await self._open_session(LOGIN_PATH, login, password)

    async def _open_session(self, path: str, login: str, password: str) -> SessionResponse:
        body = {
            "user": {"login": login, "password": password},
            "machine": {"ip_address": self.settings.machine_ip},
        }
        try:
            response = await self._request("POST", path, json=body, auth=False)
        except UnauthorizedError as e:
            raise InvalidPasswordError("invalid password") from e

        session = SessionResponse.model_validate(response.json())
        self.session_store.save(session)
        logger.debug(f"Session {session.id} opened for user {session.user_id}")
        return session

    async def _request(
        self, method: str, path: str, *, auth: bool = True, **kwargs: Any
    ) -> httpx.Response:
        headers: dict[str, str] = {}
        if auth:
            token = self.session_store.access_token
            if not token:
                raise UnauthorizedError("not logged in")
            headers["Authorization"] = f"Bearer {token}"

        async def do_request() -> httpx.Response:
            response = await self._http.request(method, path, headers=headers, **kwargs)
            if response.status_code >= 500:
                response.raise_for_status()
            return response

        try:
            response = await retry_async(do_request, self.retry_config)
        except httpx.HTTPStatusError as e:
            raise ClientError(
                f"{method} {path} failed: {e.response.status_code}", e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise ClientError(f"{method} {path} failed: {e}") from e

        if auth and response.status_code == 401:
            # Token rejected; a new login is needed
            self.session_store.clear()
        self._check_status(method, path, response)
        return response

    @staticmethod
    def _check_status(method: str, path: str, response: httpx.Response) -> None:
        status = response.status_code
        if status < 400:
            return

        try:
            body = response.json()
        except ValueError:
            body = None
        detail = body.get("detail") if isinstance(body, dict) else response.text
        message = f"{method} {path} failed: {status} {detail}"

        if status == 404:
            raise NotFoundError(message)
        if status == 401:
            raise UnauthorizedError(message, status)
        if status == 409:
            raise ConflictError(message, status)
        raise ClientError(message, status)
