"""Registration and login: user records plus device sessions."""

import logging
import uuid
from datetime import UTC, datetime
from typing import Protocol

from gophkeeper.core.errors import NotFoundError, UserProviderError
from gophkeeper.core.identity import IdentityPayload
from gophkeeper.services.auth import Authorizer, TokenError
from gophkeeper.services.entities import SessionInfo, User

logger = logging.getLogger(__name__)


class UserStore(Protocol):
    async def create_user(self, user: User) -> User: ...

    async def login_user(self, user: User) -> User: ...

    async def create_session(self, session: SessionInfo) -> SessionInfo: ...

    async def find_session_ids_by_origin(self, ip_address: str) -> list[int]: ...

    async def delete_session(self, session_id: int) -> None: ...


class UserSessionProvider:
    """Creates users, verifies logins and mints sessions for them."""

    def __init__(self, storage: UserStore, authorizer: Authorizer):
        self.storage = storage
        self.authorizer = authorizer

    async def register(self, login: str, password: str, origin: str) -> SessionInfo:
        """Create a user and open its first session.

        Raises:
            UserProviderError: Chained from the storage or token failure.
        """
        try:
            user = await self.storage.create_user(User(login=login, password=password))
        except Exception as e:
            raise UserProviderError(f"user provider error: create user: {e}") from e

        session = await self._open_session(user, origin)
        logger.info(f"Registered user {user.id} from {origin}")
        return session

    async def login(self, login: str, password: str, origin: str) -> SessionInfo:
        """Verify credentials and open a session, evicting older ones from origin.

        Raises:
            UserProviderError: Chained from NotFoundError, InvalidPasswordError,
                or any other storage or token failure.
        """
        try:
            user = await self.storage.login_user(User(login=login, password=password))
        except Exception as e:
            raise UserProviderError(f"user provider error: login: {e}") from e

        await self._evict_sessions(origin)

        session = await self._open_session(user, origin)
        logger.info(f"User {user.id} logged in from {origin}")
        return session

    async def _evict_sessions(self, origin: str) -> None:
        """Delete existing sessions for origin. Failures are logged only."""
        try:
            session_ids = await self.storage.find_session_ids_by_origin(origin)
        except NotFoundError:
            return
        except Exception as e:
            logger.warning(f"Failed to look up sessions for {origin}: {e}")
            return

        for session_id in session_ids:
            try:
                await self.storage.delete_session(session_id)
            except Exception as e:
                logger.warning(f"Failed to delete session {session_id}: {e}")

    async def _open_session(self, user: User, origin: str) -> SessionInfo:
        try:
            access_token = self.authorizer.issue(IdentityPayload(id=user.id))
        except TokenError as e:
            raise UserProviderError("user provider error: generate access token") from e

        now = datetime.now(UTC)
        session = SessionInfo(
            user_id=user.id,
            access_token=access_token,
            refresh_token=str(uuid.uuid4()),
            ip_address=origin,
            refresh_token_expired_at=int((now + self.authorizer.refresh_lifetime()).timestamp()),
            created_at=now,
            updated_at=now,
        )

        try:
            return await self.storage.create_session(session)
        except Exception as e:
            raise UserProviderError(f"user provider error: create session: {e}") from e
