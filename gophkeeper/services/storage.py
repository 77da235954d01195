"""PostgreSQL storage for users, sessions and secrets.

Each operation runs inside a SAVEPOINT so a failed statement does not poison
the request-wide transaction managed by ``get_db``.
"""

import dataclasses
import logging
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gophkeeper.core.errors import InvalidInputError, InvalidPasswordError, NotFoundError
from gophkeeper.models import BaseModel
from gophkeeper.models import Card as CardModel
from gophkeeper.models import Media as MediaModel
from gophkeeper.models import Note as NoteModel
from gophkeeper.models import Password as PasswordModel
from gophkeeper.models import Session as SessionModel
from gophkeeper.models import User as UserModel
from gophkeeper.services.entities import Card, Media, Note, Password, SessionInfo, User
from gophkeeper.services.hashing import PasswordMismatchError, hash_password, verify_password

logger = logging.getLogger(__name__)

E = TypeVar("E")


class UserStorage:
    """Users and their login sessions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_user(self, user: User) -> User:
        """Insert a user with a hashed password and return it with its id.

        Raises:
            InvalidInputError: If the login is already taken.
        """
        row = UserModel(login=user.login, password_hash=hash_password(user.password))
        try:
            async with self.db.begin_nested():
                self.db.add(row)
                await self.db.flush()
        except IntegrityError as e:
            raise InvalidInputError(f"login {user.login!r} is already registered") from e

        return dataclasses.replace(user, id=row.id)

    async def login_user(self, user: User) -> User:
        """Check a login/password pair and return the user with its id.

        Raises:
            NotFoundError: If no user has this login.
            InvalidPasswordError: If the password does not match.
        """
        result = await self.db.execute(
            select(UserModel.id, UserModel.password_hash).where(UserModel.login == user.login)
        )
        found = result.one_or_none()
        if found is None:
            raise NotFoundError(f"user {user.login!r} not found")

        try:
            verify_password(user.password, found.password_hash)
        except PasswordMismatchError as e:
            raise InvalidPasswordError("invalid password") from e

        return dataclasses.replace(user, id=found.id)

    async def create_session(self, session: SessionInfo) -> SessionInfo:
        row = SessionModel(
            user_id=session.user_id,
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            ip_address=session.ip_address,
            refresh_token_expired_at=session.refresh_token_expired_at,
        )
        if session.created_at is not None:
            row.created_at = session.created_at
        if session.updated_at is not None:
            row.updated_at = session.updated_at

        async with self.db.begin_nested():
            self.db.add(row)
            await self.db.flush()
            await self.db.refresh(row)

        return dataclasses.replace(
            session, id=row.id, created_at=row.created_at, updated_at=row.updated_at
        )

    async def find_session_ids_by_origin(self, ip_address: str) -> list[int]:
        """Return ids of all sessions opened from an address.

        Raises:
            NotFoundError: If there are none.
        """
        result = await self.db.execute(
            select(SessionModel.id)
            .where(SessionModel.ip_address == ip_address)
            .order_by(SessionModel.id)
        )
        ids = list(result.scalars().all())
        if not ids:
            raise NotFoundError(f"no sessions for {ip_address}")
        return ids

    async def delete_session(self, session_id: int) -> None:
        async with self.db.begin_nested():
            await self.db.execute(delete(SessionModel).where(SessionModel.id == session_id))


class SecretStorage(Generic[E]):
    """Owner-scoped CRUD for one secret table.

    Args:
        db: Request database session.
        model: ORM model class (must have ``id`` and ``user_id``).
        entity: Dataclass the rows are converted to.
        columns: Entity fields written on create and update.
    """

    def __init__(
        self,
        db: AsyncSession,
        model: type[BaseModel],
        entity: type[E],
        columns: tuple[str, ...],
    ):
        self.db = db
        self.model = model
        self.entity = entity
        self.columns = columns

    def _values(self, item: E) -> dict[str, Any]:
        return {name: getattr(item, name) for name in self.columns}

    def _to_entity(self, row: Any) -> E:
        fields = {f.name for f in dataclasses.fields(self.entity)}  # type: ignore[arg-type]
        return self.entity(**{name: getattr(row, name) for name in fields})

    async def create(self, item: E, owner_id: int) -> None:
        row = self.model(user_id=owner_id, **self._values(item))
        created_at = getattr(item, "created_at", None)
        if created_at is not None:
            row.created_at = created_at
            row.updated_at = getattr(item, "updated_at", None) or created_at
        try:
            async with self.db.begin_nested():
                self.db.add(row)
                await self.db.flush()
        except IntegrityError as e:
            raise InvalidInputError(f"invalid {self.model.__tablename__} entry") from e

    async def update(self, item: E, owner_id: int) -> None:
        """Update a row owned by owner_id.

        Raises:
            NotFoundError: If no row matches (id, owner_id).
        """
        values = self._values(item)
        updated_at = getattr(item, "updated_at", None)
        if updated_at is not None:
            values["updated_at"] = updated_at

        async with self.db.begin_nested():
            result = await self.db.execute(
                update(self.model)
                .where(self.model.id == getattr(item, "id"), self.model.user_id == owner_id)
                .values(**values)
            )
        if result.rowcount == 0:
            raise NotFoundError(f"{self.model.__tablename__} entry not found")

    async def delete(self, item_id: int, owner_id: int) -> None:
        """Delete a row owned by owner_id.

        Raises:
            NotFoundError: If no row matches (id, owner_id).
        """
        async with self.db.begin_nested():
            result = await self.db.execute(
                delete(self.model).where(
                    self.model.id == item_id, self.model.user_id == owner_id
                )
            )
        if result.rowcount == 0:
            raise NotFoundError(f"{self.model.__tablename__} entry not found")

    async def list(self, owner_id: int) -> list[E]:
        result = await self.db.execute(
            select(self.model).where(self.model.user_id == owner_id).order_by(self.model.id)
        )
        return [self._to_entity(row) for row in result.scalars().all()]


def card_storage(db: AsyncSession) -> SecretStorage[Card]:
    return SecretStorage(db, CardModel, Card, ("name", "number", "cvc", "exp_month", "exp_year"))


def note_storage(db: AsyncSession) -> SecretStorage[Note]:
    return SecretStorage(db, NoteModel, Note, ("title", "text", "expired_at"))


def password_storage(db: AsyncSession) -> SecretStorage[Password]:
    return SecretStorage(
        db,
        PasswordModel,
        Password,
        ("title", "login", "password", "url", "note", "expired_at"),
    )


def media_storage(db: AsyncSession) -> SecretStorage[Media]:
    return SecretStorage(
        db, MediaModel, Media, ("title", "body", "media_type", "note", "expired_at")
    )
