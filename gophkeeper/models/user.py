"""User account model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from gophkeeper.models.base import BaseModel


class User(BaseModel):
    """A GophKeeper account. The password is stored as an Argon2 hash."""

    __tablename__ = "users"

    login: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.login}>"
