"""Login session model."""

from sqlalchemy import BigInteger, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gophkeeper.models.base import BaseModel


class Session(BaseModel):
    """One row per successful login or registration.

    Rows are looked up by ip_address so a new login from the same device
    can evict the previous session.
    """

    __tablename__ = "sessions"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    access_token: Mapped[str] = mapped_column(Text, nullable=False)
    refresh_token: Mapped[str] = mapped_column(String(36), nullable=False)
    ip_address: Mapped[str] = mapped_column(String(45), nullable=False, index=True)
    refresh_token_expired_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    def __repr__(self) -> str:
        return f"<Session {self.id} user={self.user_id} ip={self.ip_address}>"
