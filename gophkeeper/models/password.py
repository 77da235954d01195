"""Stored account credentials. The password is stored encrypted."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gophkeeper.models.base import BaseModel


class Password(BaseModel):
    __tablename__ = "passwords"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    login: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    password: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False, default="")
    note: Mapped[str] = mapped_column(Text, nullable=False, default="")
    expired_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
