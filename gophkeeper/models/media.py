"""Binary file model.

The body column holds the hex ciphertext of the file as ASCII bytes.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, LargeBinary, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gophkeeper.models.base import BaseModel


class Media(BaseModel):
    __tablename__ = "medias"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    body: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    media_type: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    note: Mapped[str] = mapped_column(Text, nullable=False, default="")
    expired_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
