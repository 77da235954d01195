"""Bank card model. Number and CVC are stored encrypted."""

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gophkeeper.models.base import BaseModel


class Card(BaseModel):
    __tablename__ = "cards"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    number: Mapped[str] = mapped_column(Text, nullable=False)
    cvc: Mapped[str] = mapped_column(Text, nullable=False)
    exp_month: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    exp_year: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
