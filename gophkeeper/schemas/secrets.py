"""Pydantic schemas for the secret endpoints.

Timestamps travel as ``YYYY-MM-DD HH:MM:SS`` (UTC); an empty string means
"not set". Media bodies travel as standard base64.
"""

import base64
import binascii
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    Field,
    PlainSerializer,
    field_serializer,
    field_validator,
)

from gophkeeper.services.entities import Card, Media, Note, Password

WIRE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _parse_wire_time(value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            parsed = datetime.strptime(value, WIRE_TIME_FORMAT)
        except ValueError:
            # Fall back to ISO 8601 for clients that send it
            parsed = datetime.fromisoformat(value)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return value


def _format_wire_time(value: datetime | None) -> str:
    if value is None:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.strftime(WIRE_TIME_FORMAT)


WireTime = Annotated[
    datetime | None,
    BeforeValidator(_parse_wire_time),
    PlainSerializer(_format_wire_time, return_type=str),
]


class MessageResponse(BaseModel):
    message: str


class CardIn(BaseModel):
    id: int = 0
    name: str = Field(default="", max_length=255)
    number: str = ""
    cvc: str = ""
    exp_month: int = Field(default=0, ge=0, le=12)
    exp_year: int = Field(default=0, ge=0)

    def to_entity(self) -> Card:
        return Card(
            id=self.id,
            name=self.name,
            number=self.number,
            cvc=self.cvc,
            exp_month=self.exp_month,
            exp_year=self.exp_year,
        )


class CardOut(CardIn):
    created_at: WireTime = None
    updated_at: WireTime = None

    @classmethod
    def from_entity(cls, card: Card) -> "CardOut":
        return cls(
            id=card.id,
            name=card.name,
            number=card.number,
            cvc=card.cvc,
            exp_month=card.exp_month,
            exp_year=card.exp_year,
            created_at=card.created_at,
            updated_at=card.updated_at,
        )


class NoteIn(BaseModel):
    id: int = 0
    title: str = Field(default="", max_length=255)
    note: str = Field(default="", description="Note text, stored encrypted")
    expired_at: WireTime = None

    def to_entity(self) -> Note:
        return Note(id=self.id, title=self.title, text=self.note, expired_at=self.expired_at)


class NoteOut(NoteIn):
    created_at: WireTime = None
    updated_at: WireTime = None

    @classmethod
    def from_entity(cls, note: Note) -> "NoteOut":
        return cls(
            id=note.id,
            title=note.title,
            note=note.text,
            expired_at=note.expired_at,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )


class PasswordIn(BaseModel):
    id: int = 0
    title: str = Field(default="", max_length=255)
    login: str = Field(default="", max_length=255)
    password: str = ""
    url: str = Field(default="", max_length=2048)
    note: str = ""
    expired_at: WireTime = None

    def to_entity(self) -> Password:
        return Password(
            id=self.id,
            title=self.title,
            login=self.login,
            password=self.password,
            url=self.url,
            note=self.note,
            expired_at=self.expired_at,
        )


class PasswordOut(PasswordIn):
    created_at: WireTime = None
    updated_at: WireTime = None

    @classmethod
    def from_entity(cls, password: Password) -> "PasswordOut":
        return cls(
            id=password.id,
            title=password.title,
            login=password.login,
            password=password.password,
            url=password.url,
            note=password.note,
            expired_at=password.expired_at,
            created_at=password.created_at,
            updated_at=password.updated_at,
        )


class MediaIn(BaseModel):
    id: int = 0
    title: str = Field(default="", max_length=255)
    media: bytes = Field(default=b"", description="File contents, base64 encoded")
    media_type: str = Field(default="", max_length=255)
    note: str = ""
    expired_at: WireTime = None

    @field_validator("media", mode="before")
    @classmethod
    def decode_media(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return base64.b64decode(v, validate=True)
            except (binascii.Error, ValueError) as e:
                raise ValueError("media must be base64 encoded") from e
        return v

    @field_serializer("media")
    def encode_media(self, v: bytes) -> str:
        return base64.b64encode(v).decode("ascii")

    def to_entity(self) -> Media:
        return Media(
            id=self.id,
            title=self.title,
            body=self.media,
            media_type=self.media_type,
            note=self.note,
            expired_at=self.expired_at,
        )


class MediaOut(MediaIn):
    created_at: WireTime = None
    updated_at: WireTime = None

    @classmethod
    def from_entity(cls, media: Media) -> "MediaOut":
        return cls(
            id=media.id,
            title=media.title,
            media=media.body,
            media_type=media.media_type,
            note=media.note,
            expired_at=media.expired_at,
            created_at=media.created_at,
            updated_at=media.updated_at,
        )
