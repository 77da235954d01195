"""Domain objects passed between the API, providers and storage.

Secret fields hold plaintext on the way in and out of a provider and
ciphertext between the provider and storage.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class User:
    login: str
    password: str
    id: int = 0


@dataclass
class SessionInfo:
    user_id: int
    access_token: str
    refresh_token: str
    ip_address: str
    refresh_token_expired_at: int  # unix seconds
    id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Card:
    name: str = ""
    number: str = ""
    cvc: str = ""
    exp_month: int = 0
    exp_year: int = 0
    id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Note:
    title: str = ""
    text: str = ""
    expired_at: datetime | None = None
    id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Password:
    title: str = ""
    login: str = ""
    password: str = ""
    url: str = ""
    note: str = ""
    expired_at: datetime | None = None
    id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Media:
    title: str = ""
    body: bytes = field(default=b"", repr=False)
    media_type: str = ""
    note: str = ""
    expired_at: datetime | None = None
    id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
