# GophKeeper Models
from gophkeeper.models.base import BaseModel
from gophkeeper.models.card import Card
from gophkeeper.models.media import Media
from gophkeeper.models.note import Note
from gophkeeper.models.password import Password
from gophkeeper.models.session import Session
from gophkeeper.models.user import User

__all__ = [
    "BaseModel",
    "Card",
    "Media",
    "Note",
    "Password",
    "Session",
    "User",
]
