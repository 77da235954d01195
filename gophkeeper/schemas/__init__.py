# GophKeeper Pydantic Schemas
from gophkeeper.schemas.secrets import (
    CardIn,
    CardOut,
    MediaIn,
    MediaOut,
    MessageResponse,
    NoteIn,
    NoteOut,
    PasswordIn,
    PasswordOut,
)
from gophkeeper.schemas.users import (
    MachineInfo,
    SessionResponse,
    UserCredentials,
    UserMachineRequest,
)

__all__ = [
    "CardIn",
    "CardOut",
    "MachineInfo",
    "MediaIn",
    "MediaOut",
    "MessageResponse",
    "NoteIn",
    "NoteOut",
    "PasswordIn",
    "PasswordOut",
    "SessionResponse",
    "UserCredentials",
    "UserMachineRequest",
]
