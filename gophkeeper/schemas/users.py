"""Pydantic schemas for registration and login."""

from datetime import datetime

from pydantic import BaseModel, Field

from gophkeeper.services.entities import SessionInfo


class UserCredentials(BaseModel):
    login: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=1024)


class MachineInfo(BaseModel):
    """The device a user registers or logs in from."""

    ip_address: str = Field(
        default="",
        max_length=45,
        description="Origin address; the connection address is used when empty",
    )


class UserMachineRequest(BaseModel):
    """Request body for /v1/users/register and /v1/users/login."""

    user: UserCredentials
    machine: MachineInfo = Field(default_factory=MachineInfo)


class SessionResponse(BaseModel):
    """A newly opened session."""

    id: int
    user_id: int
    access_token: str
    refresh_token: str
    ip_address: str
    refresh_token_expired_at: int = Field(description="Refresh token expiry, unix seconds")
    token_type: str = "bearer"
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_session(cls, session: SessionInfo) -> "SessionResponse":
        return cls(
            id=session.id,
            user_id=session.user_id,
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            ip_address=session.ip_address,
            refresh_token_expired_at=session.refresh_token_expired_at,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )
