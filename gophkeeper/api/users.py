"""Registration and login endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from gophkeeper.api.deps import get_user_provider, raise_http_error
from gophkeeper.core.errors import InvalidInputError, UserProviderError
from gophkeeper.core.request_utils import get_client_ip
from gophkeeper.schemas.users import SessionResponse, UserMachineRequest
from gophkeeper.services.users import UserSessionProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _origin(data: UserMachineRequest, request: Request) -> str:
    """Origin address: the declared machine address, else the peer address."""
    return data.machine.ip_address or get_client_ip(request) or "unknown"


@router.post("/register", response_model=SessionResponse)
async def register(
    data: UserMachineRequest,
    request: Request,
    provider: UserSessionProvider = Depends(get_user_provider),
) -> SessionResponse:
    """Create an account and return its first session.

    Returns 409 Conflict if the login is already taken.
    """
    try:
        session = await provider.register(
            data.user.login, data.user.password, _origin(data, request)
        )
    except UserProviderError as e:
        if e.is_caused_by(InvalidInputError):
            logger.info("Registration rejected: login already taken")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail="Login is already registered"
            ) from e
        raise_http_error(e, "failed to register user")

    return SessionResponse.from_session(session)


@router.post("/login", response_model=SessionResponse)
async def login(
    data: UserMachineRequest,
    request: Request,
    provider: UserSessionProvider = Depends(get_user_provider),
) -> SessionResponse:
    """Verify credentials and return a new session.

    Any previous session opened from the same address is closed.
    """
    try:
        session = await provider.login(data.user.login, data.user.password, _origin(data, request))
    except UserProviderError as e:
        raise_http_error(e, "failed to login user")

    return SessionResponse.from_session(session)
