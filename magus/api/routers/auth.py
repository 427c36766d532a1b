import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from magus.api.deps import get_auth_service, get_optional_session
from magus.core.config import get_settings, Settings
from magus.core.exceptions import CredentialStoreError
from magus.models.session import LoginResponse, SessionClaims, SessionResponse
from magus.models.user import UserCredentials
from magus.services.auth_service import AuthService

logger = logging.getLogger(__name__)
router = APIRouter()


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.session_max_age,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


@router.post("/login", response_model=LoginResponse, summary="Log In")
async def login(
    credentials: UserCredentials,
    response: Response,
    settings: Settings = Depends(get_settings),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Checks an email and password against the credential store and, on
    success, sets the session cookie.
    """
    try:
        token = await auth_service.login(credentials.email, credentials.password)
    except CredentialStoreError:
        logger.exception("Login error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "An error occurred during login"},
        )
    set_session_cookie(response, token, settings)
    return LoginResponse()


@router.get("/session", response_model=SessionResponse, summary="Get Current Session")
async def read_session(session: Optional[SessionClaims] = Depends(get_optional_session)):
    """
    Reports whether the request carries a valid session cookie.
    """
    if session is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"authenticated": False},
        )
    return SessionResponse(authenticated=True, user=session)


@router.post("/logout", response_model=LoginResponse, summary="Log Out")
async def logout(response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return LoginResponse()
