from typing import Optional

from fastapi import Depends, Request

from magus.core.config import get_settings, Settings
from magus.core.exceptions import InvalidSessionError
from magus.models.session import SessionClaims
from magus.services.auth_service import AuthService
from magus.services.chat_service import build_chat_service
from magus.services.database_service import DynamoDBUserStore
from magus.services.user_service import UserService


# Service Dependencies
def get_user_store(settings: Settings = Depends(get_settings)) -> DynamoDBUserStore:
    return DynamoDBUserStore(settings)


def get_auth_service(
    settings: Settings = Depends(get_settings),
    user_store: DynamoDBUserStore = Depends(get_user_store),
) -> AuthService:
    return AuthService(settings, user_store)


def get_user_service(
    settings: Settings = Depends(get_settings),
    user_store: DynamoDBUserStore = Depends(get_user_store),
) -> UserService:
    return UserService(settings, user_store)


def get_chat_service(settings: Settings = Depends(get_settings)):
    # The Azure client is cheap to build; instantiate per-request like the store
    return build_chat_service(settings)


# Session Dependencies
def get_session_token(request: Request, settings: Settings = Depends(get_settings)) -> Optional[str]:
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_optional_session(
    token: Optional[str] = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[SessionClaims]:
    return auth_service.get_session(token)


def get_current_session(
    session: Optional[SessionClaims] = Depends(get_optional_session),
) -> SessionClaims:
    """
    Requires a valid session cookie and returns its claims.
    """
    if session is None:
        raise InvalidSessionError()
    return session


def require_admin_session(
    settings: Settings = Depends(get_settings),
    session: Optional[SessionClaims] = Depends(get_optional_session),
) -> Optional[SessionClaims]:
    """
    Guards the user administration API when USERS_REQUIRE_SESSION is set.
    """
    if settings.USERS_REQUIRE_SESSION and session is None:
        raise InvalidSessionError()
    return session
