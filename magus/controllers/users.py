import logging
from typing import Optional

from fastapi.responses import JSONResponse

from magus.core.exceptions import CredentialStoreError
from magus.models.user import UserCredentials, UserListResponse, UserMutationResponse
from magus.services.user_service import UserService

logger = logging.getLogger(__name__)


async def list_users_controller(user_service: UserService):
    try:
        users = await user_service.list_users()
    except CredentialStoreError as e:
        # The admin screen renders whatever list it gets, so failures still
        # carry an (empty) users array next to the error.
        return JSONResponse(status_code=e.status_code, content={"error": e.message, "users": []})
    return UserListResponse(users=users)


async def create_user_controller(
    credentials: UserCredentials,
    user_service: UserService,
) -> UserMutationResponse:
    logger.info(
        "Create user request for %s (password supplied: %s)",
        credentials.email,
        bool(credentials.password),
    )
    user = await user_service.create_user(credentials.email, credentials.password)
    return UserMutationResponse(user=user)


async def reset_password_controller(
    credentials: UserCredentials,
    user_service: UserService,
) -> UserMutationResponse:
    await user_service.reset_password(credentials.email, credentials.password)
    return UserMutationResponse(message="Password reset successfully")


async def delete_user_controller(
    email: Optional[str],
    user_service: UserService,
) -> UserMutationResponse:
    logger.info("Delete user request for %s", email)
    await user_service.delete_user(email)
    return UserMutationResponse(message="User deleted successfully")
