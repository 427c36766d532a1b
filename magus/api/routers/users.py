import logging
from typing import Optional

from fastapi import APIRouter, Depends

from magus.api.deps import get_user_service, require_admin_session
from magus.controllers.users import (
    create_user_controller,
    delete_user_controller,
    list_users_controller,
    reset_password_controller,
)
from magus.models.user import UserCredentials, UserListResponse, UserMutationResponse
from magus.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_admin_session)])


@router.get("", response_model=UserListResponse, summary="List Users")
async def list_users(user_service: UserService = Depends(get_user_service)):
    """
    Lists every stored user without password hashes.
    """
    return await list_users_controller(user_service)


@router.post("", response_model=UserMutationResponse, response_model_exclude_none=True, summary="Create User")
async def create_user(
    credentials: UserCredentials,
    user_service: UserService = Depends(get_user_service),
):
    return await create_user_controller(credentials, user_service)


@router.put("", response_model=UserMutationResponse, response_model_exclude_none=True, summary="Reset Password")
async def reset_password(
    credentials: UserCredentials,
    user_service: UserService = Depends(get_user_service),
):
    return await reset_password_controller(credentials, user_service)


@router.delete("", response_model=UserMutationResponse, response_model_exclude_none=True, summary="Delete User")
async def delete_user(
    email: Optional[str] = None,
    user_service: UserService = Depends(get_user_service),
):
    return await delete_user_controller(email, user_service)
