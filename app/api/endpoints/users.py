"""Allow-list management endpoint."""

from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from fastapi import APIRouter, status
from pydantic import BaseModel

from app.core.exceptions import AppException, InternalServerErrorException
from app.dependencies import AccessControl
from app.schemas.users import (
    AddUserAction,
    AllowedUserResponse,
    DeleteUserAction,
    GetAllUsersAction,
    GetUserByEmailAction,
    ManageUsersRequest,
    UpdateUserAction,
    UserListResponse,
    UserLookupResponse,
    UserMutationResponse,
)
from app.services.access_control_service import AccessControlService

logger = structlog.get_logger()

router = APIRouter()


def _to_user(row: dict | None) -> AllowedUserResponse | None:
    return AllowedUserResponse.model_validate(row) if row else None


async def get_user_by_email(
    service: AccessControlService, action: GetUserByEmailAction
) -> UserLookupResponse:
    return UserLookupResponse(user=_to_user(await service.get_user_by_email(action.email)))


async def get_all_users(
    service: AccessControlService, action: GetAllUsersAction
) -> UserListResponse:
    users = await service.list_users()
    return UserListResponse(users=[AllowedUserResponse.model_validate(u) for u in users])


async def add_user(service: AccessControlService, action: AddUserAction) -> UserMutationResponse:
    # Duplicate email and a silent insert failure look the same here
    user = await service.add_user(action.email, action.is_admin, action.name, action.notes)
    if user is None:
        return UserMutationResponse(success=False, error="User already exists")
    logger.info("allowed_user_added", user_id=user["id"], is_admin=user["is_admin"])
    return UserMutationResponse(success=True, user=_to_user(user))


async def update_user(
    service: AccessControlService, action: UpdateUserAction
) -> UserMutationResponse:
    user = await service.update_user(action.user_id, action.email, action.is_admin)
    if user is None:
        return UserMutationResponse(success=False, error="User not found")
    return UserMutationResponse(success=True, user=_to_user(user))


async def delete_user(
    service: AccessControlService, action: DeleteUserAction
) -> UserMutationResponse:
    user = await service.delete_user(action.user_id)
    if user is None:
        return UserMutationResponse(success=False, error="User not found")
    logger.info("allowed_user_deleted", user_id=action.user_id)
    return UserMutationResponse(success=True, user=_to_user(user))


ActionHandler = Callable[[AccessControlService, Any], Awaitable[BaseModel]]

ACTION_HANDLERS: dict[type[BaseModel], ActionHandler] = {
    GetUserByEmailAction: get_user_by_email,
    GetAllUsersAction: get_all_users,
    AddUserAction: add_user,
    UpdateUserAction: update_user,
    DeleteUserAction: delete_user,
}


@router.post(
    "/manage-users",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Manage the allow-list",
)
async def manage_users(request: ManageUsersRequest, service: AccessControl) -> BaseModel:
    """
    Run one allow-list action.

    The body is tagged by ``action``:

    - **get-user-by-email** (`email`) → `{user}`
    - **get-all-users** → `{users}`
    - **add-user** (`email`, `isAdmin`, optional `name`, `notes`) → `{success, user}`
    - **update-user** (`userId`, `email`, `isAdmin`) → `{success, user}`
    - **delete-user** (`userId`) → `{success, user}`

    Missing users are reported with ``success: false``, not an HTTP error.
    """
    action = request.root
    handler = ACTION_HANDLERS[type(action)]

    try:
        return await handler(service, action)
    except AppException:
        raise
    except Exception as e:
        logger.error("manage_users_failed", action=action.action, error=str(e))
        raise InternalServerErrorException() from e
