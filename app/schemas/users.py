"""Allow-list user schemas for request/response validation."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, RootModel


class AllowedUserResponse(BaseModel):
    """Schema for an allow-list entry."""

    id: int
    email: str
    name: str | None = None
    notes: str | None = None
    is_admin: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class CheckAccessRequest(BaseModel):
    """Login gate request."""

    email: str = Field(..., min_length=1)


class CheckAccessResponse(BaseModel):
    """Login gate response."""

    model_config = ConfigDict(populate_by_name=True)

    is_allowed: bool = Field(..., alias="isAllowed")


# ============================================================================
# manage-users actions
# ============================================================================


class GetUserByEmailAction(BaseModel):
    action: Literal["get-user-by-email"]
    email: str = Field(..., min_length=1)


class GetAllUsersAction(BaseModel):
    action: Literal["get-all-users"]


class AddUserAction(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: Literal["add-user"]
    email: str = Field(..., min_length=1)
    is_admin: bool = Field(default=False, alias="isAdmin")
    name: str | None = None
    notes: str | None = None


class UpdateUserAction(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: Literal["update-user"]
    user_id: int = Field(..., alias="userId")
    email: str = Field(..., min_length=1)
    is_admin: bool = Field(default=False, alias="isAdmin")


class DeleteUserAction(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: Literal["delete-user"]
    user_id: int = Field(..., alias="userId")


UserAction = Annotated[
    GetUserByEmailAction | GetAllUsersAction | AddUserAction | UpdateUserAction | DeleteUserAction,
    Discriminator(
        "action",
        custom_error_type="invalid_action",
        custom_error_message="Unknown or missing action",
    ),
]


class ManageUsersRequest(RootModel[UserAction]):
    """Request body for manage-users, tagged by ``action``."""


class UserLookupResponse(BaseModel):
    user: AllowedUserResponse | None


class UserListResponse(BaseModel):
    users: list[AllowedUserResponse]


class UserMutationResponse(BaseModel):
    """Result of add, update or delete; ``user`` is null when nothing changed."""

    success: bool
    user: AllowedUserResponse | None = None
    error: str | None = None
