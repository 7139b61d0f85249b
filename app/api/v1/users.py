"""Profile and user management routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.auth import get_account_service, get_current_user, require_admin
from app.schemas.account import (
    AccountListResponse,
    AccountResponse,
    AccountUpdateRequest,
    MessageResponse,
)
from app.schemas.auth import CurrentUser
from app.services.accounts import AccountService

router = APIRouter()


@router.get("/profile", response_model=AccountResponse)
def get_profile(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponse:
    """Return the caller's own account."""
    return AccountResponse(
        message="Profile retrieved successfully",
        data=service.get_profile(user),
    )


@router.get("/users", response_model=AccountListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountListResponse:
    """List all users, newest first (admin only)."""
    return AccountListResponse(
        message="Users retrieved successfully",
        data=service.list_accounts(),
    )


@router.get("/users/{user_id}", response_model=AccountResponse)
def get_user(
    user_id: int,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponse:
    return AccountResponse(
        message="User retrieved successfully",
        data=service.get_account(user_id),
    )


@router.put("/users/{user_id}", response_model=MessageResponse)
def update_user(
    user_id: int,
    body: AccountUpdateRequest,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponse:
    """
    Update a user. Callers may update their own account; admins may update any
    account and are the only ones allowed to change role.
    """
    service.update_account(user, user_id, body)
    return MessageResponse(message="User updated successfully")


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponse:
    """Delete a user (admin only). Nobody can delete their own account."""
    service.delete_account(user, user_id)
    return MessageResponse(message="User deleted successfully")
