"""Signup, login, refresh and logout routes, plus the auth dependencies (get_current_user, require_admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request, status
from sqlalchemy.orm import Session

from app.core.access import authenticate, require_role
from app.core.database import get_db
from app.core.tokens import TokenService, get_token_service
from app.schemas.account import MessageResponse
from app.schemas.auth import (
    ROLE_ADMIN,
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RefreshRequest,
    SignupRequest,
    TokenRefreshResponse,
)
from app.services.account_directory import AccountDirectory
from app.services.accounts import AccountService

router = APIRouter()


def get_account_service(
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AccountService:
    """Dependency: AccountService bound to the request's DB session."""
    return AccountService(AccountDirectory(db), tokens)


def get_current_user(
    request: Request,
    tokens: Annotated[TokenService, Depends(get_token_service)],
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentUser:
    """
    Dependency: require a valid Bearer session token and return the caller's identity.

    The identity comes from the token claims alone (no DB lookup) and is also
    stored on request.state.user. Raises AuthorizationError (401) on failure.
    """
    user = authenticate(authorization, tokens)
    request.state.user = user
    return user


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    return require_role(current_user, ROLE_ADMIN)


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AuthResponse:
    """
    Register a new account and return a session token and a refresh token.
    Include the token in the Authorization header as: Bearer <token>
    """
    return service.signup(body)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AuthResponse:
    """Authenticate with email and password; returns a session token and a refresh token."""
    return service.login(body)


@router.post("/refresh", response_model=TokenRefreshResponse)
def refresh(
    body: RefreshRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> TokenRefreshResponse:
    """Exchange a refresh token for a new session token."""
    return service.refresh(body.refresh_token)


@router.post("/logout", response_model=MessageResponse)
def logout(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Tokens are stateless; the client discards them. Requires a valid session token."""
    return MessageResponse(message="Logout successful")
