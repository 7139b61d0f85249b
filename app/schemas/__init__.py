"""Pydantic request/response schemas."""

from app.schemas.account import (
    AccountListResponse,
    AccountOut,
    AccountResponse,
    AccountUpdateRequest,
    ErrorResponse,
    MessageResponse,
)
from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RefreshClaims,
    RefreshRequest,
    Role,
    SessionClaims,
    SignupRequest,
    TokenRefreshResponse,
)
from app.schemas.health import HealthResponse

__all__ = [
    "AccountListResponse",
    "AccountOut",
    "AccountResponse",
    "AccountUpdateRequest",
    "AuthResponse",
    "CurrentUser",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "RefreshClaims",
    "RefreshRequest",
    "Role",
    "SessionClaims",
    "SignupRequest",
    "TokenRefreshResponse",
]
