"""Request/response schemas for auth endpoints, token claims, and request identity."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, check_password_bytes
from app.schemas.account import AccountOut

Role = Literal["user", "admin"]

ROLE_USER: Role = "user"
ROLE_ADMIN: Role = "admin"

SESSION_TOKEN_TYPE = "session"
REFRESH_TOKEN_TYPE = "refresh"


class SignupRequest(BaseModel):
    """Registration payload. New accounts always get the 'user' role."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        check_password_bytes(v)
        return v


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=255, description="Email address")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, description="Refresh token from login or signup")


class AuthResponse(BaseModel):
    """Tokens and account returned after signup or login."""

    token: str = Field(..., description="Session token (JWT)")
    refresh_token: str = Field(..., description="Refresh token (JWT)")
    user: AccountOut
    message: str


class TokenRefreshResponse(BaseModel):
    token: str = Field(..., description="New session token (JWT)")
    token_type: str = Field(default="bearer", description="Token type")
    message: str = "Token refreshed successfully"


class CurrentUser(BaseModel):
    """Authenticated identity attached to the request by the access control filter."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    username: str
    role: Role


class SessionClaims(BaseModel):
    """Decoded, validated payload of a session token."""

    model_config = ConfigDict(frozen=True)

    sub: int
    email: str
    username: str
    role: Role
    issued_at: datetime
    expires_at: datetime

    def identity(self) -> CurrentUser:
        return CurrentUser(id=self.sub, email=self.email, username=self.username, role=self.role)


class RefreshClaims(BaseModel):
    """Decoded, validated payload of a refresh token."""

    model_config = ConfigDict(frozen=True)

    sub: int
    issued_at: datetime
    expires_at: datetime
