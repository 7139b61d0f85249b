"""Request/response schemas for account profile and user management endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class AccountOut(BaseModel):
    """Account as returned to clients (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: Literal["user", "admin"]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AccountUpdateRequest(BaseModel):
    """
    Partial update. Omitted or empty-string fields are left unchanged.

    Changing role requires an admin caller.
    """

    username: str | None = Field(default=None, max_length=255)
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    email: EmailStr | None = None
    role: Literal["user", "admin"] | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class AccountResponse(BaseModel):
    message: str
    data: AccountOut


class AccountListResponse(BaseModel):
    message: str
    data: list[AccountOut]


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Error body for every non-2xx response raised by the service."""

    error: str = Field(..., description="Short error label")
    message: str = Field(..., description="Human-readable, non-sensitive message")
