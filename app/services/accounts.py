"""Account operations behind the HTTP endpoints: signup, login, refresh, profile, management."""

from __future__ import annotations

import logging

from app.core.access import invalid_token, require_role
from app.core.errors import (
    AuthenticationError,
    AuthorizationError,
    AuthorizationReason,
    ConflictError,
    NotFoundError,
    TokenError,
    ValidationError,
)
from app.core.security import hash_password, verify_password
from app.core.tokens import TokenService
from app.models.account import Account
from app.schemas.account import AccountOut, AccountUpdateRequest
from app.schemas.auth import (
    ROLE_ADMIN,
    ROLE_USER,
    AuthResponse,
    CurrentUser,
    LoginRequest,
    SignupRequest,
    TokenRefreshResponse,
)
from app.services.account_directory import AccountDirectory, AccountPatch, NewAccount

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class AccountService:
    """Orchestrates the account directory, password hashing and token issuance."""

    def __init__(self, directory: AccountDirectory, tokens: TokenService) -> None:
        self._directory = directory
        self._tokens = tokens

    def _issue(self, account: Account, message: str) -> AuthResponse:
        token = self._tokens.issue_session(
            account_id=account.id,
            email=account.email,
            username=account.username,
            role=account.role,
        )
        refresh_token = self._tokens.issue_refresh(account.id)
        return AuthResponse(
            token=token,
            refresh_token=refresh_token,
            user=AccountOut.model_validate(account),
            message=message,
        )

    def signup(self, body: SignupRequest) -> AuthResponse:
        """Register a new 'user' account and return session + refresh tokens."""
        username = body.username.strip()
        email = body.email.strip()
        if not username:
            raise ValidationError("Email, username, and password are required")

        if self._directory.find_by_email_or_username(email, username) is not None:
            raise ConflictError(detail=f"signup collision for username={username!r}")

        account = self._directory.insert(
            NewAccount(
                username=username,
                email=email,
                password_hash=hash_password(body.password),
                first_name=_clean(body.first_name),
                last_name=_clean(body.last_name),
                role=ROLE_USER,
            )
        )
        logger.info("Account created", extra={"user_id": account.id})
        return self._issue(account, "User created successfully")

    def login(self, body: LoginRequest) -> AuthResponse:
        """Verify email + password; unknown email and wrong password fail identically."""
        account = self._directory.find_by_email(body.email.strip())
        if account is None:
            logger.info("Login failed: unknown email")
            raise AuthenticationError()
        if not verify_password(body.password, account.password_hash):
            logger.info("Login failed: wrong password", extra={"user_id": account.id})
            raise AuthenticationError()
        logger.info("Login succeeded", extra={"user_id": account.id})
        return self._issue(account, "Login successful")

    def refresh(self, refresh_token: str) -> TokenRefreshResponse:
        """Exchange a valid refresh token for a new session token built from current account data."""
        try:
            claims = self._tokens.validate_refresh(refresh_token)
        except TokenError as e:
            raise invalid_token(e, "Refresh rejected: invalid token") from e
        account = self._directory.find_by_id(claims.sub)
        if account is None:
            # Account deleted after the refresh token was issued.
            raise AuthorizationError(
                AuthorizationReason.INVALID_TOKEN, detail=f"refresh for unknown user {claims.sub}"
            )
        token = self._tokens.issue_session(
            account_id=account.id,
            email=account.email,
            username=account.username,
            role=account.role,
        )
        return TokenRefreshResponse(token=token)

    def get_profile(self, user: CurrentUser) -> AccountOut:
        account = self._directory.find_by_id(user.id)
        if account is None:
            raise NotFoundError("User profile not found")
        return AccountOut.model_validate(account)

    def get_account(self, account_id: int) -> AccountOut:
        account = self._directory.find_by_id(account_id)
        if account is None:
            raise NotFoundError()
        return AccountOut.model_validate(account)

    def list_accounts(self) -> list[AccountOut]:
        return [AccountOut.model_validate(a) for a in self._directory.list_all()]

    def update_account(
        self, user: CurrentUser, account_id: int, body: AccountUpdateRequest
    ) -> None:
        """
        Apply a partial update.

        Callers may update their own account; admins may update any account.
        Only admins may change role. An empty update is rejected before any
        storage call.
        """
        if user.id != account_id and user.role != ROLE_ADMIN:
            logger.info(
                "Update rejected: not owner",
                extra={"user_id": user.id, "target_id": account_id},
            )
            raise AuthorizationError(
                AuthorizationReason.INSUFFICIENT_ROLE,
                "You can only update your own profile",
            )

        patch = AccountPatch(
            username=_clean(body.username),
            first_name=_clean(body.first_name),
            last_name=_clean(body.last_name),
            email=_clean(body.email),
            role=body.role,
        )
        if patch.is_empty():
            raise ValidationError("At least one field must be provided for update")
        if patch.role is not None:
            require_role(user, ROLE_ADMIN)

        rows = self._directory.update(account_id, patch)
        if rows == 0:
            raise NotFoundError()
        logger.info(
            "Account updated",
            extra={"user_id": user.id, "target_id": account_id, "fields": sorted(patch.values())},
        )

    def delete_account(self, user: CurrentUser, account_id: int) -> None:
        """Delete another account (admin only). Self-deletion is refused for every role."""
        if user.id == account_id:
            raise ValidationError("You cannot delete your own account")
        require_role(user, ROLE_ADMIN)

        rows = self._directory.delete(account_id)
        if rows == 0:
            raise NotFoundError()
        logger.info("Account deleted", extra={"user_id": user.id, "target_id": account_id})
