"""Error taxonomy for account and auth operations.

Every failure carries an HTTP status, a short public label and a generic public
message. ``detail`` is for operational logs only and is never sent to clients.
"""

from enum import Enum


class AccountServiceError(Exception):
    """Base class for failures surfaced to the HTTP layer."""

    status_code: int = 500
    error: str = "Internal error"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None, *, detail: str | None = None) -> None:
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(AccountServiceError):
    """Missing or malformed request fields, or a forbidden operation on valid input."""

    status_code = 400
    error = "Validation error"
    default_message = "Invalid request"


class ConflictError(AccountServiceError):
    """Duplicate email or username."""

    status_code = 409
    error = "User exists"
    default_message = "User with this email or username already exists"


class AuthenticationError(AccountServiceError):
    """Bad credentials at login."""

    status_code = 401
    error = "Authentication failed"
    default_message = "Invalid email or password"


class AuthorizationReason(str, Enum):
    """Why a request was refused by the access control filter."""

    MISSING_CREDENTIAL = "missing_credential"
    MALFORMED_CREDENTIAL = "malformed_credential"
    INVALID_TOKEN = "invalid_token"
    INSUFFICIENT_ROLE = "insufficient_role"


_AUTHORIZATION_MESSAGES = {
    AuthorizationReason.MISSING_CREDENTIAL: "Authorization header is required",
    AuthorizationReason.MALFORMED_CREDENTIAL: "Authorization header must be in format 'Bearer <token>'",
    AuthorizationReason.INVALID_TOKEN: "Invalid or expired token",
    AuthorizationReason.INSUFFICIENT_ROLE: "Admin access required",
}


class AuthorizationError(AccountServiceError):
    """Missing/invalid/expired token (401) or insufficient role (403)."""

    error = "Unauthorized"

    def __init__(
        self,
        reason: AuthorizationReason,
        message: str | None = None,
        *,
        detail: str | None = None,
    ) -> None:
        self.reason = reason
        if reason is AuthorizationReason.INSUFFICIENT_ROLE:
            self.status_code = 403
            self.error = "Forbidden"
        else:
            self.status_code = 401
        super().__init__(message or _AUTHORIZATION_MESSAGES[reason], detail=detail)


class NotFoundError(AccountServiceError):
    """Unknown account id."""

    status_code = 404
    error = "Not found"
    default_message = "User not found"


class StorageError(AccountServiceError):
    """The account directory failed."""

    status_code = 500
    error = "Database error"
    default_message = "A database error occurred"


class HashingError(AccountServiceError):
    """Password hashing failed, or a stored digest is malformed."""

    status_code = 500
    error = "Internal error"
    default_message = "Failed to process password"


class TokenErrorKind(str, Enum):
    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"
    WRONG_ALGORITHM = "wrong_algorithm"


class TokenError(AccountServiceError):
    """Token failed validation. Surfaced to clients as an AuthorizationError."""

    status_code = 401
    error = "Unauthorized"
    default_message = "Invalid or expired token"

    def __init__(self, kind: TokenErrorKind, *, detail: str | None = None) -> None:
        self.kind = kind
        super().__init__(detail=detail)
