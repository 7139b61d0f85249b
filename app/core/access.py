"""Access control: bearer extraction, token validation and role requirements.

These are plain functions; the FastAPI dependencies in app.api.v1.auth chain them
per request (credential -> token -> identity -> role).
"""

import logging

from app.core.errors import AuthorizationError, AuthorizationReason, TokenError
from app.core.tokens import TokenService
from app.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from an 'Authorization: Bearer <token>' header value."""
    if authorization is None or not authorization.strip():
        logger.info("Request rejected: missing credential")
        raise AuthorizationError(AuthorizationReason.MISSING_CREDENTIAL)
    parts = authorization.strip().split(" ")
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME or not parts[1]:
        logger.info("Request rejected: malformed credential")
        raise AuthorizationError(AuthorizationReason.MALFORMED_CREDENTIAL)
    return parts[1]


def invalid_token(
    exc: TokenError, message: str = "Request rejected: invalid token"
) -> AuthorizationError:
    """Log a token failure and return the INVALID_TOKEN error to raise in its place."""
    # Only the log gets the specific kind; the client sees a generic message.
    logger.warning(
        message,
        extra={"token_error": exc.kind.value, "token_error_detail": exc.detail},
    )
    return AuthorizationError(
        AuthorizationReason.INVALID_TOKEN, detail=f"token error: {exc.kind.value}"
    )


def authenticate(authorization: str | None, token_service: TokenService) -> CurrentUser:
    """Validate the presented session token and return the caller's identity."""
    token = extract_bearer_token(authorization)
    try:
        claims = token_service.validate(token)
    except TokenError as e:
        raise invalid_token(e) from e
    return claims.identity()


def require_role(user: CurrentUser, role: str) -> CurrentUser:
    """Return user unchanged if it holds role; otherwise raise INSUFFICIENT_ROLE (403)."""
    if user.role != role:
        logger.info(
            "Request rejected: insufficient role",
            extra={"user_id": user.id, "role": user.role, "required_role": role},
        )
        raise AuthorizationError(
            AuthorizationReason.INSUFFICIENT_ROLE,
            detail=f"user {user.id} has role {user.role!r}, {role!r} required",
        )
    return user
