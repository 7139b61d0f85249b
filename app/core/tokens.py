"""Issue and validate signed session and refresh tokens (JWT, symmetric MAC)."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import jwt
from pydantic import ValidationError as SchemaValidationError

from app.core.config import get_settings
from app.core.errors import TokenError, TokenErrorKind
from app.schemas.auth import (
    REFRESH_TOKEN_TYPE,
    SESSION_TOKEN_TYPE,
    RefreshClaims,
    SessionClaims,
)

SESSION_TTL = timedelta(hours=24)
REFRESH_TTL = timedelta(hours=168)

_REQUIRED_CLAIMS = ["sub", "exp", "iat"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """
    Stateless token issuer/validator bound to one signing secret.

    There is no revocation: a token stays valid until its exp.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        session_ttl: timedelta = SESSION_TTL,
        refresh_ttl: timedelta = REFRESH_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("TokenService requires a non-empty secret")
        self._secret = secret
        self._algorithm = algorithm
        self._session_ttl = session_ttl
        self._refresh_ttl = refresh_ttl
        self._clock = clock

    def _encode(self, payload: dict[str, Any]) -> str:
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def issue_session(self, account_id: int, email: str, username: str, role: str) -> str:
        """Create a session token valid for session_ttl (24h by default)."""
        now = self._clock()
        return self._encode(
            {
                "sub": str(account_id),
                "email": email,
                "username": username,
                "role": role,
                "type": SESSION_TOKEN_TYPE,
                "iat": now,
                "exp": now + self._session_ttl,
            }
        )

    def issue_refresh(self, account_id: int) -> str:
        """Create a refresh token valid for refresh_ttl (7 days by default)."""
        now = self._clock()
        return self._encode(
            {
                "sub": str(account_id),
                "type": REFRESH_TOKEN_TYPE,
                "iat": now,
                "exp": now + self._refresh_ttl,
            }
        )

    def _decode(self, token: str) -> dict[str, Any]:
        """
        Verify algorithm, signature and expiry; return the raw payload.

        The header algorithm is checked before anything else so that a token
        declaring 'none' or an asymmetric algorithm is never verified.
        Expiry is judged against this service's clock, not the wall clock:
        a token is expired once exp <= now.
        """
        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as e:
            raise TokenError(TokenErrorKind.MALFORMED, detail=str(e)) from e
        alg = header.get("alg")
        if alg != self._algorithm:
            raise TokenError(
                TokenErrorKind.WRONG_ALGORITHM,
                detail=f"expected {self._algorithm}, got {alg!r}",
            )
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidSignatureError as e:
            raise TokenError(TokenErrorKind.BAD_SIGNATURE, detail=str(e)) from e
        except jwt.InvalidAlgorithmError as e:
            raise TokenError(TokenErrorKind.WRONG_ALGORITHM, detail=str(e)) from e
        except jwt.PyJWTError as e:
            raise TokenError(TokenErrorKind.MALFORMED, detail=str(e)) from e

        exp = payload["exp"]
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise TokenError(TokenErrorKind.MALFORMED, detail=f"exp must be a number, got {exp!r}")
        now = self._clock().timestamp()
        if exp <= now:
            raise TokenError(TokenErrorKind.EXPIRED, detail=f"token expired at {int(exp)}")
        return payload

    @staticmethod
    def _check_type(payload: dict[str, Any], expected: str) -> None:
        if payload.get("type") != expected:
            raise TokenError(
                TokenErrorKind.MALFORMED,
                detail=f"expected token type {expected!r}, got {payload.get('type')!r}",
            )

    def validate(self, token: str) -> SessionClaims:
        """Validate a session token and return its claims. Raises TokenError."""
        payload = self._decode(token)
        self._check_type(payload, SESSION_TOKEN_TYPE)
        try:
            return SessionClaims(
                sub=payload["sub"],
                email=payload.get("email"),
                username=payload.get("username"),
                role=payload.get("role"),
                issued_at=datetime.fromtimestamp(payload["iat"], UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], UTC),
            )
        except (SchemaValidationError, TypeError, ValueError) as e:
            raise TokenError(TokenErrorKind.MALFORMED, detail=f"invalid session claims: {e}") from e

    def validate_refresh(self, token: str) -> RefreshClaims:
        """Validate a refresh token and return its claims. Raises TokenError."""
        payload = self._decode(token)
        self._check_type(payload, REFRESH_TOKEN_TYPE)
        try:
            return RefreshClaims(
                sub=payload["sub"],
                issued_at=datetime.fromtimestamp(payload["iat"], UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], UTC),
            )
        except (SchemaValidationError, TypeError, ValueError) as e:
            raise TokenError(TokenErrorKind.MALFORMED, detail=f"invalid refresh claims: {e}") from e


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide TokenService built once from settings (safe to use as a dependency)."""
    settings = get_settings()
    return TokenService(
        secret=settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        session_ttl=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
        refresh_ttl=timedelta(hours=settings.JWT_REFRESH_EXPIRE_HOURS),
    )
