"""Password hashing and verification (bcrypt)."""

import bcrypt

from app.core.config import settings
from app.core.errors import HashingError, ValidationError

# bcrypt only looks at the first 72 bytes of input; longer passwords are refused, not truncated.
BCRYPT_MAX_BYTES = 72

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = BCRYPT_MAX_BYTES


def check_password_bytes(plain_password: str) -> bytes:
    """Return the UTF-8 bytes of a password. Raises ValueError above BCRYPT_MAX_BYTES."""
    pw_bytes = plain_password.encode("utf-8")
    if len(pw_bytes) > BCRYPT_MAX_BYTES:
        raise ValueError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes (UTF-8)")
    return pw_bytes


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    try:
        pw_bytes = check_password_bytes(plain_password)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    try:
        salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
        return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")
    except (ValueError, OSError) as e:
        raise HashingError(detail=f"bcrypt hashing failed: {e}") from e


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash.

    Returns False on mismatch, including passwords too long to have been hashed.
    Raises HashingError if the stored hash is malformed.
    """
    try:
        pw_bytes = check_password_bytes(plain_password)
    except ValueError:
        return False
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError) as e:
        raise HashingError(detail=f"malformed password hash: {e}") from e
