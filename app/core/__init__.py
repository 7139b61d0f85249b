"""Core app configuration, error types, password hashing, tokens and access control."""

from app.core.config import get_settings, settings
from app.core.errors import AccountServiceError

__all__ = ["AccountServiceError", "get_settings", "settings"]
