"""Pytest configuration: test settings must be in the environment before app modules import config."""

import os

os.environ.setdefault("APP_ENV", "dev")
os.environ["JWT_SECRET"] = "test-secret-key-for-unit-tests-only-0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("LOG_LEVEL", "WARNING")
