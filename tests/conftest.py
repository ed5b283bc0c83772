"""Test environment: settings and hashing cost are fixed before any starauth import."""

import os

# Settings are read at import time; keep tests off any local .env or database file.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-0123456789")
os.environ.setdefault("EMAIL_ENABLED", "false")
os.environ.setdefault("AUTH_COOKIE_SECURE", "false")

import starauth.core.security as security  # noqa: E402

# Minimum bcrypt cost keeps the suite fast; production uses BCRYPT_ROUNDS=12.
security.BCRYPT_ROUNDS = 4
