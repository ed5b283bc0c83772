"""Password hashing and random secret generation for credentials."""

import base64
import secrets

import bcrypt

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 50
EMAIL_MAX_LEN = 100
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# Entropy for opaque server-side tokens (verification and refresh).
TOKEN_BYTES = 32


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


# Computed once at import so the first unknown-email login is not measurably faster.
_DUMMY_HASH = hash_password("starauth-timing-equalization")


def verify_password_timing_safe(plain_password: str, hashed: str | None) -> bool:
    """
    Verify a password, running bcrypt even when there is no stored hash.

    Unknown accounts and wrong passwords then cost the same, so response time
    does not reveal whether an email is registered.
    """
    if hashed is None:
        verify_password(plain_password, _DUMMY_HASH)
        return False
    return verify_password(plain_password, hashed)


def generate_verification_token() -> str:
    """Return a URL-safe token (32 random bytes, base64url without padding)."""
    return secrets.token_urlsafe(TOKEN_BYTES)


def generate_refresh_token() -> str:
    """Return an opaque refresh token (32 random bytes, standard base64)."""
    return base64.b64encode(secrets.token_bytes(TOKEN_BYTES)).decode("ascii")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_username(username: str) -> str:
    return username.strip()
