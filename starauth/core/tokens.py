"""Access-token codec: mint and validate signed JWTs carrying account claims."""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt

if TYPE_CHECKING:
    from starauth.core.config import Settings
    from starauth.models.account import Account

# Claims every access token must carry; decoding fails without them.
REQUIRED_CLAIMS = ["sub", "role", "exp", "iat", "iss", "aud"]


class TokenDecodeError(Exception):
    """Raised when an access token is malformed, forged, expired or mis-addressed."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class AccessTokenClaims:
    """Identity embedded in an access token at mint time."""

    sub: str
    username: str
    email: str
    role: str
    status: str
    is_verified: bool
    issued_at: datetime
    expires_at: datetime
    jti: str


def create_access_token(
    account: "Account",
    settings: "Settings",
    now: datetime | None = None,
) -> str:
    """Create a signed access token for the account, valid ACCESS_TOKEN_EXPIRE_MINUTES."""
    now = now or datetime.now(UTC)
    expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(account.id),
        "username": account.username,
        "email": account.email,
        "role": account.role,
        "status": account.status,
        "is_verified": bool(account.is_verified),
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
        "exp": expire,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str, settings: "Settings") -> AccessTokenClaims:
    """
    Decode and validate an access token (signature, issuer, audience, expiry).

    No clock-skew leeway is allowed. Raises TokenDecodeError on any failure.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            leeway=0,
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenDecodeError("Token has expired") from e
    except jwt.PyJWTError as e:
        raise TokenDecodeError(f"Invalid token: {e}") from e

    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub.strip():
        raise TokenDecodeError("Invalid token payload")
    return AccessTokenClaims(
        sub=sub,
        username=str(payload.get("username", "")),
        email=str(payload.get("email", "")),
        role=str(payload["role"]),
        status=str(payload.get("status", "")),
        is_verified=bool(payload.get("is_verified", False)),
        issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
        jti=str(payload.get("jti", "")),
    )
