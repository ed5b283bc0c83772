"""Error kinds and the Failure result returned by service operations.

Expected outcomes (duplicate email, bad password, expired token) are returned
as a Failure value instead of being raised. Only the HTTP layer turns them into
responses; unexpected exceptions still propagate and become a generic 500.
"""

from dataclasses import dataclass
from enum import Enum

from fastapi import status


class ErrorKind(str, Enum):
    """Stable, machine-distinguishable failure reasons."""

    VALIDATION_ERROR = "validation_error"
    CONFLICT = "conflict"
    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_LOCKED = "account_locked"
    ACCOUNT_DISABLED = "account_disabled"
    ACCOUNT_PENDING = "account_pending"
    ACCOUNT_INACTIVE = "account_inactive"
    EMAIL_NOT_VERIFIED = "email_not_verified"
    INVALID_TOKEN = "invalid_token"
    INVALID_OR_EXPIRED_TOKEN = "invalid_or_expired_token"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    SERVER_ERROR = "server_error"


HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.ACCOUNT_LOCKED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.ACCOUNT_DISABLED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.ACCOUNT_PENDING: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.ACCOUNT_INACTIVE: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.EMAIL_NOT_VERIFIED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_TOKEN: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_OR_EXPIRED_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.SERVER_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# User-facing copy, shared so identical failures always read the same.
MSG_CONFLICT = "User with this email or username already exists."
MSG_INVALID_CREDENTIALS = "Invalid email or password."
MSG_ACCOUNT_LOCKED = "Your account has been locked. Please contact support."
MSG_ACCOUNT_DISABLED = "Your account is disabled. Please contact support."
MSG_ACCOUNT_INACTIVE = "Your account is inactive. Please contact support."
MSG_EMAIL_NOT_VERIFIED = "Please verify your email before logging in."
MSG_INVALID_VERIFICATION_TOKEN = "Invalid or expired verification token."
MSG_INVALID_REFRESH_TOKEN = "Invalid or expired refresh token."
MSG_SERVER_ERROR = "An unexpected error occurred."


@dataclass(frozen=True)
class Failure:
    """An expected failure: an error kind plus a human-readable message."""

    kind: ErrorKind
    message: str

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    def to_detail(self) -> dict[str, str]:
        return {"code": self.kind.value, "message": self.message}
