"""Pydantic request/response schemas."""

from starauth.schemas.auth import (
    CurrentUser,
    LoginRequest,
    MessageResponse,
    PublicUser,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    ResendVerificationRequest,
    TokenResponse,
)
from starauth.schemas.health import HealthResponse

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "PublicUser",
    "RefreshRequest",
    "RegisterRequest",
    "RegisterResponse",
    "ResendVerificationRequest",
    "TokenResponse",
]
