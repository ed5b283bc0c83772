"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from starauth.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


class RegisterRequest(BaseModel):
    """New account details."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class RefreshRequest(BaseModel):
    """Refresh token to exchange for a new token pair."""

    refresh_token: str = Field(..., min_length=1, max_length=256, description="Refresh token")


class ResendVerificationRequest(BaseModel):
    email: EmailStr = Field(..., description="Email address of the unverified account")


class PublicUser(BaseModel):
    """Outward projection of an account (no hashes or tokens)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    role: str
    status: str
    is_verified: bool
    created_at: datetime | None = None


class RegisterResponse(BaseModel):
    """Registration result: access token plus the new account."""

    message: str = "Registration successful. Please check your email for verification."
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds")
    user: PublicUser


class TokenResponse(BaseModel):
    """Access and refresh tokens returned by login and refresh."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="Opaque refresh token (single use)")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class MessageResponse(BaseModel):
    message: str


class CurrentUser(BaseModel):
    """Authenticated identity taken from access-token claims."""

    id: str
    username: str
    email: str
    role: str
    status: str
    is_verified: bool
