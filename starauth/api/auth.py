"""Auth endpoints: register, verify-email, login, refresh, logout, me."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from starauth.api.dependencies import (
    get_current_user,
    get_session_service,
    raise_for_failure,
)
from starauth.core.config import Settings, get_settings
from starauth.core.errors import ErrorKind, Failure
from starauth.core.security import EMAIL_MAX_LEN
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
from starauth.services.session import SessionService

logger = logging.getLogger(__name__)
router = APIRouter()


def _validation_error(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"code": ErrorKind.VALIDATION_ERROR.value, "message": message},
    )


def _validate_email_length(email: str) -> None:
    if len(email) > EMAIL_MAX_LEN:
        raise _validation_error("Invalid email length.")


def _set_auth_cookie(response: Response, access_token: str, settings: Settings) -> None:
    """Mirror the access token into an HTTP-only cookie (same lifetime as the token)."""
    if not settings.AUTH_COOKIE_ENABLED:
        return
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        value=access_token,
        max_age=settings.access_token_expires_in,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="strict",
    )


def _clear_auth_cookie(response: Response, settings: Settings) -> None:
    if not settings.AUTH_COOKIE_ENABLED:
        return
    response.delete_cookie(
        settings.AUTH_COOKIE_NAME,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="strict",
    )


@router.post("/register", response_model=RegisterResponse)
def register(
    body: RegisterRequest,
    response: Response,
    service: Annotated[SessionService, Depends(get_session_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RegisterResponse:
    """
    Create a pending account and email a verification link.

    Returns an access token for the new account; the token is also set as the
    auth cookie when cookie transport is enabled.
    """
    _validate_email_length(body.email)
    result = service.register(body.username, body.email, body.password)
    if isinstance(result, Failure):
        raise_for_failure(result)
    _set_auth_cookie(response, result.access_token, settings)
    return RegisterResponse(
        access_token=result.access_token,
        expires_in=result.expires_in,
        user=PublicUser.model_validate(result.account),
    )


@router.get("/verify-email", response_model=MessageResponse)
def verify_email(
    service: Annotated[SessionService, Depends(get_session_service)],
    token: Annotated[str | None, Query(max_length=256)] = None,
) -> MessageResponse:
    """Redeem a verification token from the emailed link."""
    if not token or not token.strip():
        raise _validation_error("Verification token is required.")
    result = service.verify_email(token)
    if isinstance(result, Failure):
        raise_for_failure(result)
    return MessageResponse(message="Email verified successfully. You can now log in.")


@router.post("/resend-verification", response_model=MessageResponse)
def resend_verification(
    body: ResendVerificationRequest,
    service: Annotated[SessionService, Depends(get_session_service)],
) -> MessageResponse:
    """Send a fresh verification link. The response never reveals whether the email exists."""
    service.resend_verification(body.email)
    return MessageResponse(
        message="If an unverified account exists for this email, a new verification link has been sent."
    )


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    response: Response,
    service: Annotated[SessionService, Depends(get_session_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenResponse:
    """
    Authenticate with email and password; returns an access token and a refresh token.
    Include the access token in the Authorization header as: Bearer <access_token>
    """
    _validate_email_length(body.email)
    result = service.login(body.email, body.password)
    if isinstance(result, Failure):
        raise_for_failure(result)
    _set_auth_cookie(response, result.access_token, settings)
    return TokenResponse(
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        expires_in=result.expires_in,
    )


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    body: RefreshRequest,
    response: Response,
    service: Annotated[SessionService, Depends(get_session_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenResponse:
    """Rotate the refresh token: the submitted token stops working once this succeeds."""
    result = service.refresh(body.refresh_token)
    if isinstance(result, Failure):
        raise_for_failure(result)
    _set_auth_cookie(response, result.access_token, settings)
    return TokenResponse(
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        expires_in=result.expires_in,
    )


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[SessionService, Depends(get_session_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageResponse:
    """
    End the session of the token's subject. Idempotent.

    The presented access token itself stays valid until it expires.
    """
    service.logout(current_user.id)
    _clear_auth_cookie(response, settings)
    return MessageResponse(message="Logged out successfully.")


@router.get("/me", response_model=CurrentUser)
def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Identity carried by the presented access token."""
    return current_user
