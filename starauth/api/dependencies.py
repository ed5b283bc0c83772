"""FastAPI dependencies: service wiring and the authorization guard.

The guard trusts the claims embedded in the access token and does no database
lookup, so role or status changes take effect only when the token is reissued
(refresh or re-login).

Usage from any router:

    @router.get("/reports")
    def reports(user: Annotated[CurrentUser, Depends(require_admin)]): ...

    editors = AuthorizationGuard(roles={Role.ADMIN, Role.EDITOR})
"""

from collections.abc import Iterable
from typing import Annotated, NoReturn

from fastapi import BackgroundTasks, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from starauth.core.config import Settings, get_settings
from starauth.core.database import get_db
from starauth.core.errors import ErrorKind, Failure
from starauth.core.tokens import TokenDecodeError, decode_access_token
from starauth.models.account import AccountStatus, Role
from starauth.repositories.accounts import SqlAlchemyAccountRepository
from starauth.repositories.base import AccountRepository
from starauth.schemas.auth import CurrentUser
from starauth.services.email import EmailService, VerificationMailer
from starauth.services.session import SessionService

security = HTTPBearer(auto_error=False)


def raise_for_failure(failure: Failure) -> NoReturn:
    """Turn a service Failure into the matching HTTP error."""
    headers = None
    if failure.kind == ErrorKind.UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    raise HTTPException(
        status_code=failure.status_code,
        detail=failure.to_detail(),
        headers=headers,
    )


def get_account_repository(db: Annotated[Session, Depends(get_db)]) -> AccountRepository:
    """Repository bound to this request's DB session."""
    return SqlAlchemyAccountRepository(db)


def get_mailer(settings: Annotated[Settings, Depends(get_settings)]) -> VerificationMailer:
    return EmailService(settings)


def get_session_service(
    background_tasks: BackgroundTasks,
    repository: Annotated[AccountRepository, Depends(get_account_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
    mailer: Annotated[VerificationMailer, Depends(get_mailer)],
) -> SessionService:
    """Per-request SessionService; emails are sent after the response is returned."""
    return SessionService(
        repository,
        settings,
        mailer=mailer,
        dispatch=background_tasks.add_task,
    )


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"code": ErrorKind.UNAUTHORIZED.value, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_access_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> str | None:
    """Access token from the Bearer header, falling back to the auth cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    if settings.AUTH_COOKIE_ENABLED:
        return request.cookies.get(settings.AUTH_COOKIE_NAME) or None
    return None


def get_current_user(
    token: Annotated[str | None, Depends(get_access_token)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CurrentUser:
    """Dependency: require a valid access token and return its identity. Raises 401 otherwise."""
    if not token:
        raise _unauthorized("Not authenticated")
    try:
        claims = decode_access_token(token, settings)
    except TokenDecodeError:
        raise _unauthorized("Invalid or expired token")
    return CurrentUser(
        id=claims.sub,
        username=claims.username,
        email=claims.email,
        role=claims.role,
        status=claims.status,
        is_verified=claims.is_verified,
    )


def _values(items: Iterable[str] | None) -> frozenset[str] | None:
    if items is None:
        return None
    return frozenset(item.value if isinstance(item, (Role, AccountStatus)) else item for item in items)


class AuthorizationGuard:
    """
    Dependency that requires an authenticated identity matching allow-sets.

    roles: allowed roles (None allows any). statuses: allowed account statuses
    (None allows any). require_verified: reject identities whose token says the
    email is unverified. Failing any requirement raises 403.
    """

    def __init__(
        self,
        roles: Iterable[Role | str] | None = None,
        statuses: Iterable[AccountStatus | str] | None = None,
        require_verified: bool = False,
    ) -> None:
        self.roles = _values(roles)
        self.statuses = _values(statuses)
        self.require_verified = require_verified

    def __call__(
        self,
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if self.roles is not None and current_user.role not in self.roles:
            raise_for_failure(Failure(ErrorKind.FORBIDDEN, "Insufficient role for this operation"))
        if self.statuses is not None and current_user.status not in self.statuses:
            raise_for_failure(Failure(ErrorKind.FORBIDDEN, "Account status does not allow this operation"))
        if self.require_verified and not current_user.is_verified:
            raise_for_failure(Failure(ErrorKind.FORBIDDEN, "Email verification required"))
        return current_user


require_admin = AuthorizationGuard(roles={Role.ADMIN})
