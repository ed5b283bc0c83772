"""Session lifecycle: register, verify email, login, refresh, logout."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from starauth.core.errors import MSG_CONFLICT, MSG_INVALID_CREDENTIALS, ErrorKind, Failure
from starauth.core.security import (
    hash_password,
    normalize_email,
    normalize_username,
    verify_password_timing_safe,
)
from starauth.core.tokens import create_access_token
from starauth.models.account import Account, AccountStatus, Role, new_account_id, utcnow
from starauth.repositories.base import AccountRepository, DuplicateAccountError
from starauth.services.account_state import check_account_state
from starauth.services.email import VerificationMailer, redact_email
from starauth.services.refresh import RefreshTokenManager, TokenPair
from starauth.services.verification import VerificationTokenManager

if TYPE_CHECKING:
    from starauth.core.config import Settings

logger = logging.getLogger(__name__)

# Schedules fn(*args) to run later; FastAPI's BackgroundTasks.add_task fits.
Dispatcher = Callable[..., Any]


def run_inline(fn: Callable[..., Any], *args: Any) -> None:
    """Default dispatcher: run immediately in the caller's thread."""
    fn(*args)


@dataclass(frozen=True)
class Registration:
    """Result of a successful registration."""

    account: Account
    access_token: str
    expires_in: int


class SessionService:
    """
    Orchestrates Register -> Verify -> Login -> Refresh -> Logout over one repository.

    Every operation returns its result or a Failure; only unexpected errors raise.
    """

    def __init__(
        self,
        repository: AccountRepository,
        settings: "Settings",
        mailer: VerificationMailer | None = None,
        dispatch: Dispatcher = run_inline,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.repository = repository
        self.settings = settings
        self.mailer = mailer
        self.dispatch = dispatch
        self.clock = clock
        self.verification = VerificationTokenManager(repository, settings, clock)
        self.refresh_tokens = RefreshTokenManager(repository, settings, clock)

    def register(self, username: str, email: str, password: str) -> Registration | Failure:
        """Create a pending, unverified account and send its verification email."""
        if not username or not username.strip() or not email or not email.strip() or not password:
            logger.warning("Registration attempted with empty fields")
            return Failure(ErrorKind.VALIDATION_ERROR, "Username, email and password are required.")

        username = normalize_username(username)
        email = normalize_email(email)
        if self.repository.find_conflict(email, username) is not None:
            logger.warning("Registration attempt with existing credentials: %s", redact_email(email))
            return Failure(ErrorKind.CONFLICT, MSG_CONFLICT)

        now = self.clock()
        account = Account(
            id=new_account_id(),
            username=username,
            email=email,
            password_hash=hash_password(password),
            role=Role.USER.value,
            status=AccountStatus.PENDING.value,
            is_verified=False,
            is_locked=False,
            is_disabled=False,
            created_at=now,
        )
        verification_token = self.verification.issue(account, now)
        try:
            account = self.repository.add(account)
        except DuplicateAccountError:
            # Lost a race with a concurrent registration for the same email/username.
            logger.warning("Registration conflict on insert: %s", redact_email(email))
            return Failure(ErrorKind.CONFLICT, MSG_CONFLICT)

        self.dispatch(self._send_verification_email, email, verification_token)
        access_token = create_access_token(account, self.settings, now)
        logger.info("Account registered: %s", account.id)
        return Registration(
            account=account,
            access_token=access_token,
            expires_in=self.settings.access_token_expires_in,
        )

    def verify_email(self, token: str) -> Account | Failure:
        return self.verification.redeem(token)

    def resend_verification(self, email: str) -> None:
        """Issue a new verification token and email it; silent for unknown or verified emails."""
        if not email or not email.strip():
            return
        reissued = self.verification.reissue(email)
        if reissued is None:
            logger.info("Verification resend ignored for %s", redact_email(normalize_email(email)))
            return
        account, token = reissued
        self.dispatch(self._send_verification_email, account.email, token)

    def login(self, email: str, password: str) -> TokenPair | Failure:
        """
        Authenticate by email and password and start a new session.

        Unknown email and wrong password fail identically; account-state
        failures are reported only after the password matched. A new login
        overwrites the stored refresh token, ending any previous session.
        """
        if not email or not email.strip() or not password:
            return Failure(ErrorKind.VALIDATION_ERROR, "Email and password are required.")

        email = normalize_email(email)
        account = self.repository.get_by_email(email)
        stored_hash = account.password_hash if account is not None else None
        if not verify_password_timing_safe(password, stored_hash) or account is None:
            logger.warning("Failed login for %s", redact_email(email))
            return Failure(ErrorKind.INVALID_CREDENTIALS, MSG_INVALID_CREDENTIALS)

        state_failure = check_account_state(account, self.settings)
        if state_failure is not None:
            logger.warning("Login rejected for account %s: %s", account.id, state_failure.kind.value)
            return state_failure

        now = self.clock()
        access_token = create_access_token(account, self.settings, now)
        refresh_token, refresh_expiry = self.refresh_tokens.issue(account, now)
        account.last_login_at = now
        account.updated_at = now
        account_id = account.id
        self.repository.save(account)
        logger.info("Successful login for account %s", account_id)
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.settings.access_token_expires_in,
            refresh_token_expires_at=refresh_expiry,
            account_id=account_id,
        )

    def refresh(self, refresh_token: str) -> TokenPair | Failure:
        return self.refresh_tokens.rotate(refresh_token)

    def logout(self, account_id: str) -> None:
        """End the account's session. Idempotent: unknown accounts are a no-op."""
        if self.refresh_tokens.revoke(account_id):
            logger.info("Refresh token invalidated for account %s", account_id)
        else:
            logger.info("Logout for unknown account %s ignored", account_id)

    def validate_credentials(self, email: str, password: str) -> bool:
        """Check an email/password pair without starting a session."""
        if not email or not email.strip() or not password:
            return False
        account = self.repository.get_by_email(normalize_email(email))
        stored_hash = account.password_hash if account is not None else None
        return verify_password_timing_safe(password, stored_hash)

    def _send_verification_email(self, email: str, token: str) -> None:
        # Runs after the response; delivery problems must never surface to the client.
        if self.mailer is None:
            logger.info("No mailer configured; verification email to %s not sent", redact_email(email))
            return
        try:
            self.mailer.send_verification_email(email, token)
        except Exception:
            logger.exception("Failed to send verification email to %s", redact_email(email))
