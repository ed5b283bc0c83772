"""Single-use, time-limited email verification tokens."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from starauth.core.errors import MSG_INVALID_VERIFICATION_TOKEN, ErrorKind, Failure
from starauth.core.security import generate_verification_token, normalize_email
from starauth.models.account import Account, as_utc, utcnow
from starauth.repositories.base import AccountRepository

if TYPE_CHECKING:
    from starauth.core.config import Settings

logger = logging.getLogger(__name__)

INVALID_TOKEN = Failure(ErrorKind.INVALID_TOKEN, MSG_INVALID_VERIFICATION_TOKEN)


class VerificationTokenManager:
    """Issues and redeems verification tokens stored on the account row."""

    def __init__(
        self,
        repository: AccountRepository,
        settings: "Settings",
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.repository = repository
        self.settings = settings
        self.clock = clock

    def issue(self, account: Account, now: datetime | None = None) -> str:
        """Set a fresh token and expiry on the account (superseding any outstanding one). Caller persists."""
        now = now or self.clock()
        token = generate_verification_token()
        account.verification_token = token
        account.verification_token_expiry = now + timedelta(
            hours=self.settings.VERIFICATION_TOKEN_EXPIRE_HOURS
        )
        return token

    def redeem(self, token: str) -> Account | Failure:
        """
        Mark the owning account verified and consume the token.

        Unknown, expired and already-consumed tokens fail identically.
        """
        if not token or not token.strip():
            return INVALID_TOKEN
        account = self.repository.get_by_verification_token(token)
        now = self.clock()
        if account is None:
            logger.warning("Invalid or expired verification token used")
            return INVALID_TOKEN
        expiry = account.verification_token_expiry
        if expiry is None or as_utc(expiry) <= now:
            logger.warning("Invalid or expired verification token used")
            return INVALID_TOKEN

        account.is_verified = True
        account.verification_token = None
        account.verification_token_expiry = None
        account.updated_at = now
        self.repository.save(account)
        logger.info("Email verified for account %s", account.id)
        return account

    def reissue(self, email: str) -> tuple[Account, str] | None:
        """
        Replace the outstanding token for an unverified account.

        Returns None for unknown or already verified emails; callers must not
        reveal which.
        """
        account = self.repository.get_by_email(normalize_email(email))
        if account is None or account.is_verified:
            return None
        now = self.clock()
        token = self.issue(account, now)
        account.updated_at = now
        self.repository.save(account)
        logger.info("Verification token reissued for account %s", account.id)
        return account, token
