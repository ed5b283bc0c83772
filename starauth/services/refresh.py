"""Refresh tokens: issue, rotate (single-use), revoke."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from starauth.core.errors import MSG_INVALID_REFRESH_TOKEN, ErrorKind, Failure
from starauth.core.security import generate_refresh_token
from starauth.core.tokens import create_access_token
from starauth.models.account import Account, as_utc, utcnow
from starauth.repositories.base import AccountRepository
from starauth.services.account_state import check_account_state

if TYPE_CHECKING:
    from starauth.core.config import Settings

logger = logging.getLogger(__name__)

INVALID_OR_EXPIRED = Failure(ErrorKind.INVALID_OR_EXPIRED_TOKEN, MSG_INVALID_REFRESH_TOKEN)


@dataclass(frozen=True)
class TokenPair:
    """Access token plus the refresh token that continues the session."""

    access_token: str
    refresh_token: str
    expires_in: int
    refresh_token_expires_at: datetime
    account_id: str


class RefreshTokenManager:
    """
    One live refresh token per account, stored on the account row.

    Rotation swaps the stored value conditionally: of two concurrent refreshes
    with the same token only the first swap succeeds; the other caller gets
    INVALID_OR_EXPIRED_TOKEN.
    """

    def __init__(
        self,
        repository: AccountRepository,
        settings: "Settings",
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.repository = repository
        self.settings = settings
        self.clock = clock

    def issue(self, account: Account, now: datetime | None = None) -> tuple[str, datetime]:
        """Overwrite the account's refresh token (revoking any prior one). Caller persists."""
        now = now or self.clock()
        token = generate_refresh_token()
        expiry = now + timedelta(days=self.settings.REFRESH_TOKEN_EXPIRE_DAYS)
        account.refresh_token = token
        account.refresh_token_expiry_time = expiry
        return token, expiry

    def rotate(self, token: str) -> TokenPair | Failure:
        """Exchange a live refresh token for a new access/refresh pair."""
        if not token or not token.strip():
            return INVALID_OR_EXPIRED
        account = self.repository.get_by_refresh_token(token)
        if account is None:
            logger.warning("Invalid or expired refresh token used")
            return INVALID_OR_EXPIRED

        now = self.clock()
        expiry = account.refresh_token_expiry_time
        if expiry is None or as_utc(expiry) <= now:
            # Clear the dead token, unless another request already replaced it.
            self.repository.replace_refresh_token(account.id, token, None, None, now)
            logger.warning("Expired refresh token used for account %s", account.id)
            return INVALID_OR_EXPIRED

        state_failure = check_account_state(account, self.settings)
        if state_failure is not None:
            logger.warning(
                "Refresh rejected for account %s: %s", account.id, state_failure.kind.value
            )
            return state_failure

        account_id = account.id
        access_token = create_access_token(account, self.settings, now)
        new_token = generate_refresh_token()
        new_expiry = now + timedelta(days=self.settings.REFRESH_TOKEN_EXPIRE_DAYS)
        if not self.repository.replace_refresh_token(account_id, token, new_token, new_expiry, now):
            logger.warning("Refresh token for account %s was rotated concurrently", account_id)
            return INVALID_OR_EXPIRED

        logger.info("Tokens refreshed for account %s", account_id)
        return TokenPair(
            access_token=access_token,
            refresh_token=new_token,
            expires_in=self.settings.access_token_expires_in,
            refresh_token_expires_at=new_expiry,
            account_id=account_id,
        )

    def revoke(self, account_id: str) -> bool:
        """Clear the account's refresh token; False when the account does not exist."""
        return self.repository.clear_refresh_token(account_id, self.clock())
