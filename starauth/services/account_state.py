"""Account-state gate shared by login and refresh."""

from typing import TYPE_CHECKING

from starauth.core.errors import (
    MSG_ACCOUNT_DISABLED,
    MSG_ACCOUNT_INACTIVE,
    MSG_ACCOUNT_LOCKED,
    MSG_EMAIL_NOT_VERIFIED,
    ErrorKind,
    Failure,
)
from starauth.models.account import Account, AccountStatus

if TYPE_CHECKING:
    from starauth.core.config import Settings


def check_account_state(account: Account, settings: "Settings") -> Failure | None:
    """
    Return the first reason this account may not start or continue a session, or None.

    Order: locked, disabled, pending, inactive, then (when REQUIRE_VERIFIED_EMAIL)
    unverified. Pending accounts are reported with the "disabled" copy users see.
    """
    if account.is_locked:
        return Failure(ErrorKind.ACCOUNT_LOCKED, MSG_ACCOUNT_LOCKED)
    if account.is_disabled:
        return Failure(ErrorKind.ACCOUNT_DISABLED, MSG_ACCOUNT_DISABLED)
    if account.status == AccountStatus.PENDING.value:
        return Failure(ErrorKind.ACCOUNT_PENDING, MSG_ACCOUNT_DISABLED)
    if account.status == AccountStatus.INACTIVE.value:
        return Failure(ErrorKind.ACCOUNT_INACTIVE, MSG_ACCOUNT_INACTIVE)
    if settings.REQUIRE_VERIFIED_EMAIL and not account.is_verified:
        return Failure(ErrorKind.EMAIL_NOT_VERIFIED, MSG_EMAIL_NOT_VERIFIED)
    return None
