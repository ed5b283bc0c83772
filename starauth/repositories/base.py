"""Repository interface for the credential store."""

from datetime import datetime
from typing import Protocol

from starauth.models.account import Account


class DuplicateAccountError(Exception):
    """Raised by add() when the email or username is already taken."""


class AccountRepository(Protocol):
    """
    Persistence operations the session services need.

    One instance is bound to one unit of work (a request, a CLI run, a test).
    Implementations must keep email and username unique.
    """

    def get_by_id(self, account_id: str) -> Account | None: ...

    def get_by_email(self, email: str) -> Account | None: ...

    def get_by_username(self, username: str) -> Account | None: ...

    def find_conflict(self, email: str, username: str) -> Account | None:
        """Any account whose email (case-insensitive) or username (exact) is taken."""
        ...

    def get_by_verification_token(self, token: str) -> Account | None: ...

    def get_by_refresh_token(self, token: str) -> Account | None: ...

    def add(self, account: Account) -> Account:
        """Persist a new account; raises DuplicateAccountError on a unique clash."""
        ...

    def save(self, account: Account) -> Account: ...

    def replace_refresh_token(
        self,
        account_id: str,
        expected: str | None,
        new_token: str | None,
        new_expiry: datetime | None,
        updated_at: datetime,
    ) -> bool:
        """
        Swap the stored refresh token only if it still equals `expected`.

        Returns False when another writer changed it first.
        """
        ...

    def clear_refresh_token(self, account_id: str, updated_at: datetime) -> bool:
        """Clear the refresh token pair; False when the account does not exist."""
        ...
