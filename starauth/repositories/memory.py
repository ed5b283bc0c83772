"""In-memory AccountRepository for tests and local tooling (no database required)."""

import threading
from datetime import datetime

from starauth.models.account import Account, new_account_id, utcnow
from starauth.repositories.base import DuplicateAccountError


class InMemoryAccountRepository:
    """
    Dict-backed account store.

    Returned accounts are the stored instances (an identity map), so mutations
    are visible to later reads just as with a shared database row.
    """

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._accounts)

    def get_by_id(self, account_id: str) -> Account | None:
        return self._accounts.get(account_id)

    def get_by_email(self, email: str) -> Account | None:
        wanted = email.lower()
        return next((a for a in self._accounts.values() if a.email.lower() == wanted), None)

    def get_by_username(self, username: str) -> Account | None:
        return next((a for a in self._accounts.values() if a.username == username), None)

    def find_conflict(self, email: str, username: str) -> Account | None:
        return self.get_by_email(email) or self.get_by_username(username)

    def get_by_verification_token(self, token: str) -> Account | None:
        return next(
            (a for a in self._accounts.values() if a.verification_token == token), None
        )

    def get_by_refresh_token(self, token: str) -> Account | None:
        return next((a for a in self._accounts.values() if a.refresh_token == token), None)

    def add(self, account: Account) -> Account:
        with self._lock:
            if self.find_conflict(account.email, account.username) is not None:
                raise DuplicateAccountError(
                    f"email or username already taken: {account.username!r}"
                )
            if account.id is None:
                account.id = new_account_id()
            if account.created_at is None:
                account.created_at = utcnow()
            self._accounts[account.id] = account
        return account

    def save(self, account: Account) -> Account:
        with self._lock:
            self._accounts[account.id] = account
        return account

    def replace_refresh_token(
        self,
        account_id: str,
        expected: str | None,
        new_token: str | None,
        new_expiry: datetime | None,
        updated_at: datetime,
    ) -> bool:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None or account.refresh_token != expected:
                return False
            account.refresh_token = new_token
            account.refresh_token_expiry_time = new_expiry
            account.updated_at = updated_at
            return True

    def clear_refresh_token(self, account_id: str, updated_at: datetime) -> bool:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return False
            account.refresh_token = None
            account.refresh_token_expiry_time = None
            account.updated_at = updated_at
            return True
