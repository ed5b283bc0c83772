"""SQLAlchemy implementation of AccountRepository."""

import logging
from datetime import datetime

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from starauth.models.account import Account
from starauth.repositories.base import DuplicateAccountError

logger = logging.getLogger(__name__)


class SqlAlchemyAccountRepository:
    """Account persistence bound to one SQLAlchemy Session; commits on every write."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, account_id: str) -> Account | None:
        return self.session.get(Account, account_id)

    def get_by_email(self, email: str) -> Account | None:
        stmt = select(Account).where(func.lower(Account.email) == email.lower())
        return self.session.execute(stmt).scalars().first()

    def get_by_username(self, username: str) -> Account | None:
        stmt = select(Account).where(Account.username == username)
        return self.session.execute(stmt).scalars().first()

    def find_conflict(self, email: str, username: str) -> Account | None:
        stmt = select(Account).where(
            or_(func.lower(Account.email) == email.lower(), Account.username == username)
        )
        return self.session.execute(stmt).scalars().first()

    def get_by_verification_token(self, token: str) -> Account | None:
        stmt = select(Account).where(Account.verification_token == token)
        return self.session.execute(stmt).scalars().first()

    def get_by_refresh_token(self, token: str) -> Account | None:
        stmt = select(Account).where(Account.refresh_token == token)
        return self.session.execute(stmt).scalars().first()

    def add(self, account: Account) -> Account:
        self.session.add(account)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateAccountError(str(e.orig)) from e
        self.session.refresh(account)
        return account

    def save(self, account: Account) -> Account:
        self.session.add(account)
        self.session.commit()
        return account

    def replace_refresh_token(
        self,
        account_id: str,
        expected: str | None,
        new_token: str | None,
        new_expiry: datetime | None,
        updated_at: datetime,
    ) -> bool:
        # Conditional UPDATE: only one of two concurrent rotations can match.
        if expected is None:
            condition = Account.refresh_token.is_(None)
        else:
            condition = Account.refresh_token == expected
        stmt = (
            update(Account)
            .where(Account.id == account_id, condition)
            .values(
                refresh_token=new_token,
                refresh_token_expiry_time=new_expiry,
                updated_at=updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        self.session.commit()
        swapped = result.rowcount == 1
        if not swapped:
            logger.info("Refresh token swap lost for account %s", account_id)
        return swapped

    def clear_refresh_token(self, account_id: str, updated_at: datetime) -> bool:
        stmt = (
            update(Account)
            .where(Account.id == account_id)
            .values(refresh_token=None, refresh_token_expiry_time=None, updated_at=updated_at)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        self.session.commit()
        return result.rowcount == 1
