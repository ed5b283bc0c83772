"""ORM model for accounts: identity, password hash, and session/verification state."""

import uuid
from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, String

from starauth.models.base import Base


class Role(str, Enum):
    USER = "user"
    EDITOR = "editor"
    ADMIN = "admin"


class AccountStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


def new_account_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite drops tzinfo) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class Account(Base):
    """
    User account for registration, login and session management.

    verification_token/verification_token_expiry and refresh_token/
    refresh_token_expiry_time are always set and cleared in pairs.
    At most one refresh token is live per account.
    """

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=new_account_id)
    username = Column(String(50), nullable=False, unique=True, index=True)
    # Stored lowercased, which makes the unique index case-insensitive.
    email = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=Role.USER.value)
    status = Column(String(32), nullable=False, default=AccountStatus.PENDING.value)

    is_verified = Column(Boolean, nullable=False, default=False)
    verification_token = Column(String(128), nullable=True, unique=True, index=True)
    verification_token_expiry = Column(DateTime(timezone=True), nullable=True)

    refresh_token = Column(String(128), nullable=True, unique=True, index=True)
    refresh_token_expiry_time = Column(DateTime(timezone=True), nullable=True)

    is_locked = Column(Boolean, nullable=False, default=False)
    is_disabled = Column(Boolean, nullable=False, default=False)

    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Account id={self.id!r} username={self.username!r} status={self.status!r}>"
