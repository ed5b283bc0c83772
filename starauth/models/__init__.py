"""SQLAlchemy ORM models."""

from starauth.models.account import Account, AccountStatus, Role
from starauth.models.base import Base

__all__ = ["Account", "AccountStatus", "Base", "Role"]
