"""Credential store repositories."""

from starauth.repositories.accounts import SqlAlchemyAccountRepository
from starauth.repositories.base import AccountRepository, DuplicateAccountError
from starauth.repositories.memory import InMemoryAccountRepository

__all__ = [
    "AccountRepository",
    "DuplicateAccountError",
    "InMemoryAccountRepository",
    "SqlAlchemyAccountRepository",
]
