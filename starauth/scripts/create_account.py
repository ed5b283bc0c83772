"""
Create an active, verified account (e.g. first admin). Run from project root:
  python -m starauth.scripts.create_account USERNAME EMAIL PASSWORD [role]
Example:
  python -m starauth.scripts.create_account admin admin@example.com your-secure-password admin
"""
import argparse
import logging
import sys

from starauth.core.database import session_scope
from starauth.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
    normalize_email,
    normalize_username,
)
from starauth.models.account import Account, AccountStatus, Role, new_account_id, utcnow
from starauth.repositories.accounts import SqlAlchemyAccountRepository
from starauth.repositories.base import AccountRepository, DuplicateAccountError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def create_account(
    repository: AccountRepository,
    username: str,
    email: str,
    password: str,
    role: str = Role.USER.value,
) -> Account | None:
    """Create an account that can log in immediately. Returns None if the username or email is taken."""
    username = normalize_username(username)
    email = normalize_email(email)
    if repository.find_conflict(email, username) is not None:
        return None
    account = Account(
        id=new_account_id(),
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=role,
        status=AccountStatus.ACTIVE.value,
        is_verified=True,
        is_locked=False,
        is_disabled=False,
        created_at=utcnow(),
    )
    try:
        return repository.add(account)
    except DuplicateAccountError:
        return None


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a StarAuth account (active and verified).")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default=Role.USER.value, choices=[r.value for r in Role])
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        print("Invalid username length.", file=sys.stderr)
        return 1
    email = args.email.strip()
    if "@" not in email or len(email) > EMAIL_MAX_LEN:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    with session_scope() as db:
        account = create_account(
            SqlAlchemyAccountRepository(db), username, email, args.password, args.role
        )
    if account is None:
        print(f"Username '{username}' or email '{email}' already exists.", file=sys.stderr)
        return 1
    logger.info("Created account %s (%s)", account.id, args.role)
    print(f"Created account '{username}' with role '{args.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
