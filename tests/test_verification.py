"""Unit tests for starauth.services.verification: single-use, time-limited email tokens."""

import unittest
from datetime import timedelta

from factories import FakeClock, make_account, make_settings
from starauth.core.errors import ErrorKind, Failure
from starauth.models.account import AccountStatus
from starauth.repositories.memory import InMemoryAccountRepository
from starauth.services.verification import VerificationTokenManager


class _Base(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = InMemoryAccountRepository()
        self.clock = FakeClock()
        self.manager = VerificationTokenManager(self.repo, make_settings(), self.clock)
        self.account = make_account(
            self.repo, status=AccountStatus.PENDING.value, is_verified=False
        )
        self.token = self.manager.issue(self.account)
        self.repo.save(self.account)


class TestIssue(_Base):
    """issue() sets a token with a 24 hour expiry and supersedes older ones."""

    def test_sets_token_and_expiry(self) -> None:
        self.assertEqual(self.account.verification_token, self.token)
        self.assertEqual(
            self.account.verification_token_expiry - self.clock.now,
            timedelta(hours=24),
        )

    def test_new_token_supersedes_old(self) -> None:
        new_token = self.manager.issue(self.account)
        self.repo.save(self.account)
        self.assertNotEqual(new_token, self.token)
        self.assertIsInstance(self.manager.redeem(self.token), Failure)
        self.assertIs(self.manager.redeem(new_token), self.account)


class TestRedeem(_Base):
    """redeem() verifies once; every failure looks the same."""

    def test_first_redeem_verifies_and_clears(self) -> None:
        result = self.manager.redeem(self.token)
        self.assertIs(result, self.account)
        self.assertTrue(self.account.is_verified)
        self.assertIsNone(self.account.verification_token)
        self.assertIsNone(self.account.verification_token_expiry)
        self.assertEqual(self.account.updated_at, self.clock.now)

    def test_second_redeem_fails(self) -> None:
        self.manager.redeem(self.token)
        result = self.manager.redeem(self.token)
        self.assertIsInstance(result, Failure)
        self.assertEqual(result.kind, ErrorKind.INVALID_TOKEN)

    def test_expired_token_fails_even_if_it_matches(self) -> None:
        self.clock.advance(hours=24, seconds=1)
        result = self.manager.redeem(self.token)
        self.assertIsInstance(result, Failure)
        self.assertEqual(result.kind, ErrorKind.INVALID_TOKEN)
        self.assertFalse(self.account.is_verified)

    def test_token_at_exact_expiry_fails(self) -> None:
        self.clock.advance(hours=24)
        self.assertIsInstance(self.manager.redeem(self.token), Failure)

    def test_unknown_and_expired_are_indistinguishable(self) -> None:
        unknown = self.manager.redeem("no-such-token")
        self.clock.advance(days=2)
        expired = self.manager.redeem(self.token)
        self.assertEqual(unknown, expired)

    def test_blank_token_fails(self) -> None:
        self.assertEqual(self.manager.redeem("  ").kind, ErrorKind.INVALID_TOKEN)

    def test_redeem_does_not_change_status(self) -> None:
        self.manager.redeem(self.token)
        self.assertEqual(self.account.status, AccountStatus.PENDING.value)


class TestReissue(_Base):
    """reissue() replaces the token for unverified accounts only."""

    def test_reissue_replaces_token(self) -> None:
        result = self.manager.reissue("ALICE@example.com")
        self.assertIsNotNone(result)
        account, token = result
        self.assertIs(account, self.account)
        self.assertNotEqual(token, self.token)
        self.assertEqual(self.account.verification_token, token)

    def test_unknown_email_returns_none(self) -> None:
        self.assertIsNone(self.manager.reissue("nobody@example.com"))

    def test_verified_account_returns_none(self) -> None:
        self.manager.redeem(self.token)
        self.assertIsNone(self.manager.reissue("alice@example.com"))


if __name__ == "__main__":
    unittest.main()
