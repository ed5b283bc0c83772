"""Unit tests for starauth.core.tokens: access-token claims and validation failures."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from factories import TEST_SECRET, make_settings
from starauth.core.tokens import (
    TokenDecodeError,
    create_access_token,
    decode_access_token,
)
from starauth.models.account import Account, AccountStatus, Role


def _account(**kwargs: object) -> Account:
    defaults = {
        "id": "5f0c6a34-9a1e-4d1a-8f5e-3f6b1c2d7e90",
        "username": "alice",
        "email": "alice@example.com",
        "role": Role.EDITOR.value,
        "status": AccountStatus.ACTIVE.value,
        "is_verified": True,
    }
    defaults.update(kwargs)
    return Account(**defaults)


class TestCreateAndDecode(unittest.TestCase):
    """A freshly minted token decodes back to the account's claims."""

    def test_round_trip_claims(self) -> None:
        settings = make_settings()
        token = create_access_token(_account(), settings)
        claims = decode_access_token(token, settings)
        self.assertEqual(claims.sub, "5f0c6a34-9a1e-4d1a-8f5e-3f6b1c2d7e90")
        self.assertEqual(claims.username, "alice")
        self.assertEqual(claims.email, "alice@example.com")
        self.assertEqual(claims.role, "editor")
        self.assertEqual(claims.status, "active")
        self.assertTrue(claims.is_verified)
        self.assertTrue(claims.jti)

    def test_lifetime_is_canonical_two_hours(self) -> None:
        settings = make_settings()
        now = datetime.now(UTC).replace(microsecond=0)
        claims = decode_access_token(create_access_token(_account(), settings, now), settings)
        self.assertEqual(claims.expires_at - claims.issued_at, timedelta(hours=2))
        self.assertEqual(settings.access_token_expires_in, 7200)

    def test_each_token_has_unique_jti(self) -> None:
        settings = make_settings()
        a = decode_access_token(create_access_token(_account(), settings), settings)
        b = decode_access_token(create_access_token(_account(), settings), settings)
        self.assertNotEqual(a.jti, b.jti)


class TestDecodeRejects(unittest.TestCase):
    """Signature, issuer, audience and expiry are all enforced."""

    def test_wrong_secret(self) -> None:
        token = create_access_token(_account(), make_settings(JWT_SECRET="another-secret-entirely"))
        with self.assertRaises(TokenDecodeError):
            decode_access_token(token, make_settings())

    def test_wrong_issuer(self) -> None:
        token = create_access_token(_account(), make_settings(JWT_ISSUER="someone-else"))
        with self.assertRaises(TokenDecodeError):
            decode_access_token(token, make_settings())

    def test_wrong_audience(self) -> None:
        token = create_access_token(_account(), make_settings(JWT_AUDIENCE="other-clients"))
        with self.assertRaises(TokenDecodeError):
            decode_access_token(token, make_settings())

    def test_expired_token(self) -> None:
        settings = make_settings()
        minted = datetime.now(UTC) - timedelta(hours=3)
        token = create_access_token(_account(), settings, now=minted)
        with self.assertRaises(TokenDecodeError) as ctx:
            decode_access_token(token, settings)
        self.assertIn("expired", ctx.exception.message)

    def test_missing_role_claim(self) -> None:
        settings = make_settings()
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "sub": "abc",
                "iss": settings.JWT_ISSUER,
                "aud": settings.JWT_AUDIENCE,
                "iat": now,
                "exp": now + timedelta(minutes=5),
            },
            TEST_SECRET,
            algorithm="HS256",
        )
        with self.assertRaises(TokenDecodeError):
            decode_access_token(token, settings)

    def test_garbage(self) -> None:
        with self.assertRaises(TokenDecodeError):
            decode_access_token("not.a.jwt", make_settings())


if __name__ == "__main__":
    unittest.main()
