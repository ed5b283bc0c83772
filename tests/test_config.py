"""Unit tests for starauth.core.config: defaults and validation of settings."""

import unittest

from pydantic import ValidationError

from factories import make_settings


class TestDefaults(unittest.TestCase):
    """Defaults match the documented session lifetimes and policies."""

    def test_token_lifetimes(self) -> None:
        settings = make_settings()
        self.assertEqual(settings.ACCESS_TOKEN_EXPIRE_MINUTES, 120)
        self.assertEqual(settings.access_token_expires_in, 7200)
        self.assertEqual(settings.REFRESH_TOKEN_EXPIRE_DAYS, 7)
        self.assertEqual(settings.VERIFICATION_TOKEN_EXPIRE_HOURS, 24)

    def test_verified_email_not_required_by_default(self) -> None:
        self.assertFalse(make_settings().REQUIRE_VERIFIED_EMAIL)

    def test_log_level_is_normalized(self) -> None:
        self.assertEqual(make_settings(LOG_LEVEL=" debug ").LOG_LEVEL, "DEBUG")

    def test_frontend_url_trailing_slash_removed(self) -> None:
        self.assertEqual(
            make_settings(FRONTEND_URL="https://app.example.com/").FRONTEND_URL,
            "https://app.example.com",
        )


class TestValidation(unittest.TestCase):
    """Invalid values fail at load time."""

    def test_rejects_unknown_database_scheme(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(DATABASE_URL="mysql://root@localhost/db")

    def test_rejects_empty_jwt_secret(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(JWT_SECRET="   ")

    def test_rejects_short_secret_in_prod(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(APP_ENV="prod", JWT_SECRET="short-secret")

    def test_accepts_long_secret_in_prod(self) -> None:
        settings = make_settings(APP_ENV="prod", JWT_SECRET="x" * 40)
        self.assertEqual(settings.APP_ENV, "prod")

    def test_rejects_out_of_range_access_lifetime(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(ACCESS_TOKEN_EXPIRE_MINUTES=0)

    def test_rejects_bad_log_level(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(LOG_LEVEL="chatty")

    def test_rejects_auth_prefix_without_slash(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(AUTH_PREFIX="auth")


if __name__ == "__main__":
    unittest.main()
