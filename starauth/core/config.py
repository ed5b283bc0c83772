"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "sqlite://",
    "sqlite+pysqlite://",
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Production secrets shorter than this are rejected at startup.
JWT_SECRET_MIN_PROD_LEN = 32


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    AUTH_PREFIX: str = "/auth"

    # SQLite for local use; point at Postgres in production
    DATABASE_URL: str = "sqlite:///./starauth.db"

    # Access tokens (JWT)
    JWT_SECRET: SecretStr = SecretStr("change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "starauth"
    JWT_AUDIENCE: str = "starauth-clients"
    # Canonical access-token lifetime; every expires_in in responses derives from it.
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 120

    # Opaque server-side tokens
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    VERIFICATION_TOKEN_EXPIRE_HOURS: int = 24

    # Login policy: when True, unverified accounts cannot log in.
    REQUIRE_VERIFIED_EMAIL: bool = False

    # Cookie mirror of the access token (set on every issuance, cleared on logout)
    AUTH_COOKIE_ENABLED: bool = True
    AUTH_COOKIE_NAME: str = "access_token"
    AUTH_COOKIE_SECURE: bool = True

    # Outbound email (optional; when disabled or unconfigured emails are only logged)
    EMAIL_ENABLED: bool = False
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USER: str | None = None
    SMTP_PASSWORD: SecretStr | None = None
    SMTP_USE_TLS: bool = True
    SMTP_TIMEOUT_SEC: float = 30.0
    EMAIL_FROM: str | None = None
    EMAIL_FROM_NAME: str = "StarAuth Support"
    FRONTEND_URL: str = "http://localhost:3000"

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must be set and non-empty")
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a SQLite or PostgreSQL URL (e.g. sqlite:/// or postgresql://)"
            )
        return v.strip()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = (v or "").strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}")
        return level

    @field_validator("AUTH_PREFIX")
    @classmethod
    def validate_auth_prefix(cls, v: str) -> str:
        s = v.strip().rstrip("/")
        if not s.startswith("/"):
            raise ValueError("AUTH_PREFIX must start with '/' (e.g. /auth)")
        return s

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        return v

    @field_validator("JWT_ALGORITHM", "JWT_ISSUER", "JWT_AUDIENCE")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_ALGORITHM, JWT_ISSUER and JWT_AUDIENCE must be non-empty")
        return v.strip()

    @field_validator("ACCESS_TOKEN_EXPIRE_MINUTES")
    @classmethod
    def validate_access_token_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 1440:
            raise ValueError(
                "ACCESS_TOKEN_EXPIRE_MINUTES must be between 1 and 1440 (1 min to 1 day)"
            )
        return v

    @field_validator("REFRESH_TOKEN_EXPIRE_DAYS")
    @classmethod
    def validate_refresh_token_expire_days(cls, v: int) -> int:
        if v < 1 or v > 90:
            raise ValueError("REFRESH_TOKEN_EXPIRE_DAYS must be between 1 and 90")
        return v

    @field_validator("VERIFICATION_TOKEN_EXPIRE_HOURS")
    @classmethod
    def validate_verification_token_expire_hours(cls, v: int) -> int:
        if v < 1 or v > 168:
            raise ValueError(
                "VERIFICATION_TOKEN_EXPIRE_HOURS must be between 1 and 168 (1 hour to 7 days)"
            )
        return v

    @field_validator("SMTP_PORT")
    @classmethod
    def validate_smtp_port(cls, v: int) -> int:
        if v < 1 or v > 65535:
            raise ValueError("SMTP_PORT must be between 1 and 65535")
        return v

    @field_validator("SMTP_TIMEOUT_SEC")
    @classmethod
    def validate_smtp_timeout(cls, v: float) -> float:
        if v <= 0 or v > 120:
            raise ValueError("SMTP_TIMEOUT_SEC must be greater than 0 and at most 120")
        return v

    @field_validator("FRONTEND_URL")
    @classmethod
    def validate_frontend_url(cls, v: str) -> str:
        s = v.strip().rstrip("/")
        if not (s.lower().startswith("http://") or s.lower().startswith("https://")):
            raise ValueError("FRONTEND_URL must use http or https (e.g. https://app.example.com)")
        return s

    @model_validator(mode="after")
    def validate_prod_secret(self) -> "Settings":
        secret = self.JWT_SECRET.get_secret_value()
        if self.APP_ENV == "prod" and len(secret) < JWT_SECRET_MIN_PROD_LEN:
            raise ValueError(
                f"JWT_SECRET must be at least {JWT_SECRET_MIN_PROD_LEN} characters when APP_ENV=prod"
            )
        return self

    @property
    def access_token_expires_in(self) -> int:
        """Access-token lifetime in seconds (the value reported as expires_in)."""
        return self.ACCESS_TOKEN_EXPIRE_MINUTES * 60


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
