"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (JWT_SECRET, JWT_REFRESH_SECRET) are
validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_MIN_PRODUCTION_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except the two JWT secrets,
    which are validated in validate_secrets_and_backends.
    """

    # App
    app_name: str = "authgate"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Database (postgresql+asyncpg://... in production, sqlite+aiosqlite for local runs)
    database_url: str = "sqlite+aiosqlite:///./authgate.db"
    database_echo: bool = False
    # Create tables on startup (local/dev only; production uses Alembic)
    database_auto_create: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None

    # Tokens
    jwt_secret: SecretStr = SecretStr("")
    jwt_refresh_secret: SecretStr = SecretStr("")
    jwt_algorithm: str = "HS256"
    jwt_expires_in: int = 60 * 24 * 30  # minutes
    jwt_refresh_expires_in: int = 60 * 24 * 30  # minutes
    purpose_token_expires_minutes: int = 15

    # OTP
    otp_expires_in: int = 5  # minutes
    otp_delivery: str = "console"
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: SecretStr | None = None
    smtp_use_tls: bool = True
    smtp_from_address: str = "no-reply@localhost"

    # Cookies
    cookie_domain: str | None = None
    cookie_max_age_seconds: int = 30 * 24 * 60 * 60

    # CORS
    allowed_origins: str = "http://localhost:3000"
    # Comma-separated proxy addresses whose X-Forwarded-For is trusted; empty trusts none
    trusted_proxies: str = ""

    # Rate limiting: "memory" (single process) or "redis" (shared counters)
    rate_limit_enabled: bool = True
    rate_limit_storage: str = "memory"
    global_rate_limit: str = "100/15minutes"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @model_validator(mode="after")
    def validate_secrets_and_backends(self) -> "Settings":
        """Validate signing secrets and pluggable backends.

        - Both JWT secrets are required and must differ (refresh tokens must
          not verify as access tokens).
        - In production, secrets shorter than 32 characters are rejected.
        - otp_delivery and rate_limit_storage must name a known backend;
          console OTP delivery is refused in production.
        """
        access = self.jwt_secret.get_secret_value()
        refresh = self.jwt_refresh_secret.get_secret_value()
        if not access:
            raise ValueError(
                "JWT_SECRET is required. Generate with: openssl rand -hex 32."
            )
        if not refresh:
            raise ValueError(
                "JWT_REFRESH_SECRET is required. Generate with: openssl rand -hex 32."
            )
        if access == refresh:
            raise ValueError("JWT_SECRET and JWT_REFRESH_SECRET must be different.")
        if self.is_production and (
            len(access) < _MIN_PRODUCTION_SECRET_LENGTH
            or len(refresh) < _MIN_PRODUCTION_SECRET_LENGTH
        ):
            raise ValueError(
                f"JWT secrets must be at least {_MIN_PRODUCTION_SECRET_LENGTH} "
                "characters in production."
            )
        if self.otp_delivery not in ("console", "smtp"):
            raise ValueError(
                f"otp_delivery must be 'console' or 'smtp', got: {self.otp_delivery!r}"
            )
        if self.is_production and self.otp_delivery == "console":
            raise ValueError("OTP_DELIVERY=console logs live codes; use smtp in production.")
        if self.rate_limit_storage not in ("memory", "redis"):
            raise ValueError(
                "rate_limit_storage must be 'memory' or 'redis', "
                f"got: {self.rate_limit_storage!r}"
            )
        if self.jwt_expires_in <= 0 or self.jwt_refresh_expires_in <= 0:
            raise ValueError("Token lifetimes must be positive (minutes).")
        if self.otp_expires_in <= 0:
            raise ValueError("OTP_EXPIRES_IN must be positive (minutes).")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
