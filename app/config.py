"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - Env names match the site's existing deployment (EMAIL_USER, EMAIL_PASS, SMTP_HOST, SMTP_PORT)
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://techalpha:techalpha@db:5432/techalpha"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgres://"):
            v = v.replace("postgres://", "postgresql://", 1)
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 10
    database_max_overflow: int = 5

    # SMTP (Titan Mail: implicit TLS on 465)
    smtp_host: str = "smtp.titan.email"
    smtp_port: int = 465
    smtp_use_tls: bool = True
    smtp_start_tls: bool = False
    smtp_timeout_seconds: int = 30
    email_user: str = "info@techalphahub.com"
    email_pass: str = ""
    mail_sender_name: str = "TechAlpha Hub"
    notify_inbox: str | None = None

    # Payment gateway (Flutterwave v3)
    payment_secret_key: str = "FLWSECK_TEST-placeholder"
    payment_base_url: str = "https://api.flutterwave.com/v3"
    payment_currency: str = "NGN"
    payment_redirect_url: str = "https://techalphahub.com/payment/callback"
    payment_timeout_seconds: int = 15
    payment_tx_ref_prefix: str = "TAH"

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def staff_inbox(self) -> str:
        """Where submission notifications go; the sending mailbox unless overridden."""
        return self.notify_inbox or self.email_user


@lru_cache
def get_settings() -> Settings:
    return Settings()
