"""Application configuration."""
from collections import Counter
from functools import lru_cache
import math

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # App
    app_name: str = "Budget Tracker"
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Database
    database_url: str = "sqlite:///./data/budget_tracker.db"

    # Auth
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Email confirmation
    confirmation_token_expire_minutes: int = 15
    confirmation_resend_window_minutes: int = 10
    confirmation_link_base: str = "http://localhost:8000/api/v1/auth/confirm"

    # Users
    default_account_name: str = "My wallet"
    generated_password_length: int = 10

    # SMTP
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from_email: str = "noreply@budgettracker.app"

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, value: str) -> str:
        """Fail closed if SECRET_KEY is weak or placeholder quality."""
        if not value:
            raise ValueError("SECRET_KEY must be set.")

        if len(value) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")

        weak_values = {"changeme", "changeme-in-production", "secret", "password", "test"}
        lowered = value.lower()
        if lowered in weak_values or "changeme" in lowered:
            raise ValueError("SECRET_KEY must not be a placeholder value.")

        counts = Counter(value)
        entropy_per_char = -sum((count / len(value)) * math.log2(count / len(value)) for count in counts.values())
        estimated_entropy_bits = entropy_per_char * len(value)
        if estimated_entropy_bits < 100:
            raise ValueError("SECRET_KEY entropy is too low; use a cryptographically random value.")

        return value

    @field_validator("confirmation_resend_window_minutes")
    @classmethod
    def validate_resend_window(cls, value: int, info: ValidationInfo) -> int:
        """The resend window must be shorter than the token lifetime."""
        expire_minutes = info.data.get("confirmation_token_expire_minutes")
        if value <= 0:
            raise ValueError("CONFIRMATION_RESEND_WINDOW_MINUTES must be positive.")
        if expire_minutes is not None and value >= expire_minutes:
            raise ValueError(
                "CONFIRMATION_RESEND_WINDOW_MINUTES must be shorter than CONFIRMATION_TOKEN_EXPIRE_MINUTES."
            )
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
