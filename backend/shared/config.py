"""
Centralized configuration for the Licensor backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings are namespaced (e.g., STRIPE_*, SUPABASE_*, EVENTS_*).
"""

from functools import lru_cache
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Licensor API"
    app_version: str = "0.1.0"
    environment: Literal["development", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase (credential store)
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    developers_table: str = "developers"

    # Stripe (payment gateway)
    stripe_secret_key: str = ""
    stripe_timeout_seconds: float = 30.0

    # Event collector (empty URL means events are only logged)
    events_url: str = ""
    events_project_id: str = ""
    events_write_key: str = ""
    events_timeout_seconds: float = 5.0

    # License policy
    trial_days: int = 30
    renewal_days: int = 365
    renewal_amount_cents: int = 2500
    purchase_amount_cents: int = 2900
    currency: str = "usd"
    renewal_description: str = "annual license renewal"
    purchase_description: str = "license purchase"

    @property
    def is_production(self) -> bool:
        """Whether the service runs against live credentials."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
