"""
Centralized configuration for the TaskFlow backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., JWT_*, TOTP_*, SUPABASE_*).
"""

from functools import lru_cache
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


# Development-only signing secrets. The API logs a warning at startup while
# either of these is still in use.
DEFAULT_JWT_ACCESS_SECRET = "dev-access-secret-change-in-production"
DEFAULT_JWT_REFRESH_SECRET = "dev-refresh-secret-change-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "TaskFlow API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"

    # Tokens
    jwt_access_secret: str = DEFAULT_JWT_ACCESS_SECRET
    jwt_refresh_secret: str = DEFAULT_JWT_REFRESH_SECRET
    access_token_ttl_minutes: int = 15
    refresh_token_ttl_days: int = 7

    # Two-factor authentication
    totp_issuer: str = "TaskFlow"
    totp_valid_window: int = 2  # steps accepted either side of "now"

    # Password hashing (argon2id)
    password_hash_time_cost: int = 3
    password_hash_memory_cost: int = 65536  # KiB
    password_hash_parallelism: int = 4

    # Credential store backend
    user_store: Literal["memory", "supabase"] = "memory"

    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_db_url: str = ""  # direct Postgres URI, used by run_migrations.py

    @property
    def uses_default_jwt_secrets(self) -> bool:
        """True while either signing secret still has its development value."""
        return (
            self.jwt_access_secret == DEFAULT_JWT_ACCESS_SECRET
            or self.jwt_refresh_secret == DEFAULT_JWT_REFRESH_SECRET
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
