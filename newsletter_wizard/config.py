"""
Configuration for newsletter-wizard clients.

Settings loads environment variables (and a project-level .env file).
The invocation runtime never reads Settings directly: build an InvokerConfig
from it (InvokerConfig.from_settings) and pass that to the invoker.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for .env file loading (allows running from any CWD)
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Settings for talking to the newsletter-wizard backend.

    Environment variables are loaded from .env file and can be overridden
    by actual environment variables.
    """

    SERVICE_NAME: str = "newsletter-wizard"

    # Supabase project
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_ANON_KEY: str = ""
    FUNCTIONS_PATH: str = "/functions/v1"

    # Invocation defaults
    INVOKE_MAX_RETRIES: int = 3
    INVOKE_TIMEOUT_MS: int = 30_000

    # Backoff
    RATE_LIMIT_DEFAULT_DELAY: float = 5.0
    TIMEOUT_RETRY_DELAY: float = 1.0
    BACKOFF_MAX_DELAY: float | None = None

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        extra="ignore"
    )

    @property
    def functions_url(self) -> str:
        """Base URL that function names are appended to."""
        return f"{self.SUPABASE_URL.rstrip('/')}/{self.FUNCTIONS_PATH.strip('/')}"


# Global settings instance
settings = Settings()  # type: ignore
