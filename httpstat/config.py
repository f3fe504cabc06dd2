"""
Configuration Management Module

Configures library parameters via environment variables or .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Library Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    """

    # Application Config
    APP_NAME: str = "httpstat"
    DEBUG: bool = False
    # Explicit log level, overrides DEBUG when set (e.g. "WARNING")
    LOG_LEVEL: str | None = None

    # HTTP Client Config
    # Request timeout (seconds)
    HTTP_TIMEOUT: float = 30.0
    # Verify upstream TLS certificates
    HTTP_VERIFY_TLS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get library configuration (Singleton)

    Uses lru_cache to ensure configuration is loaded only once.

    Returns:
        Settings: Configuration instance
    """
    return Settings()
