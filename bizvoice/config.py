"""
Configuration

Settings loaded from environment variables (or a local .env file).
Every service also accepts these values as constructor arguments, so
loading settings is optional for library use and tests.
"""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App info
    app_name: str = "bizvoice"
    app_version: str = "0.1.0"

    # Storage (one JSON file per key)
    data_dir: str = "./data/store"

    # Voice
    default_language: str = "en"

    # Analytics limits
    kpi_limit: int = 4
    top_products_limit: int = 5
    activity_limit: int = 20
    recent_transaction_activities: int = 10

    # Command executor
    product_match_threshold: float = 0.7

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings = None):
    """Configure root logging from settings."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=settings.log_format,
    )
