"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Books Ledger"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/books_ledger"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Posting
    # How many times a posting is re-attempted after losing a race on an
    # account version or a voucher number.
    POSTING_MAX_RETRIES: int = int(os.getenv("POSTING_MAX_RETRIES", "3"))
    VOUCHER_NUMBER_WIDTH: int = int(os.getenv("VOUCHER_NUMBER_WIDTH", "6"))

    # Books run April to March unless configured otherwise
    FINANCIAL_YEAR_START_MONTH: int = int(
        os.getenv("FINANCIAL_YEAR_START_MONTH", "4")
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls. This avoids reading
    environment variables repeatedly.
    """
    return Settings()
