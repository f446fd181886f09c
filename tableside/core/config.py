"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings
from functools import lru_cache
from decimal import Decimal


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "Tableside"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # API
    API_V1_PREFIX: str = "/api/v1"
    ALLOWED_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:5173",
    ]

    # Database
    DATABASE_URL: str = "sqlite:///./tableside.db"

    # Caller role (authentication itself lives in front of this service)
    ROLE_HEADER: str = "X-User-Role"

    # Floor plan layout
    FLOOR_MARGIN_DISTANCE: int = 2  # grid units kept free along every edge
    DEFAULT_MOVE_STEP: int = 1

    # Bill policy, applied independently to the subtotal
    TAX_RATE: Decimal = Decimal("0.10")
    SERVICE_CHARGE_RATE: Decimal = Decimal("0.05")

    # Advertised refresh cadence for order queues and table views
    ORDER_POLL_INTERVAL_SECONDS: int = 10

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
