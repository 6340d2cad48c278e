from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database (sqlite+aiosqlite locally, postgresql+asyncpg in deployment)
    database_url: str = "sqlite+aiosqlite:///./quicktable.db"

    @property
    def async_database_url(self) -> str:
        """Get database URL with an async driver."""
        url = self.database_url
        # Hosted Postgres hands out postgresql://, convert to postgresql+asyncpg://
        if url.startswith("postgresql://") and "+asyncpg" not in url:
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    @property
    def is_sqlite(self) -> bool:
        return self.async_database_url.startswith("sqlite")

    # Application
    app_env: str = "development"
    debug: bool = False

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Spreadsheet webhook (empty disables forwarding)
    webhook_url: str = ""
    webhook_timeout: float = 10.0
    webhook_source: str = "QuickTable App"

    # Availability policy
    limited_threshold: float = 0.30
    count_cancelled_reservations: bool = True
    honor_blocked_dates: bool = True

    # Reservation lifecycle
    enforce_status_transitions: bool = False

    # Customer date picker length (further capped by each restaurant's maxDaysAdvance)
    booking_window_days: int = 14

    # Seed the demo restaurant on startup in development
    seed_default_restaurant: bool = True

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
