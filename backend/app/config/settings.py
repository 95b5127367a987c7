"""
Configuration settings for the Archive Catalog API.
Loads environment variables and provides application settings.
"""
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List

# settings.py is at backend/app/config/settings.py → 4 levels up
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database - use absolute path to avoid working directory issues
    database_url: str = f"sqlite:///{_PROJECT_ROOT}/data/archive_catalog.db"
    sql_echo: bool = False  # Log every SQL statement

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Listings
    listing_page_size: int = Field(50, ge=1)  # Rows per list page

    # Logging
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert CORS origins string to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
