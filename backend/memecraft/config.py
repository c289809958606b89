"""
Configuration module for the Memecraft backend.

This module handles all environment variable loading and configuration settings.
All external dependencies (API URLs, credentials) are configured here.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All sensitive values and external endpoints should be configured
    via environment variables or a .env file.
    """

    # ==========================================================================
    # APPLICATION SETTINGS
    # ==========================================================================

    APP_NAME: str = "Memecraft Backend"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Default page size for GET /api/memes/recent
    RECENT_MEMES_LIMIT: int = 12

    # ==========================================================================
    # IMGFLIP SETTINGS (template catalog + caption rendering)
    # ==========================================================================

    IMGFLIP_API_URL: str = "https://api.imgflip.com"

    # Imgflip renders captions only for registered accounts.
    # Sign up at https://imgflip.com/signup and put the credentials in .env
    IMGFLIP_USERNAME: str = ""
    IMGFLIP_PASSWORD: str = ""

    # Timeout for Imgflip API calls (in seconds)
    IMGFLIP_TIMEOUT: int = 30

    # ==========================================================================
    # GEMINI SETTINGS (AI caption text)
    # ==========================================================================

    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-1.5-flash"

    # Timeout for Gemini API calls (in seconds)
    GEMINI_TIMEOUT: int = 60

    # ==========================================================================
    # CORS SETTINGS
    # ==========================================================================

    # Comma-separated list of allowed frontend origins
    # Example: "https://memes.example.com,https://www.memes.example.com"
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS string into a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def imgflip_configured(self) -> bool:
        return bool(self.IMGFLIP_USERNAME and self.IMGFLIP_PASSWORD)

    @property
    def gemini_configured(self) -> bool:
        return bool(self.GEMINI_API_KEY)

    class Config:
        # Load settings from .env file if it exists
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once
    and reused across the application.

    Returns:
        Settings: The application settings instance
    """
    return Settings()
