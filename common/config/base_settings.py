"""
Base settings class for environment configuration.

Uses Pydantic Settings for automatic environment variable loading.
Extend this class for application-specific settings.

Example:
    from common.config import BaseAppSettings

    class Settings(BaseAppSettings):
        # App-specific settings
        ASSISTANT_API_URL: str = ""

    settings = Settings()
    print(settings.FIREBASE_DATABASE_URL)
"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseAppSettings(BaseSettings):
    """
    Base settings class with common configuration options.

    Automatically loads values from environment variables.
    Extend this class for application-specific settings.
    """

    # ==========================================================================
    # Firebase Settings
    # ==========================================================================
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_DATABASE_URL: Optional[str] = None  # Realtime Database URL
    FIREBASE_API_KEY: Optional[str] = None

    # ==========================================================================
    # Local Storage Settings
    # ==========================================================================
    LOCAL_STORAGE_DIR: str = ".campverse_storage"

    # ==========================================================================
    # Server Settings
    # ==========================================================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # local, development, staging, production
    LOG_LEVEL: str = "INFO"

    # CORS Settings
    CORS_ORIGINS: str = "*"  # Comma-separated origins or "*"
    CORS_ALLOW_CREDENTIALS: bool = True

    # ==========================================================================
    # Pydantic Settings Configuration
    # ==========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",  # Allow app-specific settings
        case_sensitive=True,
    )

    def get_cors_origins(self) -> list:
        """Parse CORS_ORIGINS into a list."""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT.lower() in ("development", "local")

    def is_local(self) -> bool:
        """Check if running in local-only mode (no remote stores)."""
        return self.ENVIRONMENT.lower() == "local"

    def has_firebase_database(self) -> bool:
        """Check if a Firebase Realtime Database is configured."""
        return bool(self.FIREBASE_DATABASE_URL)

    def validate_required(self) -> None:
        """
        Validate that required settings are configured.

        Raises:
            ValueError: If required settings are missing
        """
        errors = []

        if self.is_production():
            if not self.FIREBASE_CREDENTIALS_PATH and not self.FIREBASE_PROJECT_ID:
                errors.append(
                    "FIREBASE_CREDENTIALS_PATH or FIREBASE_PROJECT_ID is required in production"
                )
            if not self.FIREBASE_DATABASE_URL:
                errors.append("FIREBASE_DATABASE_URL is required in production")

        if errors:
            raise ValueError("Configuration errors:\n- " + "\n- ".join(errors))
