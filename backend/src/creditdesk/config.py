"""Application configuration using pydantic-settings."""
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_VERSION = "0.1.0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./database/credit-data.db",
        description="SQLAlchemy async connection string for the embedded database",
    )
    sql_echo: bool = Field(default=False, description="Echo SQL statements to the log")

    # Application Configuration
    app_env: str = Field(default="development", description="Application environment (development/production)")
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=True, description="Enable debug mode")
    host: str = Field(default="127.0.0.1", description="Interface the embedded server binds to")
    port: int = Field(default=3001, description="Port the embedded server listens on")

    # CORS Configuration
    cors_origins: List[str] = Field(
        default=["http://localhost:3001", "http://127.0.0.1:3001"],
        description="Allowed CORS origins",
    )

    # Ledger Configuration
    low_credit_threshold: int = Field(
        default=10,
        description="Balances with fewer remaining credits than this are reported as alerts",
    )
    open_ended_expiration: str = Field(
        default="9999-12-31",
        description="Expiration date stored for subscriptions created without one",
    )


# Global settings instance
settings = Settings()
