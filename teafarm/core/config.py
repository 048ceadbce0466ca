"""
Configuration management using Pydantic Settings.

This module defines the Settings class that loads configuration from
environment variables and .env files.
"""

from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = Field(default="Tea Farm Operations", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Log level for scripts and the server")

    # REST client
    api_base_url: str = Field(
        default="http://localhost:8080/api",
        description="Base URL of the REST backend",
    )
    request_timeout: float = Field(
        default=10.0, gt=0, description="Timeout in seconds for one request"
    )
    credentials_path: Path = Field(
        default=Path.home() / ".teafarm" / "credentials.json",
        description="File holding the persisted bearer token and user",
    )
    login_path: str = Field(default="/login", description="Login entry point")
    export_dir: Path = Field(default=Path("exports"), description="CSV export directory")

    # Reference backend
    api_prefix: str = Field(default="/api", description="Backend route prefix")
    jwt_secret_key: str = Field(
        default="change-me-in-production", description="HS256 signing secret"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(
        default=60 * 24, gt=0, description="Lifetime of issued tokens"
    )

    # CORS
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:3000"],
        description="CORS allowed origins",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> Any:
        """Parse CORS origins from environment variable."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = SettingsConfigDict(
        env_prefix="TEAFARM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global Settings instance.

    Returns:
        Settings: The application settings

    Raises:
        ValidationError: If environment variables are invalid
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
