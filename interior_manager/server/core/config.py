"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
All values are bound from environment variables and the .env file; grouped
configurations (database, sessions, push, CORS) are exposed as properties.
"""

import re
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str = Field(
        default="sqlite+aiosqlite:///./interior_manager.db",
        alias="DATABASE_URL",
        description="Async SQLAlchemy connection URL",
    )
    echo: bool = Field(default=False, alias="DATABASE_ECHO", description="Log all SQL statements")

    model_config = {"populate_by_name": True}

    @property
    def async_url(self) -> str:
        """Connection URL with Postgres variants rewritten to the asyncpg driver."""
        return re.sub(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://", "postgresql+asyncpg://", self.url, count=1)


class SessionConfig(BaseModel):
    """Login session configuration."""

    days: int = Field(default=14, alias="SESSION_DAYS", description="Lifetime of a login session in days")
    cookie_name: str = Field(
        default="session_token", alias="SESSION_COOKIE_NAME", description="Cookie carrying the session token"
    )
    cookie_secure: bool = Field(
        default=False, alias="SESSION_COOKIE_SECURE", description="Only send the session cookie over HTTPS"
    )

    model_config = {"populate_by_name": True}


class OneSignalConfig(BaseModel):
    """OneSignal push notification configuration."""

    app_id: Optional[str] = Field(default=None, alias="ONESIGNAL_APP_ID", description="OneSignal application ID")
    api_key: Optional[str] = Field(
        default=None, alias="ONESIGNAL_REST_API_KEY", description="OneSignal REST API key"
    )
    api_url: str = Field(
        default="https://onesignal.com/api/v1/notifications",
        alias="ONESIGNAL_API_URL",
        description="OneSignal notifications endpoint",
    )
    max_retries: int = Field(default=3, alias="ONESIGNAL_MAX_RETRIES", description="Retries on transient failures")

    model_config = {"populate_by_name": True}

    @property
    def configured(self) -> bool:
        return bool(self.app_id and self.api_key)


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="Server host address to bind to",
        alias="INTERIOR_MANAGER_SERVER_HOST",
    )
    server_port: int = Field(
        default=8000,
        description="Server port number",
        alias="INTERIOR_MANAGER_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="INTERIOR_MANAGER_LOG_LEVEL",
    )
    app_url: str = Field(
        default="http://localhost:3000",
        description="Public base URL of the web app, used for notification deep links",
        alias="APP_URL",
    )

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./interior_manager.db",
        description="Async connection URL for the application database",
        alias="DATABASE_URL",
    )
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # =====================================================================
    # Sessions
    # =====================================================================
    session_days: int = Field(default=14, alias="SESSION_DAYS")
    session_cookie_name: str = Field(default="session_token", alias="SESSION_COOKIE_NAME")
    session_cookie_secure: bool = Field(default=False, alias="SESSION_COOKIE_SECURE")

    # =====================================================================
    # Push Notifications
    # =====================================================================
    onesignal_app_id: Optional[str] = Field(default=None, alias="ONESIGNAL_APP_ID")
    onesignal_rest_api_key: Optional[str] = Field(default=None, alias="ONESIGNAL_REST_API_KEY")
    onesignal_api_url: str = Field(
        default="https://onesignal.com/api/v1/notifications", alias="ONESIGNAL_API_URL"
    )
    onesignal_max_retries: int = Field(default=3, alias="ONESIGNAL_MAX_RETRIES")

    # =====================================================================
    # CORS
    # =====================================================================
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def database(self) -> DatabaseConfig:
        """Get database configuration from environment variables."""
        return DatabaseConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def session(self) -> SessionConfig:
        """Get login session configuration from environment variables."""
        return SessionConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def onesignal(self) -> OneSignalConfig:
        """Get OneSignal configuration from environment variables."""
        return OneSignalConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
