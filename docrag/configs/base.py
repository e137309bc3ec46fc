"""
Service-level configuration settings.

Process-wide settings shared by the HTTP server: log level, bind address
and CORS origins. Inherited by the aggregated Settings class.

Dependencies: pydantic_settings
System role: Server and logging configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    """HTTP server and logging settings (unprefixed environment variables)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    api_host: str = Field(default="0.0.0.0", description="Address uvicorn binds to")
    api_port: int = Field(default=8000, ge=1, le=65535, description="Port uvicorn listens on")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API",
    )
