"""Centralized configuration management with environment-aware defaults.

Settings are loaded with Pydantic Settings, giving type-safe values that can be
overridden from environment variables or a ``.env`` file.

Configuration sources (in order of precedence):
1. Environment variables
2. .env file in project root
3. Default values in model definitions
4. Environment-based defaults (production vs development)
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogConfig(BaseModel):
    """Logging configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_formatter_type: Literal["console", "json"] | None = Field(
        default=None,
        description="Log output formatter. Auto-detected if not specified.",
    )


class Settings(BaseSettings):
    """Main settings class for a restful service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        env_nested_delimiter="__",
    )

    # Application settings
    app_name: str = Field(default="Restful", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment the service is running in",
    )
    debug: bool = Field(default=False, description="Debug mode flag")

    # API settings
    api_host: str = Field(default="127.0.0.1", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Routing settings
    # The 307 redirect is answered by the router before any endpoint runs, so it
    # has no request id and no "Request received"/"Response sent" lines
    redirect_slashes: bool = Field(
        default=True,
        description="Redirect '/root' to '/root/' when only the latter is routed",
    )
    strict_routes: bool = Field(
        default=False,
        description="Reject registration of a path that is already routed",
    )

    # Logging configuration
    log_config: LogConfig = Field(
        default_factory=LogConfig, description="Logging configuration"
    )

    def model_post_init(self, __context: object) -> None:
        """Post initialization to set environment-based defaults."""
        super().model_post_init(__context)

        if self.log_config.log_formatter_type is None:
            self.log_config.log_formatter_type = self._detect_formatter()

    def _detect_formatter(self) -> Literal["console", "json"]:
        """Auto-detect log formatter based on environment."""
        # Container platforms collect stdout as structured logs
        if os.getenv("K_SERVICE") or os.getenv("AWS_EXECUTION_ENV"):
            return "json"

        if self.environment == "development":
            return "console"
        return "json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
