"""
Configuration management using Pydantic Settings.

This module provides type-safe, validated configuration loading from environment
variables. Every setting has a default so a bare checkout can serve
``openapi.yaml`` with controllers from the ``controllers`` package.

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic

Usage:
    from src.core.config import get_settings

    settings = get_settings()
    document_path = settings.openapi_file_path

    # Environment detection
    if settings.is_development:
        # Dev-specific behavior
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.enums import Environment


class Settings(BaseSettings):
    """
    Main application settings (flat structure).

    Configuration precedence:
        1. Explicit keyword arguments (tests, embedding applications)
        2. Environment variables
        3. Default values

    Returns:
        Settings: Application configuration loaded from environment.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )

    # Core application settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode (detailed tracebacks from the engine)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Application metadata
    app_name: str = Field(
        default="OpenAPI Router",
        description="Application name (used when the document has no title)",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    api_base_url: str = Field(
        default="http://localhost:8000",
        description="Public base URL, used for RFC 9457 problem type URIs",
    )

    # OpenAPI routing
    openapi_file_path: str = Field(
        default="openapi.yaml",
        description="Path to the OpenAPI 3 document (YAML or JSON)",
    )
    controllers_package: str = Field(
        default="controllers",
        description="Importable package holding the x-controller modules",
    )
    openapi_url_path: str = Field(
        default="/docs",
        description="Mount path of the interactive documentation UI",
    )
    validate_responses: bool = Field(
        default=True,
        description="Reject handler results that break the 200 response schema",
    )

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Normalize and validate the log level name.

        Args:
            v: Level name in any case.

        Returns:
            str: Upper-cased level name.

        Raises:
            ValueError: If the name is not a standard logging level.
        """
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"log_level must be a standard logging level, got {v!r}")
        return level

    @field_validator("api_base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """
        Remove trailing slashes from URLs.

        Args:
            v: URL string.

        Returns:
            str: URL without trailing slash.
        """
        return v.rstrip("/")

    @field_validator("openapi_url_path")
    @classmethod
    def normalize_docs_path(cls, v: str) -> str:
        """
        Ensure the docs path is absolute and has no trailing slash.

        Args:
            v: Mount path (e.g. "docs", "/docs/").

        Returns:
            str: Normalized path (e.g. "/docs").
        """
        path = "/" + v.strip("/")
        return path

    @property
    def is_development(self) -> bool:
        """
        Check if running in development environment.

        Returns:
            bool: True if environment is DEVELOPMENT, False otherwise.
        """
        return self.environment == Environment.DEVELOPMENT

    @property
    def uses_json_logs(self) -> bool:
        """
        Check if logs should be rendered as JSON.

        Returns:
            bool: True outside of development.
        """
        return self.environment != Environment.DEVELOPMENT


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once per process.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()
