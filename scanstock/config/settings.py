"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management for the scanning service using Pydantic Settings.

A single cached Settings instance is shared across the application
through get_settings().

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

Scanning Behaviour:
------------------
- REQUIRED_FRAMES: consecutive identical reads needed to confirm a code
- PROMPT_ON_NEW_SCAN: offer create/edit for first-time confirmations
- EDIT_ON_DUPLICATE_SCAN: offer edit when an already-scanned code repeats

Reference Data (BigDB):
----------------------
- REFERENCE_SOURCE: local JSON path or http(s) URL with a "barcodes" array
- REFERENCE_RETRY_SECONDS: delay between background load attempts

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Server bind address
        port: Server port number
        database_url: SQLAlchemy database connection string
        reference_source: Path or URL of the reference barcode document
        reference_timeout_seconds: HTTP timeout for remote reference sources
        reference_retry_seconds: Delay between background load retries
        required_frames: Consecutive identical reads needed to confirm
        prompt_on_new_scan: Offer create/edit for newly accepted codes
        edit_on_duplicate_scan: Offer edit for already-scanned codes
        expiry_days: Days between scan date and expire date
        camera_index: Camera device index for the local live scanner
        cors_origins: Allowed CORS origins (JSON array string)

    Example:
        >>> settings = Settings()
        >>> settings.required_frames
        3
    """

    # =========================================================================
    # PYDANTIC SETTINGS CONFIGURATION
    # =========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="ScanStock",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address"
    )

    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Server port number"
    )

    # =========================================================================
    # DATABASE SETTINGS
    # =========================================================================
    database_url: str = Field(
        default="sqlite:///./storage/db/inventory.db",
        description="SQLAlchemy database connection string"
    )

    # =========================================================================
    # REFERENCE DATA SETTINGS
    # =========================================================================
    reference_source: str = Field(
        default="data/bigdb.json",
        description="Local path or http(s) URL of the reference barcode list"
    )

    reference_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="HTTP timeout when fetching a remote reference list"
    )

    reference_retry_seconds: int = Field(
        default=60,
        ge=1,
        le=3600,
        description="Delay between background reference load attempts"
    )

    # =========================================================================
    # SCANNING SETTINGS
    # =========================================================================
    required_frames: int = Field(
        default=3,
        ge=1,
        le=30,
        description="Consecutive identical reads required to confirm a code"
    )

    prompt_on_new_scan: bool = Field(
        default=True,
        description="Offer create/edit of a product for newly accepted codes"
    )

    edit_on_duplicate_scan: bool = Field(
        default=True,
        description="Offer editing the product when a code is scanned again"
    )

    camera_index: int = Field(
        default=0,
        ge=0,
        description="Camera device index for the local live scanner"
    )

    # =========================================================================
    # INVENTORY SETTINGS
    # =========================================================================
    expiry_days: int = Field(
        default=30,
        ge=0,
        le=3650,
        description="Days between scan date and expire date of a product"
    )

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: str = Field(
        default='["*"]',
        description="Allowed CORS origins as JSON array string"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """
        Validate and normalize application environment.

        Unknown values fall back to 'development'.
        """
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator("reference_source")
    @classmethod
    def validate_reference_source(cls, value: str) -> str:
        """Strip whitespace around the reference source."""
        value = value.strip()
        if not value:
            raise ValueError("reference_source cannot be empty")
        return value

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def reference_is_remote(self) -> bool:
        """True when the reference list is fetched over HTTP."""
        return self.reference_source.lower().startswith(("http://", "https://"))

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Parse CORS origins from JSON string to list.

        Returns:
            List of allowed origin strings
        """
        try:
            origins = json.loads(self.cors_origins)
            if isinstance(origins, list):
                return origins
            return ["*"]
        except json.JSONDecodeError:
            logger.warning(
                f"Invalid CORS origins JSON: {self.cors_origins}, "
                "defaulting to ['*']"
            )
            return ["*"]

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================
    def get_database_path(self) -> Optional[Path]:
        """
        Extract database file path for SQLite databases.

        Returns:
            Path to database file, or None for in-memory/non-SQLite databases
        """
        if not self.database_url.startswith("sqlite:///"):
            return None

        db_path = self.database_url.replace("sqlite:///", "")
        if not db_path or db_path == ":memory:":
            return None
        if db_path.startswith("./"):
            db_path = db_path[2:]
        return Path(db_path)

    def ensure_directories(self) -> None:
        """Create the SQLite database directory if needed."""
        db_path = self.get_database_path()
        if db_path:
            db_path.parent.mkdir(parents=True, exist_ok=True)

        logger.debug("Required directories created/verified")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"debug={self.debug}, "
            f"required_frames={self.required_frames})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance (singleton pattern).

    Returns:
        Global Settings instance
    """
    settings = Settings()

    settings.ensure_directories()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings
