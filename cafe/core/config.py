"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports two modes:
    - DEVELOPMENT: Uses the local workbook gateway (no Apps Script needed)
    - PRODUCTION: Forwards to the Google Apps Script web app

The ENV_MODE variable controls which sheets gateway is instantiated by
the proxy, enabling seamless switching between local testing and the
spreadsheet-backed deployment.

Usage:
    from cafe.core.config import get_settings

    settings = get_settings()
    if settings.is_development:
        # Local workbooks
    else:
        # Apps Script upstream

Author: Khalil Bannouri
Version: 4.0.0
"""

import logging
import sys
from enum import Enum
from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing against workbook files
        PRODUCTION: Live environment backed by the Apps Script web app
        STAGING: Pre-production testing against a copy of the sheets
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    The script URL and sheet IDs identify private spreadsheets and should
    NEVER be committed to version control.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging and error details

        # API Configuration
        api_host: Host to bind the proxy server
        api_port: Port for the proxy server

        # Spreadsheet upstream (required outside development)
        google_script_url: Deployed Apps Script web app URL
        menu_sheet_id: Spreadsheet ID holding the menu
        order_sheet_id: Spreadsheet ID holding the orders

        # Client
        client_base_url: Proxy URL used by the client package
        admin_poll_seconds: Admin order refresh cadence
        history_poll_seconds: Patron order-history refresh cadence
        admin_nickname: Nickname that designates staff
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Private Cafe Orders",
        description="Application display name"
    )
    app_version: str = Field(
        default="4.0.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=8001,
        description="API server port"
    )

    # ==========================================================================
    # GOOGLE APPS SCRIPT UPSTREAM
    # ==========================================================================

    google_script_url: Optional[str] = Field(
        default=None,
        description="Apps Script web app URL (https://script.google.com/macros/s/.../exec)"
    )
    menu_sheet_id: Optional[str] = Field(
        default=None,
        description="Spreadsheet ID of the menu sheet"
    )
    order_sheet_id: Optional[str] = Field(
        default=None,
        description="Spreadsheet ID of the order sheet"
    )
    upstream_timeout_seconds: float = Field(
        default=15.0,
        description="Timeout for calls to the Apps Script web app"
    )

    # ==========================================================================
    # FILE STORAGE (development workbooks)
    # ==========================================================================

    data_directory: str = Field(
        default="data",
        description="Directory for data files"
    )
    menu_workbook: str = Field(
        default="menu.xlsx",
        description="Development menu workbook filename"
    )
    orders_workbook: str = Field(
        default="orders.xlsx",
        description="Development orders workbook filename"
    )
    workbook_lock_timeout: int = Field(
        default=30,
        description="Seconds to wait for file lock"
    )

    # ==========================================================================
    # CLIENT
    # ==========================================================================

    client_base_url: str = Field(
        default="http://localhost:8001",
        description="Base URL of the proxy, used by the client package"
    )
    client_timeout_seconds: float = Field(
        default=20.0,
        description="Timeout for client calls to the proxy"
    )
    client_store_path: str = Field(
        default="data/cafe-client.json",
        description="Local key-value store for identity and preferences"
    )
    admin_poll_seconds: float = Field(
        default=5.0,
        description="Admin view order refresh interval"
    )
    history_poll_seconds: float = Field(
        default=30.0,
        description="Patron order-history refresh interval"
    )
    menu_poll_seconds: float = Field(
        default=60.0,
        description="Menu catalog refresh interval"
    )
    admin_nickname: str = Field(
        default="admin",
        description="Nickname that designates a staff member"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    @field_validator("google_script_url", "menu_sheet_id", "order_sheet_id", mode="before")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty environment values as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env_mode == EnvironmentMode.PRODUCTION

    @property
    def is_staging(self) -> bool:
        """Check if running in staging mode."""
        return self.env_mode == EnvironmentMode.STAGING

    @property
    def use_real_services(self) -> bool:
        """Check if the Apps Script upstream should be used."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Validate that all required upstream settings are configured.

        Returns:
            List of missing configuration keys (empty if all present)
        """
        missing = []

        if self.use_real_services:
            if not self.google_script_url:
                missing.append("GOOGLE_SCRIPT_URL")
            if not self.menu_sheet_id:
                missing.append("MENU_SHEET_ID")
            if not self.order_sheet_id:
                missing.append("ORDER_SHEET_ID")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are loaded only once,
    improving performance and ensuring consistency across
    the application lifecycle.

    Returns:
        Settings: Configured application settings

    Example:
        >>> settings = get_settings()
        >>> print(settings.env_mode)
        EnvironmentMode.DEVELOPMENT
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured root logger
    """
    settings = get_settings()

    # Set level based on debug mode
    if settings.debug:
        level = logging.DEBUG

    # Configure format
    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    # Configure root logger
    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("filelock").setLevel(logging.WARNING)

    return logging.getLogger("cafe")


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
