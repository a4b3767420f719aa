"""
Sheets Gateway Factory

Provides a single entry point for obtaining the spreadsheet backend.
Automatically selects local workbooks or the Apps Script web app based
on ENV_MODE configuration.

Usage:
    from cafe.services.sheets import get_sheets_gateway

    gateway = get_sheets_gateway()
    decoded = await gateway.get_orders()

Author: Khalil Bannouri
Version: 4.0.0
"""

import logging
from functools import lru_cache

from cafe.core.config import get_settings
from cafe.services.sheets.base import BaseSheetsGateway
from cafe.services.sheets.apps_script import AppsScriptGateway
from cafe.services.sheets.workbook import (
    WorkbookGateway,
    MENU_COLUMNS,
    ORDER_COLUMNS,
)

logger = logging.getLogger(__name__)


@lru_cache()
def get_sheets_gateway() -> BaseSheetsGateway:
    """
    Get the configured sheets gateway instance.

    Returns:
        BaseSheetsGateway: WorkbookGateway in development,
        AppsScriptGateway in staging and production
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Sheets Gateway: Using WorkbookGateway (development mode)")
        return WorkbookGateway()
    else:
        logger.info(
            f"Sheets Gateway: Using AppsScriptGateway "
            f"({settings.env_mode.value} mode)"
        )
        return AppsScriptGateway()


def reset_sheets_gateway() -> None:
    """
    Clear the cached gateway instance.

    Useful for testing or when configuration changes at runtime.
    """
    get_sheets_gateway.cache_clear()
    logger.debug("Sheets gateway cache cleared")


__all__ = [
    "get_sheets_gateway",
    "reset_sheets_gateway",
    "BaseSheetsGateway",
    "AppsScriptGateway",
    "WorkbookGateway",
    "MENU_COLUMNS",
    "ORDER_COLUMNS",
]
