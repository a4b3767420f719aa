"""
Notifier Factory

Returns Mock or Console notifier based on ENV_MODE.

Author: Khalil Bannouri
Version: 4.0.0
"""

import logging
from functools import lru_cache

from cafe.core.config import get_settings
from cafe.services.notifications.base import (
    BaseNotifier,
    Notice,
    NoticeLevel,
)
from cafe.services.notifications.mock import MockNotifier
from cafe.services.notifications.console import ConsoleNotifier

logger = logging.getLogger(__name__)


@lru_cache()
def get_notifier() -> BaseNotifier:
    """Get the configured notifier."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Notifier: Using MockNotifier (development mode)")
        return MockNotifier()
    else:
        logger.info(f"Notifier: Using ConsoleNotifier ({settings.env_mode.value} mode)")
        return ConsoleNotifier()


def reset_notifier() -> None:
    """Clear the cached notifier instance."""
    get_notifier.cache_clear()


__all__ = [
    "get_notifier",
    "reset_notifier",
    "BaseNotifier",
    "Notice",
    "NoticeLevel",
    "MockNotifier",
    "ConsoleNotifier",
]
