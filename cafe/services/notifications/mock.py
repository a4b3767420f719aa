"""
Mock Notifier

Records cues and notices instead of playing or printing them.
Used in development and by the tests.

Author: Khalil Bannouri
Version: 4.0.0
"""

import logging

from cafe.services.notifications.base import BaseNotifier, Notice, NoticeLevel

logger = logging.getLogger(__name__)


class MockNotifier(BaseNotifier):
    """Notifier that only remembers what it was asked to do."""

    def __init__(self):
        self.cue_count = 0
        self.notices: list[Notice] = []

    @property
    def provider_name(self) -> str:
        return "mock"

    def new_order_cue(self) -> None:
        self.cue_count += 1
        logger.info(f"Mock new-order cue (#{self.cue_count})")

    def notice(self, message: str, level: NoticeLevel = NoticeLevel.INFO) -> None:
        self.notices.append(Notice(message=message, level=level))
        logger.info(f"Mock notice [{level.value}]: {message}")

    @property
    def errors(self) -> list[str]:
        return [n.message for n in self.notices if n.level == NoticeLevel.ERROR]
