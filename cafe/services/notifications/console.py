"""
Console Notifier

Terminal rendition of the web UI feedback: the new-order cue rings the
terminal bell, notices are printed with a status prefix and logged.

Author: Khalil Bannouri
Version: 4.0.0
"""

import logging
import sys
from typing import TextIO, Optional

from cafe.services.notifications.base import BaseNotifier, NoticeLevel

logger = logging.getLogger(__name__)

PREFIXES = {
    NoticeLevel.SUCCESS: "✅",
    NoticeLevel.ERROR: "❌",
    NoticeLevel.INFO: "ℹ️",
}


class ConsoleNotifier(BaseNotifier):
    """Bell and printed notices on a text stream."""

    def __init__(self, stream: Optional[TextIO] = None, bell: bool = True):
        self.stream = stream or sys.stdout
        self.bell = bell

    @property
    def provider_name(self) -> str:
        return "console"

    def new_order_cue(self) -> None:
        if self.bell:
            self.stream.write("\a")
        self.stream.write("🔔 New order received\n")
        self.stream.flush()

    def notice(self, message: str, level: NoticeLevel = NoticeLevel.INFO) -> None:
        if level == NoticeLevel.ERROR:
            logger.warning(message)
        else:
            logger.info(message)
        self.stream.write(f"{PREFIXES[level]} {message}\n")
        self.stream.flush()
