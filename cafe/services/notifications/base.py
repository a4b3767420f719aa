"""
Notifier Abstract Base Class

Defines the interface for staff- and patron-facing feedback:
the audible cue when new orders arrive, and short notices
(the web UI's toasts) for successes and failures.

Author: Khalil Bannouri
Version: 4.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass
class Notice:
    """One user-visible message."""
    message: str
    level: NoticeLevel = NoticeLevel.INFO


class BaseNotifier(ABC):
    """Abstract base class for notifiers."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    def new_order_cue(self) -> None:
        """Play the new-order sound."""
        pass

    @abstractmethod
    def notice(self, message: str, level: NoticeLevel = NoticeLevel.INFO) -> None:
        """Show a short message to the user."""
        pass

    def success(self, message: str) -> None:
        self.notice(message, NoticeLevel.SUCCESS)

    def error(self, message: str) -> None:
        self.notice(message, NoticeLevel.ERROR)
