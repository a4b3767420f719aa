"""
Menu Catalog

Read-only snapshot of the menu, replaced wholesale on each successful
fetch. A failed fetch keeps the last good snapshot.
"""

import logging
from typing import Optional

from cafe.client.api import CafeApiClient
from cafe.client.polling import PolledView
from cafe.core.config import get_settings
from cafe.core.exceptions import CafeError
from cafe.models import CATEGORY_ORDER, MenuItem
from cafe.services.notifications import BaseNotifier

logger = logging.getLogger(__name__)


class MenuCatalog(PolledView):
    poll_name = "menu"

    def __init__(
        self,
        api: CafeApiClient,
        notifier: Optional[BaseNotifier] = None,
        poll_interval: Optional[float] = None,
    ):
        super().__init__(poll_interval or get_settings().menu_poll_seconds)
        self.api = api
        self.notifier = notifier
        self.items: list[MenuItem] = []

    async def refresh(self) -> list[MenuItem]:
        """
        Replace the snapshot with a fresh fetch.

        Raises:
            CafeError: The fetch failed; ``items`` is untouched and
            ``error`` holds the message
        """
        try:
            items = await self.api.get_menu_items()
        except CafeError as e:
            if not self._closed:
                self.error = e.message
                if self.notifier:
                    self.notifier.error(e.message)
            raise

        if not self._closed:
            self.items = items
            self.error = None
        return self.items

    def find(self, name: str) -> Optional[MenuItem]:
        return next((item for item in self.items if item.name == name), None)

    def by_category(self) -> dict[str, list[MenuItem]]:
        """Items grouped into the fixed sections, empty sections omitted."""
        grouped: dict[str, list[MenuItem]] = {section: [] for section in CATEGORY_ORDER}
        for item in self.items:
            grouped[item.section].append(item)
        return {section: items for section, items in grouped.items() if items}
