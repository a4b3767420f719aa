"""
Patron Order History

The patron's own orders, refreshed every 30 seconds and on demand.
"""

import logging
from typing import Optional

from cafe.client.api import CafeApiClient
from cafe.client.polling import PolledView
from cafe.core.config import get_settings
from cafe.core.exceptions import CafeError
from cafe.models import Order, UserIdentity

logger = logging.getLogger(__name__)


class OrderHistory(PolledView):
    poll_name = "order history"

    def __init__(
        self,
        api: CafeApiClient,
        identity: UserIdentity,
        poll_interval: Optional[float] = None,
    ):
        super().__init__(poll_interval or get_settings().history_poll_seconds)
        self.api = api
        self.identity = identity
        self.orders: list[Order] = []

    async def refresh(self) -> list[Order]:
        try:
            orders = await self.api.get_orders()
        except CafeError as e:
            if not self._closed:
                self.error = e.message
            raise

        if not self._closed:
            self.orders = [order for order in orders if order.user_id == self.identity.user_id]
            self.error = None
        return self.orders

    @property
    def total_amount(self) -> int:
        return sum(order.price for order in self.orders)
