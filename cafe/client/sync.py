"""
Order Synchronization Engine

Keeps the admin's view of the order list consistent with the sheet
while giving immediate feedback on completion toggles.

State:
    orders: last successfully fetched list (None until the first fetch)
    seen_order_ids: grows only; an order outside it is "new"
    pending_update_order_ids: orders with a toggle in flight

Consistency is eventual and last-write-wins. Two staff members toggling
the same order race; there is no version check.

Author: Khalil Bannouri
Version: 4.0.0
"""

import logging
from typing import Optional

from cafe.client.api import CafeApiClient
from cafe.client.optimistic import OptimisticUpdate
from cafe.client.polling import PolledView
from cafe.client.store import LocalStore
from cafe.client.summaries import UserTotal, summarize_by_user
from cafe.core.config import get_settings
from cafe.core.exceptions import CafeError
from cafe.models import Order
from cafe.services.notifications import BaseNotifier

logger = logging.getLogger(__name__)

SOUND_ENABLED_KEY = "cafe-admin-sound"


class OrderSyncEngine(PolledView):
    """
    Admin-side order list with new-order detection and optimistic toggles.

    Example:
        >>> engine = OrderSyncEngine(api, notifier=ConsoleNotifier())
        >>> engine.start()                       # refresh now, then every 5s
        >>> await engine.toggle_completion(order, order.completed)
        >>> await engine.close()
    """

    poll_name = "admin orders"

    def __init__(
        self,
        api: CafeApiClient,
        notifier: Optional[BaseNotifier] = None,
        store: Optional[LocalStore] = None,
        poll_interval: Optional[float] = None,
    ):
        super().__init__(poll_interval or get_settings().admin_poll_seconds)
        self.api = api
        self.notifier = notifier
        self.store = store

        self._orders: Optional[list[Order]] = None
        self._last_order_count: Optional[int] = None
        self._sound_enabled = store.get_bool(SOUND_ENABLED_KEY, default=False) if store else False

        self.seen_order_ids: set[str] = set()
        self.pending_update_order_ids: set[str] = set()

    # -------------------------------------------------------------------------
    # State views
    # -------------------------------------------------------------------------

    @property
    def orders(self) -> list[Order]:
        return list(self._orders or [])

    @property
    def loaded(self) -> bool:
        return self._orders is not None

    @property
    def sound_enabled(self) -> bool:
        return self._sound_enabled

    @sound_enabled.setter
    def sound_enabled(self, value: bool) -> None:
        self._sound_enabled = bool(value)
        if self.store:
            self.store.set_bool(SOUND_ENABLED_KEY, self._sound_enabled)

    def is_new(self, order: Order) -> bool:
        return order.order_id not in self.seen_order_ids

    @property
    def new_orders(self) -> list[Order]:
        return [order for order in self.orders if self.is_new(order)]

    @property
    def pending_orders(self) -> list[Order]:
        """Orders still to be served (not completed)."""
        return [order for order in self.orders if not order.completed]

    @property
    def completed_orders(self) -> list[Order]:
        return [order for order in self.orders if order.completed]

    def user_totals(self) -> list[UserTotal]:
        return summarize_by_user(self.orders)

    # -------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------

    async def refresh(self) -> list[Order]:
        """
        Fetch the full order list and replace the local copy.

        On failure the previous list is kept, ``error`` holds the message
        and the error is re-raised for the caller to retry.

        Raises:
            CafeError: Network, decode or backend failure
        """
        try:
            fetched = await self.api.get_orders()
        except CafeError as e:
            if not self._closed:
                self.error = e.message
            raise

        if self._closed:
            logger.debug("Engine closed; discarding fetched orders")
            return self.orders

        self._apply(fetched)
        self.error = None
        return self.orders

    def _apply(self, fetched: list[Order]) -> None:
        previous = self._orders

        if previous is None:
            # Cold start: nothing is new
            self.seen_order_ids.update(order.order_id for order in fetched)
        else:
            previous_ids = {order.order_id for order in previous}
            self.seen_order_ids.update(
                order.order_id for order in fetched if order.order_id in previous_ids
            )

        if self.pending_update_order_ids and previous:
            optimistic = {
                order.order_id: order.completed
                for order in previous
                if order.order_id in self.pending_update_order_ids
            }
            fetched = [
                order.with_completed(optimistic[order.order_id])
                if order.order_id in optimistic else order
                for order in fetched
            ]

        count = len(fetched)
        if self._last_order_count is not None and count > self._last_order_count:
            logger.info(f"New orders: {self._last_order_count} -> {count}")
            if self._sound_enabled and self.notifier:
                self.notifier.new_order_cue()
        self._last_order_count = count

        self._orders = fetched

    # -------------------------------------------------------------------------
    # Completion toggle
    # -------------------------------------------------------------------------

    def _set_completed(self, order_id: str, completed: bool) -> None:
        if self._closed or self._orders is None:
            return
        self._orders = [
            order.with_completed(completed) if order.order_id == order_id else order
            for order in self._orders
        ]

    async def toggle_completion(self, order: Order, current_completed: bool) -> bool:
        """
        Flip an order's completed flag, optimistically.

        Args:
            order: The order the operator clicked
            current_completed: The flag as displayed when clicked

        Returns:
            bool: True if the backend accepted the change. On False the
            local flag is back at ``current_completed``.
        """
        order_id = order.order_id
        if order_id in self.pending_update_order_ids:
            logger.warning(f"Toggle for {order_id} ignored; update already in flight")
            return False

        target = not current_completed
        update = OptimisticUpdate(
            read=lambda: current_completed,
            write=lambda value: self._set_completed(order_id, value),
        )

        self.pending_update_order_ids.add(order_id)
        try:
            await update.run(
                target,
                lambda: self.api.update_order_status(order_id, target),
            )
        except CafeError as e:
            logger.error(f"Failed to update order {order_id}: {e}")
            self._notify_error(f"Failed to update order: {e.message}")
            return False
        finally:
            self.pending_update_order_ids.discard(order_id)

        if self._closed:
            return True

        if target:
            # Completing an order acknowledges it
            self.seen_order_ids.add(order_id)
            self._notify_success(f"{order.item} marked as completed")
        else:
            self._notify_success(f"{order.item} moved back to pending")
        return True

    def _notify_success(self, message: str) -> None:
        if self.notifier:
            self.notifier.success(message)

    def _notify_error(self, message: str) -> None:
        if self.notifier and not self._closed:
            self.notifier.error(message)
