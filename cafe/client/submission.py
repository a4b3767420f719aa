"""
Order Submission

A cart becomes one order per unit of quantity, posted one at a time.
All units share the timestamp taken when submission starts.

Submission is not atomic. If a post fails the loop stops; units already
written stay written and are taken out of the cart, so the cart keeps
exactly what still needs sending.

Author: Khalil Bannouri
Version: 4.0.0
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from cafe.client.api import CafeApiClient
from cafe.client.cart import Cart
from cafe.core.exceptions import CafeError
from cafe.models import Order, UserIdentity, generate_order_id
from cafe.services.notifications import BaseNotifier

logger = logging.getLogger(__name__)


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class SubmissionResult:
    """Outcome for the whole cart."""
    success: bool
    total_units: int = 0
    submitted: list[Order] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def submitted_units(self) -> int:
        return len(self.submitted)


async def submit_cart(
    api: CafeApiClient,
    cart: Cart,
    identity: UserIdentity,
    notifier: Optional[BaseNotifier] = None,
    clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
) -> SubmissionResult:
    """
    Post every unit in the cart.

    Args:
        api: Proxy client
        cart: Cart to submit; cleared on success
        identity: Who is ordering
        notifier: Receives the success/failure notice
        clock: Source of the shared timestamp

    Returns:
        SubmissionResult: success only if every unit was accepted
    """
    lines = cart.snapshot()
    if not lines:
        return SubmissionResult(success=False, error="Add items to the cart first")

    timestamp = iso_timestamp(clock())
    total_units = sum(line.quantity for line in lines)
    submitted: list[Order] = []

    logger.info(f"Submitting {total_units} units for {identity.user_id} at {timestamp}")

    try:
        for line in lines:
            for _ in range(line.quantity):
                order = Order(
                    order_id=generate_order_id(),
                    timestamp=timestamp,
                    user_id=identity.user_id,
                    nickname=identity.nickname,
                    animal=identity.animal,
                    item=line.name,
                    price=line.price,
                )
                await api.add_order(order)
                submitted.append(order)

    except CafeError as e:
        logger.error(
            f"Submission stopped after {len(submitted)}/{total_units} units: {e}"
        )
        for order in submitted:
            cart.decrement(order.item)
        if notifier:
            notifier.error(f"Failed to send order: {e.message}")
        return SubmissionResult(
            success=False,
            total_units=total_units,
            submitted=submitted,
            error=e.message,
        )

    cart.clear()
    if notifier:
        notifier.success("Order sent!")
    logger.info(f"Submitted {total_units} units for {identity.user_id}")
    return SubmissionResult(success=True, total_units=total_units, submitted=submitted)
