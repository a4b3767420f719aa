"""
Checkout Summaries

Per-user totals for the checkout screen and the admin "by user" tab.
"""

from dataclasses import dataclass, field

from cafe.models import Order


@dataclass
class UserTotal:
    user_id: str
    nickname: str
    animal: str
    total: int = 0
    orders: list[Order] = field(default_factory=list)


def summarize_by_user(orders: list[Order]) -> list[UserTotal]:
    """Group orders by user, in order of each user's first order."""
    totals: dict[str, UserTotal] = {}
    for order in orders:
        summary = totals.get(order.user_id)
        if summary is None:
            summary = totals[order.user_id] = UserTotal(
                user_id=order.user_id,
                nickname=order.nickname,
                animal=order.animal,
            )
        summary.total += order.price
        summary.orders.append(order)
    return list(totals.values())


def grand_total(totals: list[UserTotal]) -> int:
    return sum(summary.total for summary in totals)
