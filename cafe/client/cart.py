"""
Cart

Session-only cart. Lines are keyed by menu item name.
"""

import logging
from typing import Optional

from cafe.models import CartItem, MenuItem

logger = logging.getLogger(__name__)


class Cart:
    def __init__(self):
        self.items: list[CartItem] = []

    def _find(self, name: str) -> Optional[CartItem]:
        return next((line for line in self.items if line.name == name), None)

    def add(self, item: MenuItem) -> CartItem:
        """
        Add one unit of a menu item.

        Raises:
            ValueError: The item is out of stock
        """
        if not item.in_stock:
            raise ValueError(f"{item.name} is out of stock")

        line = self._find(item.name)
        if line:
            line.quantity += 1
        else:
            line = CartItem(name=item.name, price=item.price)
            self.items.append(line)

        logger.debug(f"Cart: {item.name} x{line.quantity}")
        return line

    def remove(self, name: str) -> None:
        self.items = [line for line in self.items if line.name != name]

    def update_quantity(self, name: str, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            self.remove(name)
            return
        line = self._find(name)
        if line:
            line.quantity = quantity

    def decrement(self, name: str, units: int = 1) -> None:
        line = self._find(name)
        if line:
            self.update_quantity(name, line.quantity - units)

    def snapshot(self) -> list[CartItem]:
        return [CartItem(name=line.name, price=line.price, quantity=line.quantity) for line in self.items]

    def clear(self) -> None:
        self.items = []

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_price(self) -> int:
        return sum(line.line_total for line in self.items)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)
