"""
Domain Models

Menu items, orders, cart lines and patron identity as the client sees them.
The spreadsheet stores everything positionally, so each model knows how to
build itself from a sheet row and how to write itself back.

Menu row:  [name, price, stock, category, creator]
Order row: [orderId, timestamp, userId, nickname, animal, item, price, completed]

Author: Khalil Bannouri
Version: 4.0.0
"""

import math
import random
import string
import time
from dataclasses import dataclass, replace
from typing import Any, Optional, Union


# Avatar choices offered on the identity screen ("<emoji> <label>")
ANIMALS = [
    "🐶 Dog", "🐱 Cat", "🐰 Rabbit", "🐻 Bear", "🐼 Panda", "🐯 Tiger",
    "🦁 Lion", "🐸 Frog", "🐧 Penguin", "🐺 Wolf", "🦊 Fox",
    "🐹 Hamster", "🐨 Koala", "🐒 Monkey", "🐘 Elephant", "🦒 Giraffe",
]

# Menu sections in display order; anything else lands in "Other"
CATEGORY_ORDER = ["Food", "Dessert", "Soft Drinks", "Alcohol", "Other"]
DEFAULT_CATEGORY = "Other"

NICKNAME_MAX_LENGTH = 20

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_order_id() -> str:
    """Return a new order ID: ``order_<epoch millis>_<7 base36 chars>``."""
    suffix = "".join(random.choice(_ID_ALPHABET) for _ in range(7))
    return f"order_{int(time.time() * 1000)}_{suffix}"


def _cell(row: list, index: int) -> Any:
    return row[index] if index < len(row) else None


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value != value:  # NaN from empty sheet cells
        return ""
    return str(value).strip()


def parse_price(value: Any) -> int:
    """Parse a sheet price cell; anything unreadable is 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        number = value if isinstance(value, float) else float(_text(value))
    except (ValueError, OverflowError):
        return 0
    # NaN and infinities from odd cells
    if not math.isfinite(number):
        return 0
    return int(number)


def parse_flag(value: Any) -> bool:
    """Sheet booleans arrive as True, "TRUE" or "true"."""
    if isinstance(value, bool):
        return value
    return _text(value).lower() == "true"


def parse_stock(value: Any) -> Union[bool, int]:
    """Stock is either a flag or a remaining count."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    text = _text(value)
    if text.isdigit():
        return int(text)
    return parse_flag(text)


@dataclass(frozen=True)
class MenuItem:
    """One sellable item from the menu sheet."""
    name: str
    price: int
    stock: Union[bool, int] = True
    category: Optional[str] = None
    creator: Optional[str] = None

    @property
    def in_stock(self) -> bool:
        if isinstance(self.stock, bool):
            return self.stock
        return self.stock > 0

    @property
    def section(self) -> str:
        """Category used for grouping, folded into the known sections."""
        if self.category in CATEGORY_ORDER:
            return self.category
        return DEFAULT_CATEGORY

    @classmethod
    def from_row(cls, row: list) -> "MenuItem":
        return cls(
            name=_text(_cell(row, 0)),
            price=parse_price(_cell(row, 1)),
            stock=parse_stock(_cell(row, 2)),
            category=_text(_cell(row, 3)) or None,
            creator=_text(_cell(row, 4)) or None,
        )

    def is_valid(self) -> bool:
        return bool(self.name) and self.price > 0

    def to_row(self) -> list:
        return [self.name, self.price, self.stock, self.category or "", self.creator or ""]


@dataclass(frozen=True)
class Order:
    """
    One ordered unit. A cart line with quantity 3 becomes three Orders.

    ``order_id`` is unique for the life of the sheet and is the only key
    used for completion updates and new-order tracking.
    """
    order_id: str
    timestamp: str
    user_id: str
    nickname: str
    animal: str
    item: str
    price: int
    completed: bool = False

    @classmethod
    def from_row(cls, row: list) -> "Order":
        return cls(
            order_id=_text(_cell(row, 0)),
            timestamp=_text(_cell(row, 1)),
            user_id=_text(_cell(row, 2)),
            nickname=_text(_cell(row, 3)),
            animal=_text(_cell(row, 4)),
            item=_text(_cell(row, 5)),
            price=parse_price(_cell(row, 6)),
            completed=parse_flag(_cell(row, 7)),
        )

    def is_valid(self) -> bool:
        return bool(
            self.order_id and self.timestamp and self.user_id and self.item
        ) and self.price > 0

    def with_completed(self, completed: bool) -> "Order":
        return replace(self, completed=completed)

    def to_row(self) -> list:
        return [
            self.order_id,
            self.timestamp,
            self.user_id,
            self.nickname,
            self.animal,
            self.item,
            self.price,
            self.completed,
        ]

    def to_payload(self) -> dict[str, Any]:
        """Wire form used by ``POST /api/orders``."""
        return {
            "orderId": self.order_id,
            "timestamp": self.timestamp,
            "userId": self.user_id,
            "nickname": self.nickname,
            "animal": self.animal,
            "item": self.item,
            "price": self.price,
            "completed": self.completed,
        }


def parse_menu_rows(rows: list) -> list[MenuItem]:
    """Decode menu rows, dropping blank or unpriced entries."""
    items = [MenuItem.from_row(row) for row in rows if isinstance(row, list)]
    return [item for item in items if item.is_valid()]


def parse_order_rows(rows: list) -> list[Order]:
    """Decode order rows, dropping incomplete entries."""
    orders = [Order.from_row(row) for row in rows if isinstance(row, list)]
    return [order for order in orders if order.is_valid()]


@dataclass
class CartItem:
    """A menu item in the current session's cart."""
    name: str
    price: int
    quantity: int = 1

    @property
    def line_total(self) -> int:
        return self.price * self.quantity


def animal_label(animal: str) -> str:
    """"🐶 Dog" -> "Dog"."""
    parts = animal.split(" ", 1)
    return parts[1] if len(parts) > 1 else animal


def animal_emoji(animal: str) -> str:
    return animal.split(" ", 1)[0]


@dataclass(frozen=True)
class UserIdentity:
    """Who is ordering. Chosen freely by the patron; not authenticated."""
    user_id: str
    nickname: str
    animal: str

    @classmethod
    def create(cls, nickname: str, animal: str) -> "UserIdentity":
        """
        Build an identity from the identity-screen inputs.

        Raises:
            ValueError: Blank/too long nickname or unknown animal
        """
        nickname = nickname.strip()
        if not nickname:
            raise ValueError("Please enter a nickname")
        if len(nickname) > NICKNAME_MAX_LENGTH:
            raise ValueError(f"Nickname must be at most {NICKNAME_MAX_LENGTH} characters")
        if animal not in ANIMALS:
            raise ValueError("Please choose an animal")
        return cls(
            user_id=f"{nickname}_{animal_label(animal)}",
            nickname=nickname,
            animal=animal,
        )

    def is_admin(self, admin_nickname: str) -> bool:
        return self.nickname == admin_nickname
