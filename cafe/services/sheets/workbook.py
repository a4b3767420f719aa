"""
Workbook Sheets Gateway with Concurrency Control

Development implementation that keeps the menu and orders in local
Excel workbooks laid out exactly like the production sheets:
a header row followed by positional rows.
Used when ENV_MODE=development.

Process-safe through file locks, so the proxy and the scripts can
share one data directory.

Author: Khalil Bannouri
Version: 4.0.0
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, Optional

import pandas as pd
from filelock import FileLock, Timeout

from cafe.core.config import get_settings
from cafe.core.envelope import Decoded
from cafe.services.sheets.base import BaseSheetsGateway

logger = logging.getLogger(__name__)


MENU_COLUMNS = ["name", "price", "stock", "category", "creator"]

ORDER_COLUMNS = [
    "orderId",
    "timestamp",
    "userId",
    "nickname",
    "animal",
    "item",
    "price",
    "completed",
]

# Written to the menu workbook the first time it is read
SAMPLE_MENU = [
    ["Toast Sandwich", 600, True, "Food", "Kitchen"],
    ["Curry Rice", 800, True, "Food", "Kitchen"],
    ["Cheesecake", 450, True, "Dessert", "Kitchen"],
    ["Cafe Latte", 450, True, "Soft Drinks", "Bar"],
    ["Orange Juice", 350, True, "Soft Drinks", "Bar"],
    ["Craft Beer", 700, False, "Alcohol", "Bar"],
]


def _plain(value: Any) -> Any:
    """Convert a workbook cell into a JSON-safe Python value."""
    if value is None:
        return ""
    if isinstance(value, float) and value != value:
        return ""
    if hasattr(value, "item"):  # numpy scalars
        value = value.item()
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class WorkbookGateway(BaseSheetsGateway):
    """Workbook-backed gateway for local development."""

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        lock_timeout: Optional[int] = None,
        seed_menu: bool = True,
    ):
        settings = get_settings()

        self.data_dir = Path(data_dir or settings.data_directory)
        self.menu_file = self.data_dir / settings.menu_workbook
        self.orders_file = self.data_dir / settings.orders_workbook
        self.menu_lock = self.data_dir / f"{settings.menu_workbook}.lock"
        self.orders_lock = self.data_dir / f"{settings.orders_workbook}.lock"
        self.lock_timeout = lock_timeout or settings.workbook_lock_timeout
        self.seed_menu = seed_menu

        logger.info(f"WorkbookGateway initialized (data_dir={self.data_dir})")

    @property
    def provider_name(self) -> str:
        return "workbook"

    def _ensure_data_dir(self) -> None:
        """Create data directory if needed."""
        if not self.data_dir.exists():
            self.data_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory: {self.data_dir}")

    @staticmethod
    def _load_df(file_path: Path, columns: list) -> pd.DataFrame:
        """Load existing file or create new DataFrame."""
        if file_path.exists():
            return pd.read_excel(file_path, engine="openpyxl", dtype=object)
        return pd.DataFrame(columns=columns)

    @staticmethod
    def _rows(df: pd.DataFrame) -> list[list[Any]]:
        return [[_plain(cell) for cell in row] for row in df.itertuples(index=False, name=None)]

    def _locked(self, lock_path: Path, label: str, operation: Callable[[], dict[str, Any]]) -> dict[str, Any]:
        """Run ``operation`` under the file lock and turn failures into an envelope."""
        self._ensure_data_dir()

        try:
            with FileLock(str(lock_path), timeout=self.lock_timeout):
                logger.debug(f"Lock acquired for {label}")
                result = operation()
            logger.debug(f"Lock released for {label}")
            return result

        except Timeout:
            logger.error(f"Lock timeout for {label}")
            return {"success": False, "error": f"Lock timeout ({self.lock_timeout}s)"}

        except Exception as e:
            logger.exception(f"Error during {label}")
            return {"success": False, "error": str(e)}

    # -------------------------------------------------------------------------
    # Synchronous operations (run in a worker thread)
    # -------------------------------------------------------------------------

    def _read_menu(self) -> dict[str, Any]:
        if not self.menu_file.exists() and self.seed_menu:
            pd.DataFrame(SAMPLE_MENU, columns=MENU_COLUMNS).to_excel(
                str(self.menu_file), index=False, engine="openpyxl"
            )
            logger.info(f"Seeded sample menu: {self.menu_file}")

        df = self._load_df(self.menu_file, MENU_COLUMNS)
        return {"success": True, "data": self._rows(df)}

    def _read_orders(self) -> dict[str, Any]:
        df = self._load_df(self.orders_file, ORDER_COLUMNS)
        return {"success": True, "data": self._rows(df)}

    def _append_order(self, order: dict[str, Any]) -> dict[str, Any]:
        df = self._load_df(self.orders_file, ORDER_COLUMNS)

        new_row = [
            order.get("orderId"),
            order.get("timestamp"),
            order.get("userId"),
            order.get("nickname"),
            order.get("animal"),
            order.get("item"),
            order.get("price"),
            bool(order.get("completed", False)),
        ]

        df = pd.concat([df, pd.DataFrame([new_row], columns=ORDER_COLUMNS)], ignore_index=True)
        df.to_excel(str(self.orders_file), index=False, engine="openpyxl")

        logger.info(f"Order {order.get('orderId')} appended to workbook")
        return {"success": True, "message": "Order added successfully", "data": new_row}

    def _set_completed(self, order_id: str, completed: bool) -> dict[str, Any]:
        df = self._load_df(self.orders_file, ORDER_COLUMNS)

        mask = df["orderId"].astype(str) == order_id
        if not mask.any():
            return {"success": False, "error": f"Order not found: {order_id}"}

        df.loc[mask, "completed"] = bool(completed)
        df.to_excel(str(self.orders_file), index=False, engine="openpyxl")

        logger.info(f"Order {order_id} marked completed={completed}")
        return {"success": True, "message": "Order status updated"}

    # -------------------------------------------------------------------------
    # Gateway interface
    # -------------------------------------------------------------------------

    async def get_menu(self) -> Decoded:
        envelope = await asyncio.to_thread(self._locked, self.menu_lock, "menu read", self._read_menu)
        return Decoded(ok=True, value=envelope)

    async def get_orders(self) -> Decoded:
        envelope = await asyncio.to_thread(self._locked, self.orders_lock, "orders read", self._read_orders)
        return Decoded(ok=True, value=envelope)

    async def add_order(self, order: dict[str, Any]) -> Decoded:
        envelope = await asyncio.to_thread(
            self._locked,
            self.orders_lock,
            f"order {order.get('orderId')}",
            lambda: self._append_order(order),
        )
        return Decoded(ok=True, value=envelope)

    async def update_order_status(self, order_id: str, completed: bool) -> Decoded:
        envelope = await asyncio.to_thread(
            self._locked,
            self.orders_lock,
            f"order {order_id} status",
            lambda: self._set_completed(order_id, completed),
        )
        return Decoded(ok=True, value=envelope)

    async def health_check(self) -> bool:
        """The data directory exists or can be created."""
        try:
            self._ensure_data_dir()
            return True
        except OSError as e:
            logger.error(f"Workbook health check failed: {e}")
            return False

    def clear_all(self) -> bool:
        """Delete all workbooks and lock files."""
        try:
            for f in [self.menu_file, self.orders_file, self.menu_lock, self.orders_lock]:
                if f.exists():
                    f.unlink()
            logger.info("All workbooks cleared")
            return True
        except OSError as e:
            logger.error(f"Error clearing files: {e}")
            return False
