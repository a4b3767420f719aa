from __future__ import annotations

import asyncio
from typing import Any, Optional

import pytest

from cafe.core.envelope import Decoded
from cafe.core.exceptions import CafeError, TransportError
from cafe.models import MenuItem, Order
from cafe.services.sheets.base import BaseSheetsGateway


class FakeApi:
    """Stands in for CafeApiClient in client-side tests."""

    def __init__(self):
        self.orders: list[Order] = []
        self.menu: list[MenuItem] = []
        self.get_error: Optional[CafeError] = None
        self.menu_error: Optional[CafeError] = None
        self.update_error: Optional[CafeError] = None
        self.fail_add_after: Optional[int] = None
        self.update_gate: Optional[asyncio.Event] = None
        self.get_gate: Optional[asyncio.Event] = None
        self.get_calls = 0
        self.update_calls: list[tuple[str, bool]] = []
        self.added: list[Order] = []
        self.observed_pending: list[set[str]] = []
        self.engine = None

    async def get_orders(self) -> list[Order]:
        self.get_calls += 1
        # The gate holds only the next fetch, which answers with the
        # sheet as it was when the fetch started
        gate, self.get_gate = self.get_gate, None
        snapshot = list(self.orders)
        if gate:
            await gate.wait()
        await asyncio.sleep(0)
        if self.get_error:
            raise self.get_error
        return snapshot

    async def get_menu_items(self) -> list[MenuItem]:
        await asyncio.sleep(0)
        if self.menu_error:
            raise self.menu_error
        return list(self.menu)

    async def update_order_status(self, order_id: str, completed: bool) -> dict[str, Any]:
        self.update_calls.append((order_id, completed))
        if self.engine is not None:
            self.observed_pending.append(set(self.engine.pending_update_order_ids))
        if self.update_gate:
            await self.update_gate.wait()
        await asyncio.sleep(0)
        if self.update_error:
            raise self.update_error
        self.orders = [
            order.with_completed(completed) if order.order_id == order_id else order
            for order in self.orders
        ]
        return {"success": True}

    async def add_order(self, order: Order) -> dict[str, Any]:
        await asyncio.sleep(0)
        if self.fail_add_after is not None and len(self.added) >= self.fail_add_after:
            raise TransportError("HTTP error! status: 500", status_code=500)
        self.added.append(order)
        self.orders.append(order)
        return {"success": True}


class FakeGateway(BaseSheetsGateway):
    """In-memory gateway for proxy tests."""

    def __init__(self):
        self.menu_envelope: dict[str, Any] = {"success": True, "data": []}
        self.orders_envelope: dict[str, Any] = {"success": True, "data": []}
        self.added: list[dict[str, Any]] = []
        self.updates: list[tuple[str, bool]] = []
        self.closed = False

    @property
    def provider_name(self) -> str:
        return "fake"

    async def get_menu(self) -> Decoded:
        return Decoded(ok=True, value=self.menu_envelope)

    async def get_orders(self) -> Decoded:
        return Decoded(ok=True, value=self.orders_envelope)

    async def add_order(self, order: dict[str, Any]) -> Decoded:
        self.added.append(order)
        return Decoded(ok=True, value={"success": True, "message": "Order added successfully"})

    async def update_order_status(self, order_id: str, completed: bool) -> Decoded:
        self.updates.append((order_id, completed))
        return Decoded(ok=True, value={"success": True, "message": "Order status updated"})

    async def health_check(self) -> bool:
        return True

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture()
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def make_order():
    counter = {"n": 0}

    def _make(
        order_id: Optional[str] = None,
        user_id: str = "Mika_Cat",
        item: str = "Cafe Latte",
        price: int = 450,
        completed: bool = False,
    ) -> Order:
        counter["n"] += 1
        return Order(
            order_id=order_id or f"order_{counter['n']}",
            timestamp="2024-06-10T09:30:00.000Z",
            user_id=user_id,
            nickname=user_id.split("_")[0],
            animal="🐱 Cat",
            item=item,
            price=price,
            completed=completed,
        )

    return _make
