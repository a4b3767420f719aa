"""
Cafe API Client

Async HTTP client for the proxy endpoints. Turns envelopes into domain
objects and every failure into a CafeError subclass, so callers only
deal with ``MenuItem`` / ``Order`` lists or an exception with a
user-facing message.

Usage:
    async with CafeApiClient() as api:
        menu = await api.get_menu_items()
        orders = await api.get_orders()

Author: Khalil Bannouri
Version: 4.0.0
"""

import logging
from typing import Any, Optional

import httpx

from cafe.core.config import get_settings
from cafe.core.envelope import decode_envelope
from cafe.core.exceptions import BackendError, DecodeError, TransportError
from cafe.models import MenuItem, Order, parse_menu_rows, parse_order_rows

logger = logging.getLogger(__name__)


class CafeApiClient:
    """
    Thin async wrapper around the four proxy endpoints.

    Attributes:
        base_url: Proxy root URL
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.base_url = base_url or settings.client_base_url
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.client_timeout_seconds,
        )

    async def __aenter__(self) -> "CafeApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[dict[str, Any]] = None,
        write: bool = False,
    ) -> dict[str, Any]:
        """
        Send one request and return the success envelope.

        Raises:
            TransportError: Network failure or non-2xx status
            DecodeError: Body is not an envelope
            BackendError: Envelope says ``success: false``
        """
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise TransportError(f"Could not reach the cafe server: {e}")

        decoded = decode_envelope(response.status_code, response.text, write=write)

        if not response.is_success:
            message = (decoded.ok and decoded.error_message) or f"HTTP error! status: {response.status_code}"
            logger.error(f"{method} {path} -> HTTP {response.status_code}: {message}")
            raise TransportError(message, status_code=response.status_code)

        if not decoded.ok:
            logger.error(f"{method} {path} -> {decoded.reason}")
            raise DecodeError(decoded.reason or "Unreadable response", status_code=response.status_code)

        if not decoded.success:
            message = decoded.error_message or "Unknown error"
            logger.error(f"{method} {path} -> API error: {message}")
            raise BackendError(message, status_code=response.status_code)

        return decoded.value

    async def get_menu_items(self) -> list[MenuItem]:
        """
        Fetch the menu.

        Raises:
            BackendError: The sheet has no usable menu rows
        """
        envelope = await self._request("GET", "/api/menu")

        data = envelope.get("data")
        if not isinstance(data, list) or not data:
            raise BackendError("No menu data found. Add menu rows to the menu sheet.")

        items = parse_menu_rows(data)
        if not items:
            raise BackendError(
                "No valid menu items found. Check that the name and price columns are filled in."
            )

        logger.debug(f"Fetched {len(items)} menu items")
        return items

    async def get_orders(self) -> list[Order]:
        """Fetch every order. A sheet with no order rows is an empty list."""
        envelope = await self._request("GET", "/api/orders")

        data = envelope.get("data")
        if not isinstance(data, list):
            return []

        orders = parse_order_rows(data)
        logger.debug(f"Fetched {len(orders)} orders")
        return orders

    async def add_order(self, order: Order) -> dict[str, Any]:
        """Create one order unit."""
        envelope = await self._request("POST", "/api/orders", json=order.to_payload(), write=True)
        logger.info(f"Order {order.order_id} added ({order.item})")
        return envelope

    async def update_order_status(self, order_id: str, completed: bool) -> dict[str, Any]:
        """Set the completed flag of one order."""
        envelope = await self._request(
            "POST",
            "/api/orders/update",
            json={"orderId": order_id, "completed": completed},
            write=True,
        )
        logger.info(f"Order {order_id} completed={completed}")
        return envelope
