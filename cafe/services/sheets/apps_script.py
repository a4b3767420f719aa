"""
Google Apps Script Sheets Gateway

Production implementation that forwards to a Google Apps Script web app
deployed on top of the menu and order spreadsheets.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - GOOGLE_SCRIPT_URL: the deployed web app URL (.../exec)
    - MENU_SHEET_ID: spreadsheet holding the menu
    - ORDER_SHEET_ID: spreadsheet holding the orders

Script contract:
    GET  ?action=getMenu&sheetId=...       -> {success, data}
    GET  ?action=getOrders&sheetId=...     -> {success, data}
    POST {action: "addOrder", sheetId, data}
    POST {action: "updateOrderStatus", sheetId, orderId, completed}

The script answers through a redirect and, on some successful writes,
with an HTML page instead of JSON. Redirects are followed here and the
HTML case is handled by ``decode_envelope``.

Author: Khalil Bannouri
Version: 4.0.0
"""

import logging
from typing import Any, Optional

import httpx

from cafe.core.config import Settings, get_settings
from cafe.core.envelope import Decoded, decode_envelope
from cafe.core.exceptions import ConfigurationError, TransportError
from cafe.services.sheets.base import BaseSheetsGateway

logger = logging.getLogger(__name__)


class AppsScriptGateway(BaseSheetsGateway):
    """
    Gateway to the Apps Script web app.

    Configuration is checked per call rather than at construction so that
    a missing MENU_SHEET_ID only breaks the menu endpoint, and the proxy
    can still start and report what is missing.

    Example:
        >>> gateway = AppsScriptGateway()
        >>> decoded = await gateway.get_menu()
        >>> decoded.value["data"][0]
        ['Cafe Latte', 450, True, 'Soft Drinks', 'Mika']
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the gateway.

        Args:
            settings: Settings to read the script URL and sheet IDs from
            client: HTTP client to use (tests inject a MockTransport client)
        """
        settings = settings or get_settings()

        self._script_url = settings.google_script_url
        self._menu_sheet_id = settings.menu_sheet_id
        self._order_sheet_id = settings.order_sheet_id
        self._client = client or httpx.AsyncClient(
            timeout=settings.upstream_timeout_seconds,
            follow_redirects=True,
        )

        missing = sorted(
            set(self._missing(self._menu_sheet_id, "MENU_SHEET_ID"))
            | set(self._missing(self._order_sheet_id, "ORDER_SHEET_ID"))
        )
        if missing:
            logger.warning(f"AppsScriptGateway initialized without: {missing}")
        else:
            logger.info("AppsScriptGateway initialized")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "apps_script"

    def _missing(self, sheet_id: Optional[str], sheet_key: str) -> list[str]:
        missing = []
        if not self._script_url:
            missing.append("GOOGLE_SCRIPT_URL")
        if not sheet_id:
            missing.append(sheet_key)
        return missing

    def _require(self, sheet_id: Optional[str], sheet_key: str) -> str:
        """
        Return the sheet ID, failing closed when the upstream is not configured.

        Raises:
            ConfigurationError: Script URL or sheet ID is not set
        """
        missing = self._missing(sheet_id, sheet_key)
        if missing:
            raise ConfigurationError(
                f"Spreadsheet upstream is not configured: {', '.join(missing)} not set",
                status_code=500,
            )
        return sheet_id

    async def _send(self, method: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, self._script_url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Apps Script {method} failed: {e}")
            raise TransportError(f"Spreadsheet upstream unreachable: {e}", status_code=502)

        if not response.is_success:
            logger.error(f"Apps Script {method} returned HTTP {response.status_code}")
            raise TransportError(
                f"HTTP error! status: {response.status_code}",
                status_code=502,
            )

        logger.debug(f"Apps Script {method} response: {response.text[:200]}")
        return response

    async def _read(self, action: str, sheet_id: str) -> Decoded:
        response = await self._send("GET", params={"action": action, "sheetId": sheet_id})
        return decode_envelope(response.status_code, response.text)

    async def _write(self, payload: dict[str, Any]) -> Decoded:
        response = await self._send("POST", json=payload)
        return decode_envelope(response.status_code, response.text, write=True)

    async def get_menu(self) -> Decoded:
        sheet_id = self._require(self._menu_sheet_id, "MENU_SHEET_ID")
        return await self._read("getMenu", sheet_id)

    async def get_orders(self) -> Decoded:
        sheet_id = self._require(self._order_sheet_id, "ORDER_SHEET_ID")
        return await self._read("getOrders", sheet_id)

    async def add_order(self, order: dict[str, Any]) -> Decoded:
        sheet_id = self._require(self._order_sheet_id, "ORDER_SHEET_ID")
        return await self._write({
            "action": "addOrder",
            "sheetId": sheet_id,
            "data": order,
        })

    async def update_order_status(self, order_id: str, completed: bool) -> Decoded:
        sheet_id = self._require(self._order_sheet_id, "ORDER_SHEET_ID")
        return await self._write({
            "action": "updateOrderStatus",
            "sheetId": sheet_id,
            "orderId": order_id,
            "completed": bool(completed),
        })

    async def health_check(self) -> bool:
        """Configured and the menu sheet answers with an envelope."""
        try:
            decoded = await self.get_menu()
        except (ConfigurationError, TransportError) as e:
            logger.warning(f"Apps Script health check failed: {e}")
            return False
        return decoded.ok

    async def aclose(self) -> None:
        await self._client.aclose()
