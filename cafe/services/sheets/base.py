"""
Sheets Gateway Abstract Base Class

Defines the interface contract for every spreadsheet backend the proxy
can forward to. Both AppsScriptGateway and WorkbookGateway implement it.

Every call returns a ``Decoded`` envelope. Gateways raise
ConfigurationError when they cannot run at all and TransportError when
the upstream cannot be reached; an upstream that answers with
``success: false`` is a normal return, not an exception.

Author: Khalil Bannouri
Version: 4.0.0
"""

from abc import ABC, abstractmethod
from typing import Any

from cafe.core.envelope import Decoded


class BaseSheetsGateway(ABC):
    """
    Abstract base class for spreadsheet gateways.

    Example:
        >>> gateway = get_sheets_gateway()
        >>> decoded = await gateway.get_orders()
        >>> if decoded.success:
        ...     rows = decoded.value["data"]
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the backend.

        Returns:
            str: Provider name (e.g., "workbook", "apps_script")
        """
        pass

    @abstractmethod
    async def get_menu(self) -> Decoded:
        """
        Read every menu row.

        Returns:
            Decoded: ``{"success": True, "data": [[name, price, stock, category, creator], ...]}``
        """
        pass

    @abstractmethod
    async def get_orders(self) -> Decoded:
        """
        Read every order row.

        Returns:
            Decoded: ``{"success": True, "data": [[orderId, timestamp, ...], ...]}``
        """
        pass

    @abstractmethod
    async def add_order(self, order: dict[str, Any]) -> Decoded:
        """
        Append one order row.

        Args:
            order: Wire-form order (camelCase keys)
        """
        pass

    @abstractmethod
    async def update_order_status(self, order_id: str, completed: bool) -> Decoded:
        """
        Set the completed flag of one order.

        Args:
            order_id: Order to update
            completed: New completion state
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify the backend is usable.

        Returns:
            bool: True if service is operational
        """
        pass

    async def aclose(self) -> None:
        """Release network resources. Nothing to do by default."""
        return None
