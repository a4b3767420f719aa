"""
                        Services Module

Backends behind the hybrid architecture pattern. Each service has a
development and a production implementation chosen by ENV_MODE.

Services:
    - sheets: Spreadsheet gateway (local workbooks / Google Apps Script)
    - notifications: New-order cue and user notices (mock / console)
"""

from cafe.services.sheets import get_sheets_gateway
from cafe.services.notifications import get_notifier

__all__ = ["get_sheets_gateway", "get_notifier"]
