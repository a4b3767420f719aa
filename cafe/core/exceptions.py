"""
Error Types

Every failure the proxy or the client can surface maps to one of these.
Callers catch CafeError at operation boundaries, log it, and show
``str(exc)`` to the user.

Author: Khalil Bannouri
Version: 4.0.0
"""

from typing import Optional


class CafeError(Exception):
    """Base class for all application errors."""

    retryable: bool = True

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConfigurationError(CafeError):
    """Required settings are missing. Fixing it needs a redeploy."""

    retryable = False


class TransportError(CafeError):
    """Network failure or non-2xx HTTP status."""


class DecodeError(TransportError):
    """Response body is not the expected envelope."""


class BackendError(CafeError):
    """The backend answered with ``success: false``."""
