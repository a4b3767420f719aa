"""
Core module initialization.
Exports configuration, error types and envelope decoding.
"""

from cafe.core.config import get_settings, Settings, EnvironmentMode
from cafe.core.envelope import Decoded, decode_envelope
from cafe.core.exceptions import (
    CafeError,
    ConfigurationError,
    TransportError,
    DecodeError,
    BackendError,
)

__all__ = [
    "get_settings",
    "Settings",
    "EnvironmentMode",
    "Decoded",
    "decode_envelope",
    "CafeError",
    "ConfigurationError",
    "TransportError",
    "DecodeError",
    "BackendError",
]
