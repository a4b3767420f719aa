"""
Response Envelope Decoding

Both the Apps Script upstream and the proxy speak the same JSON envelope:

    reads:  {"success": bool, "data": [[...], ...], "error": str}
    writes: {"success": bool, "message": str, "data": any}

The upstream is not always well behaved. On some successful writes it
answers with an HTML redirect page instead of JSON. ``decode_envelope``
is the only place that knows about this; callers receive a ``Decoded``
and handle exactly one shape.

Author: Khalil Bannouri
Version: 4.0.0
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)

SYNTHESIZED_WRITE_MESSAGE = "Upstream accepted the write (non-JSON success page)"


@dataclass
class Decoded:
    """
    Tagged result of decoding a response body.

    Attributes:
        ok: True when ``value`` holds a usable envelope
        value: The envelope dict (only when ok)
        reason: Why decoding failed (only when not ok)
        status_code: HTTP status the body arrived with
        synthesized: True when the envelope was invented for an HTML 200 write
    """
    ok: bool
    value: dict[str, Any] = field(default_factory=dict)
    reason: Optional[str] = None
    status_code: int = 200
    synthesized: bool = False

    @property
    def success(self) -> bool:
        return self.ok and bool(self.value.get("success"))

    @property
    def error_message(self) -> Optional[str]:
        """User-facing error text carried by the envelope, if any."""
        if not self.ok:
            return self.reason
        error = self.value.get("error")
        return str(error) if error else None


def decode_envelope(status_code: int, body: str, *, write: bool = False) -> Decoded:
    """
    Decode a response body into the envelope shape.

    Args:
        status_code: HTTP status of the response
        body: Raw response text
        write: True for write paths, where an HTTP 200 with a body that is
            not JSON counts as success

    Returns:
        Decoded: ok with the envelope, or not ok with a reason
    """
    try:
        payload = json.loads(body)
    except ValueError:
        payload = None
        if write and status_code == 200:
            logger.debug(f"Non-JSON 200 on write path, treating as success: {body[:120]!r}")
            return Decoded(
                ok=True,
                value={"success": True, "message": SYNTHESIZED_WRITE_MESSAGE},
                status_code=status_code,
                synthesized=True,
            )

    if not isinstance(payload, dict) or "success" not in payload:
        snippet = (body or "").strip()[:80]
        return Decoded(
            ok=False,
            reason=f"Unexpected response (HTTP {status_code}): {snippet or 'empty body'}",
            status_code=status_code,
        )

    return Decoded(ok=True, value=payload, status_code=status_code)
