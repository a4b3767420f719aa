"""
Polling

Timer-driven refresh for the client views. A view owns one Poller that
calls its ``refresh()`` on a fixed cadence until the view is closed.

Rules every view follows:
    - Errors from a timer refresh are logged and the loop keeps going;
      the next tick is the retry.
    - Manual refreshes may overlap timer refreshes. Whichever fetch
      completes last wins.
    - Once closed, a view drops the result of any fetch still in flight
      and mutates no state.

Author: Khalil Bannouri
Version: 4.0.0
"""

import asyncio
import contextlib
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional

from cafe.core.exceptions import CafeError

logger = logging.getLogger(__name__)


class Poller:
    """Runs ``action`` now and then every ``interval`` seconds."""

    def __init__(
        self,
        name: str,
        interval: float,
        action: Callable[[], Awaitable[Any]],
    ):
        self.name = name
        self.interval = interval
        self.action = action
        self.ticks = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name=f"poller:{self.name}")
        logger.info(f"Polling {self.name} every {self.interval:g}s")

    async def _run(self) -> None:
        while True:
            self.ticks += 1
            try:
                await self.action()
            except CafeError as e:
                logger.warning(f"{self.name} refresh failed (will retry): {e}")
            except Exception:
                logger.exception(f"{self.name} refresh crashed")
            await asyncio.sleep(self.interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            logger.info(f"Stopped polling {self.name}")


class PolledView(ABC):
    """Base for client views that refresh on a timer."""

    poll_name = "view"

    def __init__(self, poll_interval: float):
        self.error: Optional[str] = None
        self._closed = False
        self._poller = Poller(self.poll_name, poll_interval, self.refresh)

    @abstractmethod
    async def refresh(self) -> Any:
        """Fetch and replace this view's state."""
        pass

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """Begin polling. Must be called from a running event loop."""
        if self._closed:
            raise RuntimeError(f"{self.poll_name} is closed")
        self._poller.start()

    async def close(self) -> None:
        """Stop the timer; late results are discarded from here on."""
        self._closed = True
        await self._poller.stop()

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
