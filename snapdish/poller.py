"""Periodic refresh task bound to a screen's lifetime."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from snapdish.errors import SnapDishError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 10.0


class Poller:
    def __init__(
        self, callback: Callable[[], Awaitable[None]], interval: float = DEFAULT_POLL_INTERVAL
    ) -> None:
        if interval <= 0:
            raise ValueError("Poll interval must be positive.")
        self._callback = callback
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            try:
                await self._callback()
            except SnapDishError as exc:
                # Staleness between polls is acceptable; the next tick retries.
                logger.warning("Refresh failed: %s", exc)
            except Exception:
                logger.exception("Refresh crashed; polling stopped.")
                raise
            await asyncio.sleep(self.interval)
