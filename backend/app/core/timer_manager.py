import asyncio
import logging
from typing import Awaitable, Callable, Optional

log = logging.getLogger(__name__)


class Ticker:
    """Calls `callback` right away and then every `interval` seconds until stopped."""

    def __init__(self, callback: Callable[[], Awaitable[None]], interval: float = 1.0):
        self.callback = callback
        self.interval = interval
        self.task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self.task is not None and not self.task.done()

    def start(self):
        self.stop()
        self.task = asyncio.create_task(self._tick())

    async def _tick(self):
        while True:
            try:
                await self.callback()
            except Exception as e:
                log.error(f"Tick callback failed, stopping ticker: {e}")
                return
            await asyncio.sleep(self.interval)

    def stop(self):
        if self.task is not None:
            self.task.cancel()
            self.task = None
