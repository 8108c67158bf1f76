import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol

logger = logging.getLogger(__name__)

TickCallback = Callable[[], Awaitable[None]]


class Ticker(Protocol):
    """Calls ``on_tick`` once per interval until cancelled."""

    def start(self, on_tick: TickCallback) -> None:
        ...

    def cancel(self) -> None:
        ...


class AsyncioTicker:
    def __init__(self, interval_seconds: float = 1.0):
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done() and not self._stopped

    def start(self, on_tick: TickCallback) -> None:
        if self._task is not None:
            raise RuntimeError("ticker already started")
        self._stopped = False
        self._task = asyncio.get_running_loop().create_task(self._run(on_tick))

    async def _run(self, on_tick: TickCallback) -> None:
        # ticks are awaited one at a time so they never overlap
        while not self._stopped:
            await asyncio.sleep(self.interval_seconds)
            if self._stopped:
                break
            try:
                await on_tick()
            except Exception:
                logger.exception("Timer tick failed")

    def cancel(self) -> None:
        self._stopped = True
        task = self._task
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        # cancelled from inside a tick (timer expiry -> submit): let that tick finish
        if task is not current:
            task.cancel()
