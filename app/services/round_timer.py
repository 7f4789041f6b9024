# app/services/round_timer.py
import asyncio
import logging
from typing import Awaitable, Callable

from app.core.config import settings

logger = logging.getLogger("app.services.round_timer")

class RoundCountdown:
    """
    Counts a round down once per tick on the running event loop.

    on_tick(remaining) is awaited after every tick; on_expire() is awaited once
    when the count reaches zero. cancel() stops the countdown without expiring it.
    """

    def __init__(
        self,
        duration_seconds: int,
        on_expire: Callable[[], Awaitable[None]],
        on_tick: Callable[[int], Awaitable[None]] | None = None,
        tick_seconds: float = settings.TIMER_TICK_SECONDS,
        name: str = "round",
    ):
        if duration_seconds <= 0:
            raise ValueError("Countdown duration must be positive")
        self.remaining_seconds = duration_seconds
        self.on_expire = on_expire
        self.on_tick = on_tick
        self.tick_seconds = tick_seconds
        self.name = name
        self.expired = False
        self._task: asyncio.Task | None = None

    def start(self) -> asyncio.Task:
        if self._task is not None and not self._task.done():
            logger.warning(f"{self.name} - Countdown already running.")
            return self._task
        self._task = asyncio.create_task(self._run(), name=f"countdown-{self.name}")
        return self._task

    async def _run(self):
        try:
            while self.remaining_seconds > 0:
                await asyncio.sleep(self.tick_seconds)
                self.remaining_seconds -= 1
                if self.on_tick is not None:
                    await self.on_tick(self.remaining_seconds)
            self.expired = True
            logger.info(f"{self.name} - Countdown expired.")
            await self.on_expire()
        except asyncio.CancelledError:
            logger.debug(f"{self.name} - Countdown cancelled with {self.remaining_seconds}s left.")
            raise

    def cancel(self) -> bool:
        """Stops the countdown. Returns False if it already finished or never started."""
        if self._task is None or self._task.done():
            return False
        if self.expired:
            # Already past zero, on_expire is running; let it finish
            return False
        self._task.cancel()
        return True

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
