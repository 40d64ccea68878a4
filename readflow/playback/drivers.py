"""
Periodic drivers for the playback schedulers.

Each driver owns at most one asyncio task. ``arm`` starts it and returns
False when it is already running; ``disarm`` cancels it and is safe to call
from inside the driver's own callback. When the callback raises, the task
ends and ``on_error`` is called so the owner can settle its own state.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, Protocol

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]
ErrorHook = Callable[[Exception], None]

DEFAULT_FRAME_INTERVAL = 1 / 60


class Driver(Protocol):
    @property
    def active(self) -> bool:
        ...

    def arm(self) -> bool:
        ...

    def disarm(self) -> None:
        ...


class _TaskDriver:
    def __init__(self, sleep: Sleep = asyncio.sleep, on_error: Optional[ErrorHook] = None):
        self._sleep = sleep
        self.on_error = on_error
        self._task: Optional[asyncio.Task] = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def arm(self) -> bool:
        if self.active:
            return False
        # Needs a running loop; callers without one inject their own driver.
        self._task = asyncio.get_running_loop().create_task(self._run())
        return True

    def disarm(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _run(self) -> None:
        try:
            while True:
                await self._sleep(self._next_delay())
                self._fire()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("%s callback failed; driver disarmed", type(self).__name__)
            self._task = None
            if self.on_error is not None:
                self.on_error(exc)

    def _next_delay(self) -> float:
        raise NotImplementedError

    def _fire(self) -> None:
        raise NotImplementedError


class RepeatingTimer(_TaskDriver):
    """Calls ``callback()`` every ``interval_ms()`` milliseconds, re-read each period."""

    def __init__(
        self,
        callback: Callable[[], None],
        interval_ms: Callable[[], float],
        sleep: Sleep = asyncio.sleep,
        on_error: Optional[ErrorHook] = None,
    ):
        super().__init__(sleep, on_error)
        self.callback = callback
        self.interval_ms = interval_ms

    def _next_delay(self) -> float:
        return max(0.0, self.interval_ms()) / 1000.0

    def _fire(self) -> None:
        self.callback()


class FrameLoop(_TaskDriver):
    """Calls ``callback(now)`` once per frame with a monotonic timestamp in seconds."""

    def __init__(
        self,
        callback: Callable[[float], None],
        clock: Callable[[], float] = time.monotonic,
        frame_interval: float = DEFAULT_FRAME_INTERVAL,
        sleep: Sleep = asyncio.sleep,
        on_error: Optional[ErrorHook] = None,
    ):
        super().__init__(sleep, on_error)
        self.callback = callback
        self.clock = clock
        self.frame_interval = frame_interval

    def _next_delay(self) -> float:
        return self.frame_interval

    def _fire(self) -> None:
        self.callback(self.clock())
