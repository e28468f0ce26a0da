"""
Clock abstraction for the Tapir Live Activity coordinator.

Coordinators never read the wall clock or create timers directly. They ask a
Clock for "now" and for cancellable one-shot or recurring callbacks, which
run as tasks on the running asyncio event loop.
"""

import asyncio
import structlog
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Awaitable, Callable

Callback = Callable[[], Awaitable[None]]

class TimerHandle(ABC):
    """Cancellable reference to a scheduled callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Cancel the callback. No further invocation starts afterwards."""

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        """Whether cancel() has been called."""

class Clock(ABC):
    """Real-time source plus a scheduler of async callbacks."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time as a timezone-aware UTC datetime."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        """Run ``callback`` once, ``delay`` seconds from now."""

    @abstractmethod
    def call_every(self, period: float, callback: Callback) -> TimerHandle:
        """Run ``callback`` every ``period`` seconds until cancelled."""

class _TaskTimerHandle(TimerHandle):
    """
    Timer running as one task. Cancelling stops future runs; a callback
    already in progress is left to finish.
    """

    def __init__(self):
        self._task = None
        self._cancelled = False
        self._in_callback = False

    def cancel(self) -> None:
        self._cancelled = True
        if self._task is not None and not self._in_callback:
            self._task.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

class AsyncioClock(Clock):
    """
    Clock backed by the running asyncio event loop.

    Each scheduled callback is a task sleeping between invocations. A callback
    that raises is logged and, for recurring timers, does not stop later runs.
    """

    def __init__(self):
        self.logger = structlog.get_logger(component="clock")

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        return self._schedule(delay, callback, repeat=False)

    def call_every(self, period: float, callback: Callback) -> TimerHandle:
        if period <= 0:
            raise ValueError("period must be positive")
        return self._schedule(period, callback, repeat=True)

    def _schedule(self, delay: float, callback: Callback, repeat: bool) -> TimerHandle:
        handle = _TaskTimerHandle()

        async def _run():
            while True:
                await asyncio.sleep(delay)
                if handle.cancelled:
                    return
                handle._in_callback = True
                try:
                    await self._invoke(callback)
                finally:
                    handle._in_callback = False
                if not repeat or handle.cancelled:
                    return

        handle._task = asyncio.create_task(_run())
        return handle

    async def _invoke(self, callback: Callback) -> None:
        try:
            await callback()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.error("Timer callback failed",
                              callback=getattr(callback, "__qualname__", repr(callback)),
                              error=str(e), exc_info=True)
