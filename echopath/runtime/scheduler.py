"""
Timer Scheduler
===============

Cooperative timer capability for the feedback components.

All asynchrony in EchoPath is expressed as deferred callbacks run on one
event loop: the periodic detection tick, staggered navigation
sub-announcements and the simulated recognition delay. Every scheduled
callback returns a handle whose ``cancel()`` guarantees the callback will
not run afterwards, including when called from inside the callback.

Ordered sequences (``call_sequence``) fire their steps strictly in list
order. A step whose offset is smaller than its predecessor's fires
immediately after the predecessor instead of overtaking it.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Sequence

from echopath.utils.logger import get_logger

logger = get_logger(__name__)

Callback = Callable[[], Awaitable[None]]


class TimerHandle(ABC):
    """Handle to a scheduled callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent any further invocation of the callback."""

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        """Whether cancel() has been called."""


class TaskHandle(TimerHandle):
    """Handle backed by an asyncio task."""

    def __init__(self) -> None:
        self._task: Optional[asyncio.Task] = None
        self._cancelled = False

    def bind(self, task: asyncio.Task) -> None:
        self._task = task

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        # A task cancelling itself would abort the rest of its own callback;
        # the flag alone stops it at the next loop iteration.
        if self._task is not None and self._task is not asyncio.current_task():
            self._task.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        """Whether the backing task has finished."""
        return self._task is not None and self._task.done()


class SequenceHandle(TimerHandle):
    """Handle for an ordered sequence of delayed callbacks."""

    def __init__(self) -> None:
        self._current: Optional[TimerHandle] = None
        self._cancelled = False
        self._finished = False

    def cancel(self) -> None:
        self._cancelled = True
        if self._current is not None:
            self._current.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def finished(self) -> bool:
        """Whether every step has fired."""
        return self._finished


class Scheduler(ABC):
    """
    Abstract timer capability.

    Delays and intervals are in milliseconds.
    """

    @abstractmethod
    def now(self) -> float:
        """Return the current time in milliseconds."""

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        """Run ``callback`` once after ``delay_ms``."""

    @abstractmethod
    def call_every(self, interval_ms: float, callback: Callback) -> TimerHandle:
        """Run ``callback`` every ``interval_ms``, first after one interval."""

    def call_sequence(self, steps: Sequence[tuple[float, Callback]]) -> SequenceHandle:
        """
        Run callbacks in list order at their offsets from now.

        Each step waits for the previous one to complete, so the list
        order is the delivery order regardless of the offset values.

        Args:
            steps: ``(offset_ms, callback)`` pairs.

        Returns:
            A handle cancelling every step not yet fired.
        """
        handle = SequenceHandle()
        ordered = list(steps)

        def schedule(index: int, elapsed: float) -> None:
            if handle.cancelled:
                return
            if index >= len(ordered):
                handle._finished = True
                return

            offset, callback = ordered[index]

            async def fire() -> None:
                if handle.cancelled:
                    return
                await _invoke(callback)
                schedule(index + 1, max(offset, elapsed))

            handle._current = self.call_later(max(offset - elapsed, 0), fire)

        schedule(0, 0)
        return handle


class AsyncioScheduler(Scheduler):
    """Scheduler running callbacks as tasks on the running asyncio loop."""

    def now(self) -> float:
        return asyncio.get_running_loop().time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        handle = TaskHandle()

        async def run() -> None:
            await asyncio.sleep(delay_ms / 1000.0)
            if not handle.cancelled:
                await _invoke(callback)

        handle.bind(asyncio.get_running_loop().create_task(run()))
        return handle

    def call_every(self, interval_ms: float, callback: Callback) -> TimerHandle:
        handle = TaskHandle()

        async def run() -> None:
            while not handle.cancelled:
                await asyncio.sleep(interval_ms / 1000.0)
                if handle.cancelled:
                    break
                await _invoke(callback)

        handle.bind(asyncio.get_running_loop().create_task(run()))
        return handle


async def _invoke(callback: Callback) -> None:
    """Run a timer callback, keeping the timer alive if it raises."""
    try:
        await callback()
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.error("Scheduled callback failed", error=str(e), exc_info=True)
