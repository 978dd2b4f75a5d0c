import heapq
import itertools
import logging
from typing import Any, Callable, List, Tuple

logger = logging.getLogger(__name__)


class TimerHandle:
    """Cancellable reference to one scheduled callback."""

    def __init__(self, delay: float):
        self.delay = delay
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def done(self) -> bool:
        return self.cancelled or self.fired


def _run(handle: TimerHandle, callback: Callable[..., Any], args: Tuple[Any, ...]) -> None:
    if handle.cancelled:
        logger.debug(f"[timer-abort] delay={handle.delay}s cancelled before firing")
        return
    handle.fired = True
    try:
        callback(*args)
    except Exception:
        # Background tasks have no caller to propagate to
        logger.exception(f"[timer-error] delay={handle.delay}s callback={callback!r}")


class SocketIOScheduler:
    """Runs each callback in a Socket.IO background task after `delay` seconds."""

    def __init__(self, socketio):
        self._socketio = socketio

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        handle = TimerHandle(delay)

        def _worker():
            self._socketio.sleep(delay)
            _run(handle, callback, args)

        self._socketio.start_background_task(_worker)
        return handle


class ManualScheduler:
    """Virtual clock: callbacks only run when `advance` moves time past them.

    Callbacks due at the same instant run in the order they were scheduled.
    """

    handle_factory = TimerHandle

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, TimerHandle, Callable[..., Any], Tuple[Any, ...]]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        handle = self.handle_factory(delay)
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), handle, callback, args))
        return handle

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback, args = heapq.heappop(self._queue)
            self.now = due
            _run(handle, callback, args)
        self.now = target

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._queue if not entry[2].done)
