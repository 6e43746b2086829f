"""
Timers for the two time-based behaviors of a session.

- Navigation cooldown (PhaseController)
- Animation tick (visual motion only, never simulation state)

Both must be cancelable so nothing fires after teardown. Hosts inject a
Scheduler: ManualScheduler keeps virtual time and fires callbacks only when
advanced, so tests and hosts with their own event loop stay deterministic.
ThreadingScheduler uses wall-clock timers.
"""

import heapq
import itertools
import threading
import time
from typing import Callable, List, Optional, Tuple

from .logger import Logger


class TimerHandle:
    """Cancelable reference to a scheduled callback."""

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False
        self._timer: Optional[threading.Timer] = None

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()

    def _run(self) -> None:
        if self.cancelled or self.fired:
            return
        self.fired = True
        self.callback()


class Scheduler:
    """Interface: one-shot delayed callbacks plus a monotonic clock."""

    def now(self) -> float:
        raise NotImplementedError()

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError()


class ManualScheduler(Scheduler):
    """
    Virtual-time scheduler. Callbacks run only inside `advance()`, in due-time
    order (ties broken by scheduling order).
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self._now + max(0.0, float(delay_s)), callback)
        heapq.heappush(self._queue, (handle.due, next(self._counter), handle))
        return handle

    def advance(self, seconds: float) -> int:
        """
        Move virtual time forward, firing every callback that falls due.

        Callbacks scheduled while advancing fire in the same call if they
        fall due before the new time.

        Returns:
            Number of callbacks fired.
        """
        target = self._now + max(0.0, float(seconds))
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            self._now = due
            if handle.pending:
                handle._run()
                fired += 1
        self._now = target
        return fired

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, h in self._queue if h.pending)


class ThreadingScheduler(Scheduler):
    """Wall-clock scheduler backed by threading.Timer daemon threads."""

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        delay_s = max(0.0, float(delay_s))
        handle = TimerHandle(self.now() + delay_s, callback)
        timer = threading.Timer(delay_s, handle._run)
        timer.daemon = True
        handle._timer = timer
        timer.start()
        return handle


class AnimationTicker:
    """
    Fixed-period frame counter driving visual motion.

    The frame wraps at `frame_count`. The ticker only updates its own counter
    and notifies `on_tick`; it never touches simulation state.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        period_s: float,
        frame_count: int = 100,
        on_tick: Optional[Callable[[int], None]] = None,
    ):
        self._scheduler = scheduler
        self.period_s = max(1e-3, float(period_s))
        self.frame_count = max(1, int(frame_count))
        self._on_tick = on_tick
        self._handle: Optional[TimerHandle] = None
        self._lock = threading.Lock()
        self.frame = 0
        self.running = False

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self.running = True
            self._schedule()

    def stop(self) -> None:
        with self._lock:
            self.running = False
            if self._handle is not None:
                self._handle.cancel()
                self._handle = None

    def _schedule(self) -> None:
        self._handle = self._scheduler.call_later(self.period_s, self._tick)

    def _tick(self) -> None:
        with self._lock:
            if not self.running:
                return
            self.frame = (self.frame + 1) % self.frame_count
            frame = self.frame
            self._schedule()
        if self._on_tick is not None:
            try:
                self._on_tick(frame)
            except Exception as ex:
                Logger.log(f"Animation tick listener raised: {ex!r}", Logger.LogPriority.ERROR)
