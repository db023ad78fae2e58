"""
Gesture Mirror Timer Scheduler.
===============================

Frame-driven replacement for browser-style setTimeout.
Nothing here sleeps or spawns threads: the controller calls `run_due(now)`
at the start of every frame (and on idle ticks), which fires every callback
whose deadline has passed, in deadline order.

Cancellation is explicit. A callback is handed its own TimerHandle so it can
check `state.<slot> is handle` before mutating anything.
"""
import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, List

@dataclass(eq=False)
class TimerHandle:
    due: float
    callback: Callable[["TimerHandle", float], None]
    name: str = ""
    cancelled: bool = False
    fired: bool = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self):
        self.cancelled = True

@dataclass
class TimerScheduler:
    _queue: List = field(default_factory=list)
    _seq: itertools.count = field(default_factory=itertools.count)

    def schedule(self, now: float, delay: float, callback, name: str = "") -> TimerHandle:
        handle = TimerHandle(now + delay, callback, name)
        # seq keeps FIFO order for equal deadlines
        heapq.heappush(self._queue, (handle.due, next(self._seq), handle))
        return handle

    def run_due(self, now: float) -> int:
        """Fires every pending timer with due <= now. Returns how many fired."""
        fired = 0
        while self._queue and self._queue[0][0] <= now:
            _, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            handle.fired = True
            logging.debug(f"timer '{handle.name}' fired at {now:.3f}")
            handle.callback(handle, now)
            fired += 1
        return fired

    def cancel_all(self):
        for _, _, handle in self._queue:
            handle.cancel()
        self._queue.clear()

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, h in self._queue if h.pending)
