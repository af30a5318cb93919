"""Repeating tick schedulers for the session walkthrough.

``ThreadScheduler`` fires callbacks from a background thread on wall-clock
time. ``ManualScheduler`` only fires when ``advance()`` is called, which lets
tests drive the countdown second by second.
"""

import logging
import threading
from typing import Callable

logger = logging.getLogger("yoga_therapy")


class TickHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self, wait: bool = True) -> None:
        self.cancelled = True


class _ThreadTick(TickHandle):
    def __init__(self, interval: float, callback: Callable[[], None]):
        super().__init__()
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, args=(interval, callback), daemon=True)

    def _run(self, interval, callback):
        while not self._stopped.wait(interval):
            try:
                callback()
            except Exception:
                # keep ticking; one bad tick must not freeze the countdown
                logger.exception("Tick callback failed")

    def start(self) -> None:
        self._thread.start()

    def cancel(self, wait: bool = True) -> None:
        """Stop ticking. With ``wait``, block until an in-flight callback returns.

        Pass ``wait=False`` while holding a lock the callback may need.
        """
        super().cancel()
        self._stopped.set()
        # a callback may cancel its own tick
        if wait and self._thread.is_alive() and threading.current_thread() is not self._thread:
            self._thread.join()

    @property
    def alive(self) -> bool:
        return self._thread.is_alive()


class ThreadScheduler:
    def every(self, interval: float, callback: Callable[[], None]) -> TickHandle:
        tick = _ThreadTick(interval, callback)
        tick.start()
        return tick


class _ManualTick(TickHandle):
    def __init__(self, interval: float, callback: Callable[[], None], due: float):
        super().__init__()
        self.interval = interval
        self.callback = callback
        self.due = due


class ManualScheduler:
    def __init__(self):
        self.now = 0.0
        self._ticks: list[_ManualTick] = []

    def every(self, interval: float, callback: Callable[[], None]) -> TickHandle:
        tick = _ManualTick(interval, callback, self.now + interval)
        self._ticks.append(tick)
        return tick

    @property
    def active(self) -> int:
        """Number of registrations that are still live."""
        return sum(1 for t in self._ticks if not t.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due callbacks in time order."""
        target = self.now + seconds
        while True:
            self._ticks = [t for t in self._ticks if not t.cancelled]
            due = [t for t in self._ticks if t.due <= target]
            if not due:
                break
            tick = min(due, key=lambda t: t.due)
            self.now = tick.due
            tick.due += tick.interval
            tick.callback()
        self.now = target
