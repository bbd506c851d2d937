"""
Tick sources for the exam countdown.

A tick source calls a callback once per elapsed second until cancelled.
ManualTicker is advanced by hand and is used in tests; IntervalTicker
uses a background threading.Timer per second.
"""

import threading
from typing import Callable, Optional

TickCallback = Callable[[], None]


class TickSource:
    """Interface: start(callback) begins ticking, cancel() stops it for good."""

    def start(self, callback: TickCallback) -> None:
        raise NotImplementedError

    def cancel(self) -> None:
        raise NotImplementedError

    @property
    def running(self) -> bool:
        raise NotImplementedError


class ManualTicker(TickSource):
    """Deterministic tick source: every advance() call is one elapsed second."""

    def __init__(self):
        self._callback: Optional[TickCallback] = None
        self.cancel_count = 0

    def start(self, callback: TickCallback) -> None:
        self._callback = callback

    def cancel(self) -> None:
        self._callback = None
        self.cancel_count += 1

    @property
    def running(self) -> bool:
        return self._callback is not None

    def advance(self, seconds: int = 1) -> None:
        for _ in range(seconds):
            if self._callback is None:
                return
            self._callback()


class IntervalTicker(TickSource):
    """Wall-clock tick source backed by a chain of daemon threading.Timer objects."""

    def __init__(self, interval: float = 1.0):
        self.interval = interval
        self._callback: Optional[TickCallback] = None
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def start(self, callback: TickCallback) -> None:
        with self._lock:
            self._callback = callback
            self._schedule()

    def cancel(self) -> None:
        with self._lock:
            self._callback = None
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    @property
    def running(self) -> bool:
        return self._callback is not None

    def _schedule(self) -> None:
        self._timer = threading.Timer(self.interval, self._fire)
        self._timer.daemon = True
        self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            callback = self._callback
        if callback is None:
            return
        callback()
        with self._lock:
            if self._callback is not None:
                self._schedule()
