from __future__ import annotations
import threading
from typing import Any, Callable, Optional

from utils import get_logger

logger = get_logger("debounce")

TimerFactory = Callable[[float, Callable[[], None]], Any]

class Debouncer:
    """
    Runs ``callback(value)`` once input has been quiet for ``delay`` seconds.

    Every ``trigger`` cancels the pending timer before starting a new one, so
    at most one timer is alive. Use as a context manager (or call ``cancel``)
    to make sure nothing fires after teardown.
    """

    def __init__(self, delay: float, callback: Callable[[Any], None],
                 timer_factory: TimerFactory = threading.Timer):
        self.delay = delay
        self._callback = callback
        self._timer_factory = timer_factory
        self._timer = None
        self._lock = threading.Lock()
        self._closed = False

    def trigger(self, value: Any):
        with self._lock:
            if self._closed:
                return
            if self._timer is not None:
                self._timer.cancel()
            timer = self._timer_factory(self.delay, lambda: self._fire(timer, value))
            if isinstance(timer, threading.Timer):
                timer.daemon = True
            self._timer = timer
            timer.start()

    def _fire(self, timer, value: Any):
        with self._lock:
            # a newer trigger or cancel() got here first
            if self._timer is not timer or self._closed:
                return
        # stays pending until the callback has finished
        try:
            self._callback(value)
        finally:
            with self._lock:
                if self._timer is timer:
                    self._timer = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def close(self):
        self.cancel()
        with self._lock:
            self._closed = True

    def __enter__(self) -> "Debouncer":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None
