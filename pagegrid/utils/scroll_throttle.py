import math
import time
from typing import Callable

from PySide6.QtCore import QObject, QTimer


class ScrollThrottle(QObject):
    """
    Rate-limits a scroll handler to one call per `interval_ms`.

    A call arriving after the interval has elapsed fires straight away. A call
    arriving inside the interval is parked on a single-shot timer set to the
    remaining delay; any later call in the same window replaces the parked
    arguments and restarts the timer, so the last scroll position of a burst
    is always delivered exactly once.
    """

    def __init__(self, handler: Callable, interval_ms: int = 100, parent=None):
        super().__init__(parent)
        self._handler = handler
        self.interval_ms = interval_ms
        self._last_fire_time: float | None = None
        self._pending_args: tuple | None = None

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire_pending)

    @property
    def has_pending(self) -> bool:
        return self._pending_args is not None

    def __call__(self, *args):
        now = time.monotonic()
        if self._last_fire_time is None:
            elapsed_ms = None
        else:
            elapsed_ms = (now - self._last_fire_time) * 1000.0

        if elapsed_ms is None or elapsed_ms >= self.interval_ms:
            self._timer.stop()
            self._pending_args = None
            self._fire(args, now)
            return

        # Supersede whatever was parked; only the newest arguments survive.
        self._pending_args = args
        self._timer.stop()
        self._timer.start(max(0, math.ceil(self.interval_ms - elapsed_ms)))

    def cancel(self):
        """Drop a parked call without firing it."""
        self._timer.stop()
        self._pending_args = None

    def flush(self):
        """Fire a parked call now instead of waiting for the timer."""
        if self._pending_args is None:
            return
        self._timer.stop()
        self._fire_pending()

    def _fire_pending(self):
        args = self._pending_args
        if args is None:
            return
        self._pending_args = None
        self._fire(args, time.monotonic())

    def _fire(self, args: tuple, now: float):
        self._last_fire_time = now
        self._handler(*args)
