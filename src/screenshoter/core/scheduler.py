"""
Periodic capture trigger.

Calls an action every ``interval`` seconds on a daemon thread until stopped.
The action is expected to hand the real work to the capture worker and
return quickly.
"""

import threading
from typing import Callable, Optional

from loguru import logger


class PeriodicCapture:
    def __init__(self, action: Callable[[], object], interval: float):
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")
        self.action = action
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> bool:
        """Start ticking. Returns False if already running."""
        with self._lock:
            if self.is_running:
                return False
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._run, name="auto-capture", daemon=True)
            self._thread.start()
        logger.info(f"auto capture started interval={self.interval}s")
        return True

    def stop(self) -> None:
        with self._lock:
            thread = self._thread
            self._thread = None
            self._stop_event.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.interval + 1.0)
            logger.info("auto capture stopped")

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            try:
                self.action()
            except Exception:
                logger.exception("auto capture tick failed")
