#!/usr/bin/env python3
"""
Capture Source for Screenshoter

This module defines the capture source contract used by the capture session
and its MSS implementation. The MSS source grabs the selected monitor on a
background thread at a fixed interval and keeps only the newest frame, so
acquiring a frame never waits for the screen.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- MssCaptureSource(monitor_num=1, frame_interval=0.25)

Expected output:
- start() returns the monitor size, e.g. (1920, 1080)
- acquire_latest_frame() returns a RawFrame or None if no new frame is ready
"""

import platform
import threading
from typing import Callable, Dict, List, Optional, Protocol, Tuple

import mss
import mss.exception
from loguru import logger

from screenshoter.core.constants import CAPTURE_SETTINGS
from screenshoter.core.errors import CaptureSourceError
from screenshoter.core.frames import RawFrame


class CaptureSource(Protocol):
    """Contract for anything that produces screen frames."""

    def start(self, on_revoked: Callable[[], None]) -> Tuple[int, int]:
        """Acquire capture resources and return the frame size (width, height)."""

    def acquire_latest_frame(self) -> Optional[RawFrame]:
        """Hand over the newest unread frame without blocking, or None."""

    def stop(self) -> None:
        """Release every resource acquired by start()."""


def get_monitors() -> List[Dict[str, int]]:
    """
    Get information about all available monitors.

    Returns:
        List[Dict[str, int]]: List of monitor dictionaries with keys:
            - top, left, width, height, monitor_num
    """
    try:
        with mss.mss() as sct:
            # Skip the first monitor (which is the "all monitors" combined view)
            return [dict(monitor, **{'monitor_num': i}) for i, monitor in enumerate(sct.monitors) if i > 0]
    except Exception as e:
        logger.error(f"Failed to get monitors: {str(e)}")
        return []


def get_system_info() -> Dict[str, str]:
    """
    Get system information relevant to screen capture.

    Returns:
        Dict[str, str]: System information
    """
    info = {
        "platform": platform.system(),
        "platform_release": platform.release(),
        "python_version": platform.python_version(),
    }

    try:
        info["mss_version"] = mss.__version__
    except AttributeError:
        info["mss_version"] = "unknown"

    return info


class MssCaptureSource:
    """
    Screen capture source backed by MSS.

    A daemon thread grabs the monitor every ``frame_interval`` seconds into a
    single-frame buffer. After ``max_failures`` consecutive grab errors the
    source considers itself revoked and calls the callback given to start().
    """

    def __init__(
        self,
        monitor_num: int = CAPTURE_SETTINGS["DEFAULT_MONITOR"],
        frame_interval: float = CAPTURE_SETTINGS["FRAME_INTERVAL"],
        max_failures: int = CAPTURE_SETTINGS["MAX_CONSECUTIVE_FAILURES"]
    ):
        self.monitor_num = monitor_num
        self.frame_interval = frame_interval
        self.max_failures = max_failures
        self._lock = threading.Lock()
        self._latest: Optional[RawFrame] = None
        self._monitor: Optional[Dict[str, int]] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._on_revoked: Optional[Callable[[], None]] = None

    def start(self, on_revoked: Callable[[], None]) -> Tuple[int, int]:
        try:
            with mss.mss() as sct:
                if self.monitor_num >= len(sct.monitors):
                    raise CaptureSourceError(
                        f"Monitor number {self.monitor_num} out of range (max {len(sct.monitors) - 1})"
                    )
                monitor = dict(sct.monitors[self.monitor_num])
        except mss.exception.ScreenShotError as e:
            raise CaptureSourceError(f"Screen capture unavailable: {e}") from e

        self._monitor = monitor
        self._on_revoked = on_revoked
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="mss-grabber", daemon=True)
        self._thread.start()
        logger.info(f"capture source started monitor={self.monitor_num} size={monitor['width']}x{monitor['height']}")
        return monitor["width"], monitor["height"]

    def acquire_latest_frame(self) -> Optional[RawFrame]:
        with self._lock:
            frame, self._latest = self._latest, None
        return frame

    def stop(self) -> None:
        self._on_revoked = None
        self._stop_event.set()
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=max(1.0, self.frame_interval * 4))
        with self._lock:
            if self._latest is not None:
                self._latest.close()
                self._latest = None
        logger.info("capture source stopped")

    def _run(self) -> None:
        try:
            with mss.mss() as sct:
                self._grab_loop(sct)
        except mss.exception.ScreenShotError as e:
            logger.error(f"capture source lost: {e}")
            self._revoke()

    def _grab_loop(self, sct) -> None:
        failures = 0
        while not self._stop_event.is_set():
            try:
                shot = sct.grab(self._monitor)
                frame = RawFrame(bytes(shot.bgra), shot.width, shot.height)
                failures = 0
            except mss.exception.ScreenShotError as e:
                failures += 1
                logger.warning(f"capture grab failed attempt={failures}: {e}")
                if failures >= self.max_failures:
                    logger.error("capture source revoked after repeated grab failures")
                    self._revoke()
                    return
            else:
                with self._lock:
                    previous, self._latest = self._latest, frame
                if previous is not None:
                    previous.close()
            self._stop_event.wait(self.frame_interval)

    def _revoke(self) -> None:
        callback = self._on_revoked
        if callback is not None:
            callback()
