"""
Single-slot buffer for a capture that awaits the user's accept/reject decision.

The slot never overwrites: a second capture is rejected while one is pending,
so an unreviewed capture can't be silently replaced.
"""

import threading
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from screenshoter.core.frames import CaptureFrame
from screenshoter.core.observable import ObservableValue


@dataclass(frozen=True, eq=False)
class PendingCapture:
    """A captured frame together with the collection it should be saved to."""

    frame: CaptureFrame
    collection_key: str


class PendingCaptureSlot:
    """Holds at most one PendingCapture, guarded by a single lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self._capture: Optional[PendingCapture] = None
        self.present: ObservableValue[bool] = ObservableValue(False, name="pending_present")

    def try_set(self, capture: PendingCapture) -> bool:
        with self._lock:
            if self._capture is not None:
                logger.warning(f"pending slot occupied, rejecting capture target={capture.collection_key}")
                return False
            self._capture = capture
        self._publish()
        return True

    def get(self) -> Optional[PendingCapture]:
        with self._lock:
            return self._capture

    def discard(self) -> bool:
        """
        Clear the slot.

        Returns:
            bool: True if a capture was removed
        """
        with self._lock:
            removed = self._capture
            self._capture = None
        if removed is not None:
            logger.debug(f"pending capture discarded target={removed.collection_key}")
        self._publish()
        return removed is not None

    def discard_if(self, capture: PendingCapture) -> bool:
        """Clear the slot only if it still holds this exact capture."""
        with self._lock:
            if self._capture is not capture:
                return False
            self._capture = None
        self._publish()
        return True

    def _is_occupied(self) -> bool:
        with self._lock:
            return self._capture is not None

    def _publish(self) -> None:
        """
        Bring `present` in line with the slot.

        The slot may change between reading it and publishing, so the value is
        re-read after every publish until the two agree.
        """
        while True:
            occupied = self._is_occupied()
            self.present.set(occupied)
            if self._is_occupied() == occupied:
                return
