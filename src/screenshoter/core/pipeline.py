#!/usr/bin/env python3
"""
Capture Pipeline for Screenshoter

This module turns the newest screen frame into either a saved screenshot
(direct mode) or a staged capture awaiting review (preview mode), and
settles staged captures on confirm or reject.

Capture -> encode -> persist -> notify runs serialized; the raw frame is
released on every exit path. Listeners learn about saved screenshots
through the ``capture_events`` observable, which carries the completion
time in epoch milliseconds.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- pipeline.capture_once(CaptureMode.DIRECT)
- pipeline.capture_once(CaptureMode.PREVIEW); pipeline.confirm_pending()

Expected output:
- CaptureResult(mode=DIRECT, location=MediaHandle(...), collection_key="movies")
- CaptureResult(mode=PREVIEW, staged=True) then CaptureResult(location=MediaHandle(...))
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from loguru import logger

from screenshoter.core.errors import ErrorKind
from screenshoter.core.frames import CaptureFrame
from screenshoter.core.observable import ObservableValue
from screenshoter.core.pending import PendingCapture, PendingCaptureSlot
from screenshoter.core.sanitizer import sanitize
from screenshoter.core.session import CaptureSession
from screenshoter.core.storage import MediaHandle, ScreenshotLibrary
from screenshoter.core.utils import current_timestamp_ms, format_error_response


class CaptureMode(str, Enum):
    DIRECT = "direct"
    PREVIEW = "preview"


@dataclass(frozen=True)
class CaptureResult:
    """Outcome of a capture, confirm or reject."""

    mode: CaptureMode
    error: Optional[ErrorKind] = None
    location: Optional[MediaHandle] = None
    collection_key: str = ""
    frame: Optional[CaptureFrame] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def staged(self) -> bool:
        """True when the capture sits in the pending slot instead of storage."""
        return self.success and self.location is None and self.mode == CaptureMode.PREVIEW

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "success": self.success,
            "mode": self.mode.value,
            "staged": self.staged,
            "collection_key": self.collection_key,
        }
        if self.location is not None:
            data["file"] = str(self.location.path)
            data["uri"] = self.location.uri
        if self.frame is not None:
            data["width"] = self.frame.width
            data["height"] = self.frame.height
        if self.error is not None:
            data.update(format_error_response(self.error))
        return data


class CapturePipeline:
    """Runs captures against a session and settles pending captures."""

    def __init__(self, session: CaptureSession, slot: PendingCaptureSlot, library: ScreenshotLibrary):
        self.session = session
        self.slot = slot
        self.library = library
        self.capture_events: ObservableValue[int] = ObservableValue(0, name="capture_events")
        self._capture_lock = threading.Lock()
        self._confirm_lock = threading.Lock()

    def capture_once(self, mode: Optional[CaptureMode] = None, collection_key: Optional[str] = None) -> CaptureResult:
        """
        Capture the newest frame.

        Args:
            mode: DIRECT or PREVIEW; derived from the session's confirmation
                preference when omitted
            collection_key: Target collection; the session's current
                collection when omitted

        Returns:
            CaptureResult: Saved location, staged capture, or error kind
        """
        if mode is None:
            mode = CaptureMode.PREVIEW if self.session.require_confirmation.value else CaptureMode.DIRECT

        with self._capture_lock:
            if not self.session.is_active:
                logger.debug("capture skipped, session not active")
                return CaptureResult(mode, error=ErrorKind.SESSION_NOT_ACTIVE)

            target = sanitize(collection_key if collection_key is not None else self.session.current_collection.value)

            # Keep the frame buffer for the next attempt when staging can't succeed
            if mode == CaptureMode.PREVIEW and self.slot.get() is not None:
                return CaptureResult(mode, error=ErrorKind.CAPTURE_PENDING, collection_key=target)

            raw = self.session.acquire_latest_frame()
            if raw is None:
                if not self.session.is_active:
                    logger.debug("capture skipped, session stopped")
                    return CaptureResult(mode, error=ErrorKind.SESSION_NOT_ACTIVE)
                logger.debug("capture skipped, no frame ready")
                return CaptureResult(mode, error=ErrorKind.NO_FRAME_AVAILABLE, collection_key=target)

            logger.info(f"capture start mode={mode.value} target={target or 'default'}")
            try:
                try:
                    frame = raw.to_capture_frame()
                except Exception:
                    logger.exception("frame conversion failed")
                    return CaptureResult(mode, error=ErrorKind.FRAME_CONVERSION_FAILED, collection_key=target)

                if mode == CaptureMode.PREVIEW:
                    if not self.slot.try_set(PendingCapture(frame=frame, collection_key=target)):
                        return CaptureResult(mode, error=ErrorKind.CAPTURE_PENDING, collection_key=target)
                    logger.info(f"capture staged target={target or 'default'}")
                    return CaptureResult(mode, collection_key=target, frame=frame)

                location = self.library.persist(frame.image, target)
                if location is None:
                    return CaptureResult(mode, error=ErrorKind.PERSIST_FAILED, collection_key=target)
                self._emit_capture_completed()
                return CaptureResult(mode, location=location, collection_key=target, frame=frame)
            finally:
                raw.close()

    def confirm_pending(self) -> CaptureResult:
        """
        Save the pending capture into its target collection.

        The slot is cleared only when the save succeeds.
        """
        with self._confirm_lock:
            pending = self.slot.get()
            if pending is None:
                return CaptureResult(CaptureMode.PREVIEW, error=ErrorKind.NOTHING_PENDING)

            location = self.library.persist(pending.frame.image, pending.collection_key)
            if location is None:
                logger.warning(f"confirm failed, keeping pending capture target={pending.collection_key}")
                return CaptureResult(
                    CaptureMode.PREVIEW, error=ErrorKind.PERSIST_FAILED, collection_key=pending.collection_key
                )

            self.slot.discard_if(pending)
            self._emit_capture_completed()
            logger.info(f"capture confirmed target={pending.collection_key or 'default'}")
            return CaptureResult(
                CaptureMode.PREVIEW, location=location, collection_key=pending.collection_key, frame=pending.frame
            )

    def reject_pending(self) -> bool:
        """Drop the pending capture. Returns True if there was one."""
        removed = self.slot.discard()
        if removed:
            logger.info("pending capture rejected")
        return removed

    def _emit_capture_completed(self) -> None:
        self.capture_events.set(current_timestamp_ms())
