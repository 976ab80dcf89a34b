#!/usr/bin/env python3
"""
Capture Session for Screenshoter

Owns the lifecycle of the single active capture source and the session
state shown to the user: whether capture is active, which collection new
captures go to, and whether each capture needs confirmation.

State machine: Idle -> Active -> Idle, restartable at any time. start(),
stop() and frame acquisition are mutually exclusive; the state observables
have their own locks so readers are never blocked by capture.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- session.start(MssCaptureSource())
- session.set_current_collection("My Trip!!")

Expected output:
- session.active.value == True
- session.current_collection.value == "my_trip"
"""

import threading
from dataclasses import dataclass
from functools import partial
from typing import Optional, Tuple

from loguru import logger

from screenshoter.core.constants import (
    DEFAULT_COLLECTION_KEY,
    KEY_CURRENT_COLLECTION,
    KEY_REQUIRE_CONFIRMATION,
)
from screenshoter.core.errors import CaptureSourceError
from screenshoter.core.frames import RawFrame
from screenshoter.core.observable import ObservableValue
from screenshoter.core.pending import PendingCaptureSlot
from screenshoter.core.preferences import PreferenceStore
from screenshoter.core.sanitizer import sanitize
from screenshoter.core.source import CaptureSource


@dataclass(frozen=True)
class SessionState:
    """Snapshot of the session state."""

    active: bool
    current_collection_key: str
    require_confirmation: bool


class CaptureSession:
    """Lifecycle and state of one capture source."""

    def __init__(self, preferences: PreferenceStore, pending_slot: PendingCaptureSlot):
        self.preferences = preferences
        self.pending_slot = pending_slot
        self._lock = threading.RLock()
        self._source: Optional[CaptureSource] = None
        self.capture_size: Optional[Tuple[int, int]] = None

        self.active: ObservableValue[bool] = ObservableValue(False, name="session_active")
        self.current_collection: ObservableValue[str] = ObservableValue(
            sanitize(preferences.get(KEY_CURRENT_COLLECTION, DEFAULT_COLLECTION_KEY)), name="current_collection"
        )
        self.require_confirmation: ObservableValue[bool] = ObservableValue(
            bool(preferences.get(KEY_REQUIRE_CONFIRMATION, True)), name="require_confirmation"
        )

    @property
    def is_active(self) -> bool:
        return self.active.value

    def state(self) -> SessionState:
        return SessionState(
            active=self.active.value,
            current_collection_key=self.current_collection.value,
            require_confirmation=self.require_confirmation.value,
        )

    def start(self, source: CaptureSource) -> bool:
        """
        Start capturing from a source.

        Args:
            source: Capture source to take ownership of

        Returns:
            bool: True if the session is active afterwards
        """
        with self._lock:
            if self.active.value:
                logger.debug("session start ignored, already active")
                return True
            try:
                self.capture_size = source.start(on_revoked=partial(self._on_revoked, source))
            except CaptureSourceError as e:
                logger.error(f"session start failed: {e}")
                return False
            self._source = source
            self.active.set(True)
        logger.info(f"session started size={self.capture_size}")
        return True

    def stop(self) -> None:
        """Release the source and go idle. Calling it while idle does nothing."""
        with self._lock:
            source = self._source
            if source is None and not self.active.value:
                return
            self._source = None
            self.capture_size = None
            self.active.set(False)
            if source is not None:
                try:
                    source.stop()
                except Exception:
                    logger.exception("capture source failed to stop cleanly")
        logger.info("session stopped")

    def _on_revoked(self, source: CaptureSource) -> None:
        with self._lock:
            if self._source is not source:
                logger.debug("revocation from a released source ignored")
                return
            logger.warning("capture source revoked")
            self.stop()

    def acquire_latest_frame(self) -> Optional[RawFrame]:
        """Newest frame from the active source, or None. Never waits."""
        with self._lock:
            if not self.active.value or self._source is None:
                return None
            return self._source.acquire_latest_frame()

    def set_current_collection(self, raw_key: str) -> str:
        """Select the collection new captures go to; the key is kept even if saving it fails."""
        key = sanitize(raw_key)
        if self.current_collection.set(key):
            self._persist(KEY_CURRENT_COLLECTION, key)
        logger.debug(f"current collection key={key}")
        return key

    def set_require_confirmation(self, enabled: bool) -> bool:
        """
        Update the confirmation preference.

        Turning confirmation off discards a capture that is still awaiting
        review instead of saving it. The new setting applies to this session
        even when it can't be written to disk.

        Returns:
            bool: False if the preference could not be persisted
        """
        if not self.require_confirmation.set(enabled):
            return True
        if not enabled:
            self.pending_slot.discard()
        logger.info(f"require confirmation={enabled}")
        return self._persist(KEY_REQUIRE_CONFIRMATION, enabled)

    def _persist(self, key: str, value) -> bool:
        try:
            self.preferences.put(key, value)
        except OSError:
            logger.exception(f"failed to persist preference key={key}")
            return False
        return True
