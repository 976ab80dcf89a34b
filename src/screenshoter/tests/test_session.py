#!/usr/bin/env python3
"""
Unit tests for core/session.py
"""

import os
import sys
import unittest
from unittest.mock import patch

from PIL import Image

# Add parent directory to path to import module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from screenshoter.core.constants import KEY_CURRENT_COLLECTION, KEY_REQUIRE_CONFIRMATION
from screenshoter.core.frames import CaptureFrame
from screenshoter.core.pending import PendingCapture, PendingCaptureSlot
from screenshoter.core.preferences import PreferenceStore
from screenshoter.core.session import CaptureSession
from screenshoter.tests.fakes import FakeCaptureSource


class TestCaptureSession(unittest.TestCase):
    """Test cases for the capture session state machine"""

    def setUp(self):
        """Set up test environment"""
        self.prefs = PreferenceStore()
        self.slot = PendingCaptureSlot()
        self.session = CaptureSession(self.prefs, self.slot)
        self.source = FakeCaptureSource(size=(8, 6))

    def test_initial_state(self):
        """Test defaults before anything was started"""
        state = self.session.state()
        self.assertFalse(state.active)
        self.assertEqual(state.current_collection_key, "")
        self.assertTrue(state.require_confirmation)

    def test_start_and_stop(self):
        """Test the Idle -> Active -> Idle cycle"""
        self.assertTrue(self.session.start(self.source))
        self.assertTrue(self.session.is_active)
        self.assertEqual(self.session.capture_size, (8, 6))

        self.session.stop()
        self.assertFalse(self.session.is_active)
        self.assertIsNone(self.session.capture_size)
        self.assertEqual(self.source.stop_calls, 1)

    def test_restart(self):
        """Test the session can be started again after stopping"""
        self.session.start(self.source)
        self.session.stop()
        self.assertTrue(self.session.start(self.source))
        self.assertTrue(self.session.is_active)

    def test_start_twice_keeps_first_source(self):
        """Test starting an active session is a no-op"""
        other = FakeCaptureSource()
        self.session.start(self.source)
        self.assertTrue(self.session.start(other))
        self.assertFalse(other.started)

    def test_stop_when_idle(self):
        """Test stopping an idle session does nothing"""
        self.session.stop()
        self.assertFalse(self.session.is_active)

    def test_start_failure(self):
        """Test a source that can't start leaves the session idle"""
        self.assertFalse(self.session.start(FakeCaptureSource(fail_start=True)))
        self.assertFalse(self.session.is_active)

    def test_revoked_source_stops_session(self):
        """Test losing the source moves the session to Idle"""
        states = []
        self.session.active.subscribe(states.append)
        self.session.start(self.source)
        self.source.revoke()
        self.assertFalse(self.session.is_active)
        self.assertEqual(states, [False, True, False])

    def test_acquire_latest_frame(self):
        """Test frames are only handed out while active"""
        self.source.push_frame()
        self.assertIsNone(self.session.acquire_latest_frame())

        self.session.start(self.source)
        self.assertIsNotNone(self.session.acquire_latest_frame())
        self.assertIsNone(self.session.acquire_latest_frame())

    def test_set_current_collection(self):
        """Test keys are sanitized and remembered"""
        self.assertEqual(self.session.set_current_collection("My Trip!!"), "my_trip")
        self.assertEqual(self.session.current_collection.value, "my_trip")
        self.assertEqual(self.prefs.get(KEY_CURRENT_COLLECTION), "my_trip")

        restored = CaptureSession(self.prefs, PendingCaptureSlot())
        self.assertEqual(restored.current_collection.value, "my_trip")

    def test_set_require_confirmation_persists(self):
        """Test the confirmation flag is stored"""
        self.session.set_require_confirmation(False)
        self.assertIs(self.prefs.get(KEY_REQUIRE_CONFIRMATION), False)
        self.assertFalse(CaptureSession(self.prefs, PendingCaptureSlot()).require_confirmation.value)

    def test_disabling_confirmation_discards_pending(self):
        """Test turning confirmation off drops an unreviewed capture"""
        frame = CaptureFrame(image=Image.new("RGB", (2, 2)), width=2, height=2)
        self.slot.try_set(PendingCapture(frame=frame, collection_key="movies"))

        self.session.set_require_confirmation(False)

        self.assertIsNone(self.slot.get())

    def test_disabling_confirmation_when_save_fails(self):
        """Test the pending capture is dropped even if the preference can't be written"""
        frame = CaptureFrame(image=Image.new("RGB", (2, 2)), width=2, height=2)
        self.slot.try_set(PendingCapture(frame=frame, collection_key="movies"))

        with patch.object(PreferenceStore, "_commit", side_effect=OSError("disk full")):
            persisted = self.session.set_require_confirmation(False)

        self.assertFalse(persisted)
        self.assertFalse(self.session.require_confirmation.value)
        self.assertIsNone(self.slot.get())
        self.assertFalse(self.slot.present.value)

    def test_set_current_collection_when_save_fails(self):
        """Test selecting a collection still applies when it can't be written"""
        with patch.object(PreferenceStore, "_commit", side_effect=OSError("disk full")):
            key = self.session.set_current_collection("Movies")

        self.assertEqual(key, "movies")
        self.assertEqual(self.session.current_collection.value, "movies")

    def test_revocation_from_released_source_ignored(self):
        """Test a late revocation from an old source leaves the new session running"""
        replacement = FakeCaptureSource()
        self.session.start(self.source)
        self.session.stop()
        self.session.start(replacement)

        self.source.revoke()
        self.assertTrue(self.session.is_active)

        replacement.revoke()
        self.assertFalse(self.session.is_active)


if __name__ == "__main__":
    unittest.main()
