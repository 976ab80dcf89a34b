#!/usr/bin/env python3
"""
Unit tests for core/observable.py and core/pending.py
"""

import os
import sys
import threading
import unittest
from unittest.mock import patch

from PIL import Image

# Add parent directory to path to import module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from screenshoter.core.frames import CaptureFrame
from screenshoter.core.observable import ObservableValue
from screenshoter.core.pending import PendingCapture, PendingCaptureSlot


def _pending(key: str = "movies") -> PendingCapture:
    frame = CaptureFrame(image=Image.new("RGB", (2, 2)), width=2, height=2)
    return PendingCapture(frame=frame, collection_key=key)


class TestObservableValue(unittest.TestCase):
    """Test cases for replay-latest observables"""

    def test_subscribe_replays_current_value(self):
        """Test a new subscriber gets the current value right away"""
        value = ObservableValue("a")
        value.set("b")
        seen = []
        value.subscribe(seen.append)
        self.assertEqual(seen, ["b"])

    def test_set_notifies_only_on_change(self):
        """Test equal values are not republished"""
        value = ObservableValue(0)
        seen = []
        value.subscribe(seen.append)
        self.assertTrue(value.set(1))
        self.assertFalse(value.set(1))
        self.assertEqual(seen, [0, 1])

    def test_unsubscribe(self):
        """Test unsubscribed callbacks are no longer called"""
        value = ObservableValue(False)
        seen = []
        unsubscribe = value.subscribe(seen.append)
        unsubscribe()
        value.set(True)
        self.assertEqual(seen, [False])

    def test_failing_subscriber_does_not_block_others(self):
        """Test one failing callback doesn't stop delivery"""
        value = ObservableValue(0)
        seen = []

        def broken(_):
            raise RuntimeError("subscriber failure")

        value.subscribe(broken)
        value.subscribe(seen.append)
        value.set(5)
        self.assertEqual(seen, [0, 5])
        self.assertEqual(value.value, 5)

    def test_superseded_value_not_delivered(self):
        """Test subscribers are not handed a value that was already replaced"""
        value = ObservableValue("a")
        value.subscribe(lambda v: value.set("c") if v == "b" else None)
        seen = []
        value.subscribe(seen.append)

        value.set("b")

        self.assertEqual(seen, ["a", "c"])
        self.assertEqual(value.value, "c")

    def test_concurrent_sets_end_on_latest_value(self):
        """Test the last delivered value matches the stored one"""
        value = ObservableValue(-1)
        seen = []
        value.subscribe(seen.append)
        barrier = threading.Barrier(8)

        def publish(n):
            barrier.wait()
            for i in range(50):
                value.set(n * 1000 + i)

        threads = [threading.Thread(target=publish, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(seen[-1], value.value)


class TestPendingCaptureSlot(unittest.TestCase):
    """Test cases for the single pending capture slot"""

    def setUp(self):
        """Set up test environment"""
        self.slot = PendingCaptureSlot()
        self.present = []
        self.slot.present.subscribe(self.present.append)

    def test_try_set_never_overwrites(self):
        """Test a second capture is rejected while one is pending"""
        first, second = _pending("a"), _pending("b")
        self.assertTrue(self.slot.try_set(first))
        self.assertFalse(self.slot.try_set(second))
        self.assertIs(self.slot.get(), first)
        self.assertEqual(self.present, [False, True])

    def test_discard(self):
        """Test discarding clears the slot"""
        self.slot.try_set(_pending())
        self.assertTrue(self.slot.discard())
        self.assertIsNone(self.slot.get())
        self.assertFalse(self.slot.discard())
        self.assertEqual(self.present, [False, True, False])

    def test_discard_if_matches_identity(self):
        """Test conditional discard only removes the same capture"""
        first = _pending("a")
        self.slot.try_set(first)
        self.assertFalse(self.slot.discard_if(_pending("a")))
        self.assertIs(self.slot.get(), first)
        self.assertTrue(self.slot.discard_if(first))
        self.assertIsNone(self.slot.get())

    def test_slot_reusable_after_discard(self):
        """Test a new capture can be staged after the slot was cleared"""
        self.slot.try_set(_pending("a"))
        self.slot.discard()
        replacement = _pending("b")
        self.assertTrue(self.slot.try_set(replacement))
        self.assertEqual(self.slot.get().collection_key, "b")


    def test_presence_follows_slot_when_discarded_during_publish(self):
        """Test a discard racing with try_set leaves presence False"""
        real_set = self.slot.present.set
        interleaved = []

        def set_after_discard(value):
            if not interleaved:
                interleaved.append(value)
                self.slot.discard()
            return real_set(value)

        with patch.object(self.slot.present, "set", side_effect=set_after_discard):
            self.assertTrue(self.slot.try_set(_pending()))

        self.assertIsNone(self.slot.get())
        self.assertFalse(self.slot.present.value)
        self.assertFalse(self.present[-1])

    def test_concurrent_try_set_single_winner(self):
        """Test only one of many concurrent captures is staged"""
        captures = [_pending(str(n)) for n in range(8)]
        results = [None] * len(captures)
        barrier = threading.Barrier(len(captures))

        def stage(index):
            barrier.wait()
            results[index] = self.slot.try_set(captures[index])

        threads = [threading.Thread(target=stage, args=(n,)) for n in range(len(captures))]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(results.count(True), 1)
        self.assertIs(self.slot.get(), captures[results.index(True)])
        self.assertTrue(self.slot.present.value)
        self.assertEqual(self.present, [False, True])


if __name__ == "__main__":
    unittest.main()
