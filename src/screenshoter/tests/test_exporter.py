#!/usr/bin/env python3
"""
Unit tests for core/exporter.py
"""

import os
import shutil
import sys
import tempfile
import unittest
import zipfile
from pathlib import Path
from unittest.mock import patch

from PIL import Image

# Add parent directory to path to import module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from screenshoter.core.errors import ErrorKind
from screenshoter.core.exporter import (
    CollectionExporter,
    ExportOutcome,
    ZipJobResult,
    summarize_results,
)
from screenshoter.core.storage import FileMediaStore, ScreenshotLibrary


COLLECTIONS = [("movies", "Movies"), ("food", "Food"), ("my_trip", "My Trip")]


class TestCollectionExporter(unittest.TestCase):
    """Test cases for per-collection zip export"""

    def setUp(self):
        """Set up test environment"""
        self.tmp = tempfile.TemporaryDirectory()
        self.store = FileMediaStore(self.tmp.name)
        self.library = ScreenshotLibrary(self.store)
        self.exporter = CollectionExporter(self.store, self.library)
        self.export_dir = Path(self.tmp.name) / "Download" / "ScreenshotCollections"

        image = Image.new("RGB", (3, 3), color=(9, 9, 9))
        for _ in range(3):
            self.library.persist(image, "movies")
        for _ in range(2):
            self.library.persist(image, "my_trip")

    def tearDown(self):
        """Tear down test environment"""
        self.tmp.cleanup()

    def test_export_skips_empty_collections(self):
        """Test one archive per non-empty collection, in order"""
        results = self.exporter.export_all(COLLECTIONS, "Ada")

        self.assertEqual([r.key for r in results], ["movies", "my_trip"])
        self.assertTrue(all(r.success for r in results))
        self.assertEqual(results[0].output_path.name, "ada-movies-3.zip")
        self.assertEqual(results[1].output_path.name, "ada-my_trip-2.zip")
        self.assertEqual(sorted(p.name for p in self.export_dir.iterdir()), ["ada-movies-3.zip", "ada-my_trip-2.zip"])

    def test_archive_contents(self):
        """Test archives hold every image under its display name"""
        results = self.exporter.export_all(COLLECTIONS, "Ada")
        expected = [item.display_name for item in self.library.list_items("movies")]

        with zipfile.ZipFile(results[0].output_path) as archive:
            self.assertEqual(sorted(archive.namelist()), sorted(expected))
            self.assertIsNone(archive.testzip())

    def test_progress_reports_position_over_all_collections(self):
        """Test progress indices include skipped collections"""
        progress = []
        self.exporter.export_all(COLLECTIONS, "Ada", lambda i, n, label: progress.append((i, n, label)))
        self.assertEqual(progress, [(1, 3, "Movies"), (3, 3, "My Trip")])

    def test_failing_progress_callback_is_ignored(self):
        """Test a broken callback doesn't stop the export"""
        def broken(*_):
            raise RuntimeError("ui went away")

        results = self.exporter.export_all(COLLECTIONS, "Ada", broken)
        self.assertEqual(len(results), 2)
        self.assertTrue(all(r.success for r in results))

    def test_unreadable_item_is_skipped(self):
        """Test an image that can't be read is left out of its archive"""
        unreadable = self.library.list_items("movies")[0].handle
        original = self.store.open_read_stream

        def open_read_stream(handle):
            if handle.path == unreadable.path:
                raise OSError("permission denied")
            return original(handle)

        with patch.object(self.store, "open_read_stream", side_effect=open_read_stream):
            results = self.exporter.export_all(COLLECTIONS, "Ada")

        self.assertTrue(results[0].success)
        self.assertEqual(results[0].file_count, 3)
        with zipfile.ZipFile(results[0].output_path) as archive:
            self.assertEqual(len(archive.namelist()), 2)
            self.assertNotIn(unreadable.filename, archive.namelist())

    def test_destination_unavailable(self):
        """Test a destination that can't be created"""
        with patch.object(self.store, "insert", side_effect=OSError("read-only")):
            results = self.exporter.export_all(COLLECTIONS, "Ada")

        self.assertEqual(len(results), 2)
        self.assertFalse(any(r.success for r in results))
        self.assertEqual(results[0].error_message, ErrorKind.DESTINATION_UNAVAILABLE.message)

    def test_write_failure_removes_partial_archive(self):
        """Test a failed archive is deleted and the batch continues"""
        real_copy = shutil.copyfileobj
        calls = []

        def flaky_copy(src, dst, *args):
            calls.append(src)
            if len(calls) == 1:
                raise OSError("device gone")
            return real_copy(src, dst, *args)

        with patch('screenshoter.core.exporter.shutil.copyfileobj', side_effect=flaky_copy):
            results = self.exporter.export_all(COLLECTIONS, "Ada")

        self.assertFalse(results[0].success)
        self.assertTrue(results[0].error_message.startswith(ErrorKind.ARCHIVE_WRITE_FAILED.message))
        self.assertIsNone(results[0].output_path)
        self.assertTrue(results[1].success)
        self.assertEqual([p.name for p in self.export_dir.iterdir()], ["ada-my_trip-2.zip"])

    def test_blank_label_uses_default(self):
        """Test the default collection is exported as Default"""
        self.library.persist(Image.new("RGB", (2, 2)), "")
        results = self.exporter.export_all([("", "  ")], "Ada")
        self.assertEqual(results[0].label, "Default")
        self.assertEqual(results[0].output_path.name, "ada-default-1.zip")

    def test_nothing_to_export(self):
        """Test exporting only empty collections"""
        self.assertEqual(self.exporter.export_all([("food", "Food")], "Ada"), [])


class TestSummarizeResults(unittest.TestCase):
    """Test cases for export outcome classification"""

    def _result(self, success):
        return ZipJobResult(key="k", label="K", file_count=1, success=success)

    def test_outcomes(self):
        """Test each outcome"""
        self.assertEqual(summarize_results([]).outcome, ExportOutcome.NOTHING_TO_EXPORT)
        self.assertEqual(summarize_results([self._result(False)]).outcome, ExportOutcome.ALL_FAILED)
        self.assertEqual(
            summarize_results([self._result(True), self._result(False)]).outcome, ExportOutcome.PARTIAL
        )
        summary = summarize_results([self._result(True), self._result(True)])
        self.assertEqual(summary.outcome, ExportOutcome.ALL_SUCCEEDED)
        self.assertEqual((summary.success_count, summary.failure_count), (2, 0))


if __name__ == "__main__":
    unittest.main()
