#!/usr/bin/env python3
"""
Unit tests for core/storage.py
"""

import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from PIL import Image

# Add parent directory to path to import module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from screenshoter.core.storage import (
    FileMediaStore,
    ScreenshotLibrary,
    collection_namespace,
)


class TestFileMediaStore(unittest.TestCase):
    """Test cases for the directory backed media store"""

    def setUp(self):
        """Set up test environment"""
        self.tmp = tempfile.TemporaryDirectory()
        self.store = FileMediaStore(self.tmp.name)

    def tearDown(self):
        """Tear down test environment"""
        self.tmp.cleanup()

    def test_pending_items_are_hidden(self):
        """Test staged items only appear after commit"""
        handle = self.store.insert("Download/Test", "a.zip", "application/zip")
        with self.store.open_write_stream(handle) as stream:
            stream.write(b"data")
        self.assertEqual(self.store.query("Download/Test"), [])

        committed = self.store.commit_pending(handle)
        items = self.store.query("Download/Test")
        self.assertEqual([item.display_name for item in items], ["a.zip"])
        self.assertFalse(committed.pending)
        self.assertEqual(committed.path.read_bytes(), b"data")
        self.assertFalse(handle.staging_path.exists())

    def test_name_collision_gets_suffix(self):
        """Test a taken name is never overwritten"""
        first = self.store.commit_pending(self.store.insert("ns", "shot.png", "image/png"))
        second = self.store.insert("ns", "shot.png", "image/png")
        third = self.store.insert("ns", "shot.png", "image/png")
        self.assertEqual(first.filename, "shot.png")
        self.assertEqual(second.filename, "shot_1.png")
        self.assertEqual(third.filename, "shot_2.png")

    def test_delete_pending(self):
        """Test deleting a staged item removes the staging file"""
        handle = self.store.insert("ns", "gone.png", "image/png")
        self.store.delete(handle)
        self.assertFalse(handle.staging_path.exists())
        self.store.delete(handle)

    def test_query_missing_namespace(self):
        """Test querying an unknown namespace"""
        self.assertEqual(self.store.query("nothing/here"), [])

    def test_query_skips_sub_namespaces(self):
        """Test only files directly in the namespace are listed"""
        self.store.commit_pending(self.store.insert("base", "top.png", "image/png"))
        self.store.commit_pending(self.store.insert("base/child", "nested.png", "image/png"))
        self.assertEqual([i.display_name for i in self.store.query("base")], ["top.png"])


class TestScreenshotLibrary(unittest.TestCase):
    """Test cases for writing screenshots into collections"""

    def setUp(self):
        """Set up test environment"""
        self.tmp = tempfile.TemporaryDirectory()
        self.store = FileMediaStore(self.tmp.name)
        self.library = ScreenshotLibrary(self.store)
        self.image = Image.new("RGB", (6, 4), color=(0, 128, 255))

    def tearDown(self):
        """Tear down test environment"""
        self.tmp.cleanup()

    def test_collection_namespace(self):
        """Test default and named collection namespaces"""
        self.assertEqual(collection_namespace(""), "Pictures/Screenshoter")
        self.assertEqual(collection_namespace("movies"), "Pictures/Screenshoter/movies")
        self.assertEqual(collection_namespace("My Trip!!"), "Pictures/Screenshoter/my_trip")

    def test_persist_into_collection(self):
        """Test a screenshot lands in its collection folder"""
        handle = self.library.persist(self.image, "movies")
        self.assertIsNotNone(handle)
        self.assertEqual(handle.path.parent, Path(self.tmp.name) / "Pictures" / "Screenshoter" / "movies")
        self.assertRegex(handle.filename, r"^Screenshot_\d+\.png$")
        self.assertEqual(Image.open(handle.path).size, (6, 4))

    def test_persist_default_collection(self):
        """Test the default collection uses the base folder"""
        handle = self.library.persist(self.image, "")
        self.assertEqual(handle.path.parent, Path(self.tmp.name) / "Pictures" / "Screenshoter")
        self.assertEqual(len(self.library.list_items("")), 1)
        self.assertEqual(len(self.library.list_items("movies")), 0)

    def test_persist_unique_names(self):
        """Test back to back captures get distinct files"""
        names = {self.library.persist(self.image, "food").filename for _ in range(3)}
        self.assertEqual(len(names), 3)

    @patch('screenshoter.core.storage.encode_image')
    def test_persist_failure_cleans_up(self, mock_encode):
        """Test a failed write leaves nothing behind"""
        mock_encode.side_effect = OSError("disk full")
        self.assertIsNone(self.library.persist(self.image, "movies"))

        folder = Path(self.tmp.name) / "Pictures" / "Screenshoter" / "movies"
        self.assertEqual(list(folder.iterdir()), [])

    def test_get_folder_item_counts(self):
        """Test counts are keyed by the keys as passed"""
        self.library.persist(self.image, "movies")
        self.library.persist(self.image, "movies")
        self.library.persist(self.image, "")
        counts = self.library.get_folder_item_counts(["", "Movies", "food"])
        self.assertEqual(counts, {"": 1, "Movies": 2, "food": 0})


if __name__ == "__main__":
    unittest.main()
