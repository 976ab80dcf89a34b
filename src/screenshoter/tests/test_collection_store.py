#!/usr/bin/env python3
"""
Unit tests for core/collection_store.py
"""

import os
import sys
import unittest

# Add parent directory to path to import module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from screenshoter.core.collection_store import (
    BUILTIN_COLLECTIONS,
    Collection,
    CollectionStore,
    decode_entry,
    encode_entry,
)
from screenshoter.core.constants import KEY_CUSTOM_COLLECTIONS
from screenshoter.core.errors import ErrorKind
from screenshoter.core.preferences import PreferenceStore


class TestCollectionStore(unittest.TestCase):
    """Test cases for the collection registry"""

    def setUp(self):
        """Set up test environment"""
        self.prefs = PreferenceStore()
        self.store = CollectionStore(self.prefs)

    def test_add_collection(self):
        """Test adding a custom collection"""
        result = self.store.add("My Trip!!")
        self.assertTrue(result.success)
        self.assertEqual(result.collections, [Collection("my_trip", "My Trip!!")])
        self.assertEqual(self.store.load(), [Collection("my_trip", "My Trip!!")])

    def test_add_duplicate_by_key(self):
        """Test labels that sanitize to a taken key are rejected"""
        self.store.add("My Trip!!")
        result = self.store.add("my trip")
        self.assertEqual(result.error, ErrorKind.DUPLICATE_KEY)
        self.assertEqual(len(self.store.load()), 1)

    def test_add_empty_label(self):
        """Test blank labels are rejected"""
        for label in ["", "   ", None]:
            result = self.store.add(label)
            self.assertEqual(result.error, ErrorKind.EMPTY_LABEL)
        self.assertEqual(self.store.load(), [])

    def test_add_builtin_key(self):
        """Test built-in keys can't be reused"""
        self.assertEqual(self.store.add("Movies").error, ErrorKind.DUPLICATE_KEY)
        self.assertEqual(self.store.add("  FOOD ").error, ErrorKind.DUPLICATE_KEY)

    def test_add_label_without_usable_characters(self):
        """Test labels that sanitize to the default key are rejected"""
        self.assertEqual(self.store.add("!!!").error, ErrorKind.DUPLICATE_KEY)

    def test_add_with_reserved_keys(self):
        """Test caller supplied reserved keys"""
        result = self.store.add("Trips", reserved_keys={"trips"})
        self.assertEqual(result.error, ErrorKind.DUPLICATE_KEY)

    def test_load_sorted_case_insensitive(self):
        """Test custom collections are sorted by label"""
        for label in ["zebra", "Apple", "mango"]:
            self.store.add(label)
        self.assertEqual([c.label for c in self.store.load()], ["Apple", "mango", "zebra"])

    def test_load_drops_malformed_records(self):
        """Test records without delimiter or key are skipped"""
        self.prefs.put(KEY_CUSTOM_COLLECTIONS, {"ok||Ok", "no-delimiter", "||No key"})
        self.assertEqual(self.store.load(), [Collection("ok", "Ok")])

    def test_all_collections_order(self):
        """Test Default comes first and the rest is merged by label"""
        self.store.add("Anime")
        collections = self.store.all_collections()
        self.assertEqual(collections[0], Collection("", "Default"))
        self.assertEqual(collections[1], Collection("anime", "Anime"))
        self.assertEqual(len(collections), len(BUILTIN_COLLECTIONS) + 1)
        labels = [c.label.lower() for c in collections[1:]]
        self.assertEqual(labels, sorted(labels))

    def test_folder_label(self):
        """Test label lookup for built-in, custom and unknown keys"""
        self.store.add("My Trip!!")
        self.assertEqual(self.store.folder_label("movies"), "Movies")
        self.assertEqual(self.store.folder_label(""), "Default")
        self.assertEqual(self.store.folder_label("my_trip"), "My Trip!!")
        self.assertEqual(self.store.folder_label("unknown"), "Unknown")

    def test_last_used_export_name(self):
        """Test the remembered export name"""
        self.assertIsNone(self.store.get_last_used_export_name())
        self.store.save_last_used_export_name("alice")
        self.assertEqual(self.store.get_last_used_export_name(), "alice")

    def test_add_label_with_delimiter(self):
        """Test the record delimiter is replaced in stored labels"""
        result = self.store.add("A||B")
        self.assertTrue(result.success)
        self.assertEqual(result.collections, [Collection("a_b", "A B")])
        self.assertEqual(self.prefs.get(KEY_CUSTOM_COLLECTIONS), {"a_b||A B"})

        reopened = CollectionStore(self.prefs)
        self.assertEqual(reopened.load(), [Collection("a_b", "A B")])

    def test_entry_codec(self):
        """Test stored record format"""
        self.assertEqual(encode_entry(Collection("my_trip", "My Trip")), "my_trip||My Trip")
        self.assertEqual(decode_entry("a||Label || with bars"), Collection("a", "Label || with bars"))
        self.assertIsNone(decode_entry("plain"))


if __name__ == "__main__":
    unittest.main()
