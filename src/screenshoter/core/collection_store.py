#!/usr/bin/env python3
"""
Collection Store for Screenshoter

Durable registry of user-defined collections layered on top of the fixed
built-in set. Custom collections are stored as "key||label" records in a
string set, so record order on disk carries no meaning; every read sorts
them case-insensitively by label.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- store.add("My Trip!!")
- store.add("my trip")

Expected output:
- AddResult(collections=[Collection(key="my_trip", label="My Trip!!")], error=None)
- AddResult(collections=[], error=ErrorKind.DUPLICATE_KEY)
"""

import threading
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from loguru import logger

from screenshoter.core.constants import (
    BUILTIN_COLLECTION_DEFINITIONS,
    DEFAULT_COLLECTION_KEY,
    ENTRY_DELIMITER,
    KEY_CUSTOM_COLLECTIONS,
    KEY_LAST_USERNAME,
)
from screenshoter.core.errors import ErrorKind
from screenshoter.core.preferences import PreferenceStore
from screenshoter.core.sanitizer import sanitize
from screenshoter.core.utils import truncate_large_value


@dataclass(frozen=True)
class Collection:
    """A named grouping of captured images, identified by a sanitized key."""

    key: str
    label: str


BUILTIN_COLLECTIONS = tuple(Collection(key, label) for key, label in BUILTIN_COLLECTION_DEFINITIONS)
BUILTIN_KEYS = frozenset(collection.key for collection in BUILTIN_COLLECTIONS)


@dataclass
class AddResult:
    """Outcome of CollectionStore.add."""

    collections: List[Collection] = field(default_factory=list)
    error: Optional[ErrorKind] = None

    @property
    def success(self) -> bool:
        return self.error is None


def _sort_by_label(collections: Iterable[Collection]) -> List[Collection]:
    return sorted(collections, key=lambda c: c.label.lower())


def encode_entry(collection: Collection) -> str:
    return f"{collection.key}{ENTRY_DELIMITER}{collection.label}"


def decode_entry(value: str) -> Optional[Collection]:
    """
    Decode a stored record, returning None for malformed ones.

    Args:
        value: Stored "key||label" record

    Returns:
        Optional[Collection]: Decoded collection, or None if the record has no
            delimiter or an empty key
    """
    key, delimiter, label = value.partition(ENTRY_DELIMITER)
    if not delimiter or not key:
        return None
    return Collection(key, label)


class CollectionStore:
    """
    Registry of custom collections plus the last name used for an export.

    Writes are serialized with a lock; reads go straight to the preference
    store.
    """

    def __init__(self, preferences: PreferenceStore):
        self.preferences = preferences
        self._write_lock = threading.Lock()

    def load(self) -> List[Collection]:
        """Return custom collections only, sorted by label (case-insensitive)."""
        stored = self.preferences.get(KEY_CUSTOM_COLLECTIONS, set()) or set()
        decoded = []
        for record in stored:
            collection = decode_entry(record)
            if collection is None:
                logger.debug(f"Dropping malformed collection record {truncate_large_value(record)!r}")
                continue
            decoded.append(collection)
        return _sort_by_label(decoded)

    def add(self, raw_label: str, reserved_keys: Optional[Set[str]] = None) -> AddResult:
        """
        Add a custom collection.

        Args:
            raw_label: Name typed by the user
            reserved_keys: Keys that may not be reused. Defaults to the
                built-in keys; stored custom keys are always checked too.

        Returns:
            AddResult: Updated custom list on success, or an error kind
        """
        trimmed = (raw_label or "").strip()
        if not trimmed:
            return AddResult(error=ErrorKind.EMPTY_LABEL)

        reserved = BUILTIN_KEYS if reserved_keys is None else reserved_keys
        key = sanitize(trimmed)
        if key == DEFAULT_COLLECTION_KEY or key in reserved:
            return AddResult(error=ErrorKind.DUPLICATE_KEY)

        with self._write_lock:
            current = self.load()
            if any(collection.key == key for collection in current):
                return AddResult(error=ErrorKind.DUPLICATE_KEY)

            label = trimmed.replace(ENTRY_DELIMITER, " ")
            current.append(Collection(key, label))
            updated = _sort_by_label(current)
            self.preferences.put(KEY_CUSTOM_COLLECTIONS, {encode_entry(c) for c in updated})

        logger.info(f"collection added key={truncate_large_value(key)} label={truncate_large_value(label)!r}")
        return AddResult(collections=updated)

    def all_collections(self) -> List[Collection]:
        """
        Return every collection: Default first, then built-ins and custom
        collections merged and sorted by label.
        """
        default, *others = BUILTIN_COLLECTIONS
        return [default] + _sort_by_label(list(others) + self.load())

    def reserved_keys(self) -> Set[str]:
        return set(BUILTIN_KEYS) | {collection.key for collection in self.load()}

    def folder_label(self, key: str) -> str:
        """
        Resolve the display label for a collection key.

        Unknown keys are shown with their first character upper-cased.
        """
        sanitized = sanitize(key)
        for collection in BUILTIN_COLLECTIONS:
            if collection.key == sanitized:
                return collection.label
        for collection in self.load():
            if collection.key == sanitized:
                return collection.label
        return sanitized[:1].upper() + sanitized[1:]

    def get_last_used_export_name(self) -> Optional[str]:
        return self.preferences.get(KEY_LAST_USERNAME)

    def save_last_used_export_name(self, name: str) -> None:
        self.preferences.put(KEY_LAST_USERNAME, name)


if __name__ == "__main__":
    """Validate collection store with an in-memory preference store"""
    import sys

    all_validation_failures = []
    total_tests = 0

    store = CollectionStore(PreferenceStore())

    # Test 1: Add a collection
    total_tests += 1
    result = store.add("My Trip!!")
    if not result.success or result.collections != [Collection("my_trip", "My Trip!!")]:
        all_validation_failures.append(f"Add test: unexpected result {result}")

    # Test 2: Duplicate by sanitized key
    total_tests += 1
    result = store.add("my trip")
    if result.error is not ErrorKind.DUPLICATE_KEY:
        all_validation_failures.append(f"Duplicate test: expected DUPLICATE_KEY, got {result.error}")

    # Test 3: Built-in keys are reserved
    total_tests += 1
    result = store.add("Movies")
    if result.error is not ErrorKind.DUPLICATE_KEY:
        all_validation_failures.append(f"Reserved test: expected DUPLICATE_KEY, got {result.error}")

    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        sys.exit(0)
