#!/usr/bin/env python3
"""
Constants for Screenshoter

This module defines constants used throughout the capture, storage and export
functionality, ensuring consistent configuration across the application.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- None (module contains only constants)

Expected output:
- None (module contains only constants)
"""

from typing import Dict, Any, Tuple

# Key of the built-in "Default" collection
DEFAULT_COLLECTION_KEY: str = ""

# Display label used when a collection arrives without one
DEFAULT_COLLECTION_LABEL: str = "Default"

# Built-in collections in display order (key, label)
BUILTIN_COLLECTION_DEFINITIONS: Tuple[Tuple[str, str], ...] = (
    ("", "Default"),
    ("movies", "Movies"),
    ("food", "Food"),
    ("shopping", "Shopping"),
    ("conversation", "Conversation"),
    ("location", "Location"),
    ("coupon", "Coupon"),
    ("calendar", "Calendar"),
    ("restaurant", "Restaurant"),
    ("fashion", "Fashion"),
    ("transportation", "Transportation"),
    ("humor", "Humor"),
    ("article", "Article"),
    ("music", "Music"),
    ("people", "People"),
    ("books", "Books"),
    ("stock", "Stock"),
    ("sports", "Sports"),
    ("health", "Health"),
)

# Preference namespaces (one file each, independently resettable)
COLLECTION_PREFS_NAMESPACE: str = "collection_prefs"
SESSION_PREFS_NAMESPACE: str = "screenshoter_preferences"

# Preference keys
KEY_CUSTOM_COLLECTIONS: str = "custom_collection_entries"
KEY_LAST_USERNAME: str = "last_zip_username"
KEY_REQUIRE_CONFIRMATION: str = "require_confirmation"
KEY_CURRENT_COLLECTION: str = "current_collection"

# Separator between key and label in a stored custom collection record
ENTRY_DELIMITER: str = "||"

# Storage namespaces inside the media root
IMAGE_BASE_NAMESPACE: str = "Pictures/Screenshoter"
EXPORT_NAMESPACE: str = "Download/ScreenshotCollections"

# Image settings for capture, storage and preview
IMAGE_SETTINGS: Dict[str, Any] = {
    "FORMAT": "PNG",  # Lossless storage format
    "MIME_TYPE": "image/png",
    "EXTENSION": "png",
    "FILENAME_PREFIX": "Screenshot",
    "PREVIEW_MAX_WIDTH": 640,  # Maximum width for preview thumbnails
    "PREVIEW_MAX_HEIGHT": 640,  # Maximum height for preview thumbnails
}

ZIP_MIME_TYPE: str = "application/zip"

# Fallback segments for zip file names
ZIP_USER_FALLBACK: str = "user"
ZIP_LABEL_FALLBACK: str = "collection"

# Capture source settings
CAPTURE_SETTINGS: Dict[str, Any] = {
    "DEFAULT_MONITOR": 1,  # 1 is the primary monitor in mss
    "FRAME_INTERVAL": 0.25,  # Seconds between background grabs
    "MAX_CONSECUTIVE_FAILURES": 5,  # Grab failures before the source is revoked
    "AUTO_CAPTURE_INTERVAL": 5.0,  # Seconds between periodic captures
}

# Logging settings
LOG_MAX_STR_LEN: int = 100  # Maximum string length for truncated logging


if __name__ == "__main__":
    """Validate module constants"""
    import sys

    all_validation_failures = []
    total_tests = 0

    # Test 1: Built-in keys are unique and the default comes first
    total_tests += 1
    keys = [key for key, _ in BUILTIN_COLLECTION_DEFINITIONS]
    if len(keys) != len(set(keys)):
        all_validation_failures.append(f"Duplicate built-in keys: {keys}")
    if keys[0] != DEFAULT_COLLECTION_KEY:
        all_validation_failures.append(f"Default collection should be first, got {keys[0]!r}")

    # Test 2: Delimiter is two characters
    total_tests += 1
    if len(ENTRY_DELIMITER) != 2:
        all_validation_failures.append(f"ENTRY_DELIMITER should be 2 chars, got {ENTRY_DELIMITER!r}")

    # Test 3: Preview limits are positive
    total_tests += 1
    for key in ("PREVIEW_MAX_WIDTH", "PREVIEW_MAX_HEIGHT"):
        if IMAGE_SETTINGS[key] <= 0:
            all_validation_failures.append(f"IMAGE_SETTINGS[{key}] should be positive")

    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        sys.exit(0)
