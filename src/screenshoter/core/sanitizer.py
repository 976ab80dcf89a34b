#!/usr/bin/env python3
"""
Name Sanitizer for Screenshoter

Normalizes free-form user text into filesystem-safe name segments. The same
rule is used for collection keys and for the segments of exported zip file
names, so a sanitized value never contains path separators.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- "  My Trip!! "
- "Food"
- "../etc/passwd"

Expected output:
- "my_trip"
- "food"
- "etc_passwd"
"""

import re
from typing import Optional

from screenshoter.core.constants import (
    DEFAULT_COLLECTION_KEY,
    ZIP_USER_FALLBACK,
    ZIP_LABEL_FALLBACK,
)

_UNSAFE_CHARS = re.compile(r"[^a-z0-9_-]")
_UNDERSCORE_RUNS = re.compile(r"_+")


def sanitize(raw: Optional[str]) -> str:
    """
    Normalize arbitrary text into a safe, lowercase name segment.

    Args:
        raw: User supplied text (None is treated as empty)

    Returns:
        str: Sanitized segment, or the default collection key when nothing
            usable remains
    """
    trimmed = (raw or "").strip()
    if not trimmed:
        return DEFAULT_COLLECTION_KEY

    cleaned = _UNSAFE_CHARS.sub("_", trimmed.lower())
    cleaned = _UNDERSCORE_RUNS.sub("_", cleaned).strip("_")
    return cleaned or DEFAULT_COLLECTION_KEY


def build_zip_filename(username: str, label: str, count: int) -> str:
    """
    Build the archive name for one exported collection.

    Args:
        username: Name entered for the export
        label: Collection display label
        count: Number of items in the collection

    Returns:
        str: File name such as "alice-movies-3.zip"
    """
    user_segment = sanitize(username) or ZIP_USER_FALLBACK
    label_segment = sanitize(label) or ZIP_LABEL_FALLBACK
    return f"{user_segment}-{label_segment}-{count}.zip"


if __name__ == "__main__":
    """Validate sanitizer functions"""
    import sys

    all_validation_failures = []
    total_tests = 0

    # Test 1: Expected examples
    total_tests += 1
    expectations = {
        "My Trip!!": "my_trip",
        "": "",
        "   ": "",
        "Food": "food",
        "__a__b__": "a_b",
        "!!!": "",
    }
    for raw, expected in expectations.items():
        actual = sanitize(raw)
        if actual != expected:
            all_validation_failures.append(f"sanitize({raw!r}): expected {expected!r}, got {actual!r}")

    # Test 2: Idempotence
    total_tests += 1
    for raw in ["Hello World", "a/b\\c", "ÄÖÜ", "x--y__z", "  _x_  "]:
        once = sanitize(raw)
        if sanitize(once) != once:
            all_validation_failures.append(f"sanitize not idempotent for {raw!r}")

    # Test 3: Zip file names
    total_tests += 1
    name = build_zip_filename("  ", "", 2)
    if name != "user-collection-2.zip":
        all_validation_failures.append(f"build_zip_filename fallback: got {name}")

    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        sys.exit(0)
