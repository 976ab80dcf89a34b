"""
Error taxonomy for Screenshoter.

Core operations never raise for expected failures. They return result objects
carrying an ErrorKind, and each kind belongs to one ErrorCategory so callers
can decide between re-prompting, retrying, or reporting a fault.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """Broad class of a failure, used for messaging and retry decisions."""

    VALIDATION = "validation"
    RESOURCE_UNAVAILABLE = "resource_unavailable"
    IO_FAILURE = "io_failure"
    INVARIANT_VIOLATION = "invariant_violation"


class ErrorKind(str, Enum):
    """Specific failure reported by a core operation."""

    EMPTY_LABEL = "empty_label"
    DUPLICATE_KEY = "duplicate_key"
    EMPTY_USERNAME = "empty_username"
    SESSION_NOT_ACTIVE = "session_not_active"
    NO_FRAME_AVAILABLE = "no_frame_available"
    NOTHING_PENDING = "nothing_pending"
    SOURCE_UNAVAILABLE = "source_unavailable"
    DESTINATION_UNAVAILABLE = "destination_unavailable"
    PERSIST_FAILED = "persist_failed"
    FRAME_CONVERSION_FAILED = "frame_conversion_failed"
    ARCHIVE_WRITE_FAILED = "archive_write_failed"
    CAPTURE_PENDING = "capture_pending"

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORIES[self]

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_CATEGORIES = {
    ErrorKind.EMPTY_LABEL: ErrorCategory.VALIDATION,
    ErrorKind.DUPLICATE_KEY: ErrorCategory.VALIDATION,
    ErrorKind.EMPTY_USERNAME: ErrorCategory.VALIDATION,
    ErrorKind.SESSION_NOT_ACTIVE: ErrorCategory.RESOURCE_UNAVAILABLE,
    ErrorKind.NO_FRAME_AVAILABLE: ErrorCategory.RESOURCE_UNAVAILABLE,
    ErrorKind.NOTHING_PENDING: ErrorCategory.RESOURCE_UNAVAILABLE,
    ErrorKind.SOURCE_UNAVAILABLE: ErrorCategory.RESOURCE_UNAVAILABLE,
    ErrorKind.DESTINATION_UNAVAILABLE: ErrorCategory.RESOURCE_UNAVAILABLE,
    ErrorKind.PERSIST_FAILED: ErrorCategory.IO_FAILURE,
    ErrorKind.FRAME_CONVERSION_FAILED: ErrorCategory.IO_FAILURE,
    ErrorKind.ARCHIVE_WRITE_FAILED: ErrorCategory.IO_FAILURE,
    ErrorKind.CAPTURE_PENDING: ErrorCategory.INVARIANT_VIOLATION,
}

_MESSAGES = {
    ErrorKind.EMPTY_LABEL: "Collection name cannot be empty.",
    ErrorKind.DUPLICATE_KEY: "A collection with this name already exists.",
    ErrorKind.EMPTY_USERNAME: "Please enter a name for the export.",
    ErrorKind.SESSION_NOT_ACTIVE: "Capture session is not running.",
    ErrorKind.NO_FRAME_AVAILABLE: "No screen frame is ready yet, try again.",
    ErrorKind.NOTHING_PENDING: "There is no capture awaiting review.",
    ErrorKind.SOURCE_UNAVAILABLE: "Unable to start screen capture.",
    ErrorKind.DESTINATION_UNAVAILABLE: "Unable to create zip destination.",
    ErrorKind.PERSIST_FAILED: "Failed to save the screenshot.",
    ErrorKind.FRAME_CONVERSION_FAILED: "Failed to read the captured frame.",
    ErrorKind.ARCHIVE_WRITE_FAILED: "Failed to write the zip archive.",
    ErrorKind.CAPTURE_PENDING: "Previous capture is still awaiting review.",
}


class CaptureSourceError(Exception):
    """Raised by a capture source that cannot acquire its platform resources."""
