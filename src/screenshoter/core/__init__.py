"""
Core Layer for Screenshoter

This package contains the business logic: collections, the capture session
and pipeline, storage and zip export. It has no presentation concerns.

The core layer is designed to be:
1. Independent of UI or integration concerns
2. Fully testable in isolation, with capture sources and storage injected
3. Free of module-level singletons; ScreenshoterService wires the parts

Usage:
    from screenshoter.core import ScreenshoterService
    service = ScreenshoterService.from_config()
    service.start().result()
    result = service.capture_now().result()
"""

# Constants and errors
from screenshoter.core.constants import (
    BUILTIN_COLLECTION_DEFINITIONS,
    DEFAULT_COLLECTION_KEY,
    IMAGE_SETTINGS,
)
from screenshoter.core.errors import CaptureSourceError, ErrorCategory, ErrorKind

# Naming and collections
from screenshoter.core.sanitizer import build_zip_filename, sanitize
from screenshoter.core.collection_store import AddResult, Collection, CollectionStore
from screenshoter.core.preferences import PreferenceStore

# Capture
from screenshoter.core.frames import CaptureFrame, RawFrame
from screenshoter.core.source import CaptureSource, MssCaptureSource, get_monitors, get_system_info
from screenshoter.core.pending import PendingCapture, PendingCaptureSlot
from screenshoter.core.session import CaptureSession, SessionState
from screenshoter.core.pipeline import CaptureMode, CapturePipeline, CaptureResult

# Storage and export
from screenshoter.core.storage import FileMediaStore, MediaHandle, MediaItem, ScreenshotLibrary
from screenshoter.core.exporter import (
    CollectionExporter,
    ExportOutcome,
    ExportSummary,
    ZipJobResult,
    summarize_results,
)

# Service and configuration
from screenshoter.core.config import CONFIG, load_config, validate_config
from screenshoter.core.service import ExportReport, ScreenshoterService
from screenshoter.core.utils import configure_logging, format_error_response

__all__ = [
    # Constants and errors
    'BUILTIN_COLLECTION_DEFINITIONS',
    'DEFAULT_COLLECTION_KEY',
    'IMAGE_SETTINGS',
    'CaptureSourceError',
    'ErrorCategory',
    'ErrorKind',

    # Naming and collections
    'build_zip_filename',
    'sanitize',
    'AddResult',
    'Collection',
    'CollectionStore',
    'PreferenceStore',

    # Capture
    'CaptureFrame',
    'RawFrame',
    'CaptureSource',
    'MssCaptureSource',
    'get_monitors',
    'get_system_info',
    'PendingCapture',
    'PendingCaptureSlot',
    'CaptureSession',
    'SessionState',
    'CaptureMode',
    'CapturePipeline',
    'CaptureResult',

    # Storage and export
    'FileMediaStore',
    'MediaHandle',
    'MediaItem',
    'ScreenshotLibrary',
    'CollectionExporter',
    'ExportOutcome',
    'ExportSummary',
    'ZipJobResult',
    'summarize_results',

    # Service and configuration
    'CONFIG',
    'load_config',
    'validate_config',
    'ExportReport',
    'ScreenshoterService',
    'configure_logging',
    'format_error_response',
]
