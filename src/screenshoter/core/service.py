#!/usr/bin/env python3
"""
Screenshoter Service

This module wires the core components together and exposes the commands a
user interface sends: start/stop capture, pick a collection, toggle
confirmation, capture, confirm/reject, add a collection and export.

Capture work runs on a single "capture" worker thread and export batches on
a single "export" worker thread, so the caller is never blocked by encoding
or zip I/O unless it waits on the returned Future. State flows back through
observables with replay-latest semantics:

- service.session.active, service.session.current_collection,
  service.session.require_confirmation
- service.slot.present (a capture awaits review)
- service.pipeline.capture_events (a screenshot was saved)

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- service = ScreenshoterService.from_config()
- service.start().result(); service.select_collection("movies")
- service.capture_now().result()

Expected output:
- CaptureResult(mode=DIRECT, location=MediaHandle(...movies/Screenshot_1718000000000.png))
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from screenshoter.core.collection_store import AddResult, CollectionStore
from screenshoter.core.config import CONFIG
from screenshoter.core.constants import COLLECTION_PREFS_NAMESPACE, SESSION_PREFS_NAMESPACE
from screenshoter.core.errors import ErrorKind
from screenshoter.core.exporter import (
    CollectionExporter,
    ExportSummary,
    ProgressCallback,
    ZipJobResult,
    summarize_results,
)
from screenshoter.core.pending import PendingCapture, PendingCaptureSlot
from screenshoter.core.pipeline import CaptureMode, CapturePipeline, CaptureResult
from screenshoter.core.preferences import PreferenceStore
from screenshoter.core.scheduler import PeriodicCapture
from screenshoter.core.session import CaptureSession, SessionState
from screenshoter.core.source import CaptureSource, MssCaptureSource
from screenshoter.core.storage import FileMediaStore, ScreenshotLibrary
from screenshoter.core.utils import format_error_response

SourceFactory = Callable[[], CaptureSource]


def _completed(value: Any) -> Future:
    future: Future = Future()
    future.set_result(value)
    return future


@dataclass
class ExportReport:
    """Results of one export request, or the validation error that stopped it."""

    results: List[ZipJobResult] = field(default_factory=list)
    error: Optional[ErrorKind] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def summary(self) -> ExportSummary:
        return summarize_results(self.results)

    def to_dict(self) -> Dict[str, Any]:
        summary = self.summary
        data = {
            "success": self.success,
            "results": [result.to_dict() for result in self.results],
            "success_count": summary.success_count,
            "failure_count": summary.failure_count,
            "outcome": summary.outcome.value,
        }
        if self.error is not None:
            data.update(format_error_response(self.error))
        return data


class ScreenshoterService:
    """Owns the capture and export workers and every core component."""

    def __init__(
        self,
        collection_prefs: PreferenceStore,
        session_prefs: PreferenceStore,
        media_store: FileMediaStore,
        source_factory: SourceFactory,
        auto_interval: float = 5.0
    ):
        self.store = media_store
        self.library = ScreenshotLibrary(media_store)
        self.collections = CollectionStore(collection_prefs)
        self.slot = PendingCaptureSlot()
        self.session = CaptureSession(session_prefs, self.slot)
        self.pipeline = CapturePipeline(self.session, self.slot, self.library)
        self.exporter = CollectionExporter(media_store, self.library)
        self.auto_interval = auto_interval

        self._source_factory = source_factory
        self._capture_worker = ThreadPoolExecutor(max_workers=1, thread_name_prefix="capture")
        self._export_worker = ThreadPoolExecutor(max_workers=1, thread_name_prefix="export")
        self._auto_lock = threading.Lock()
        self._auto: Optional[PeriodicCapture] = None

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "ScreenshoterService":
        """
        Build a service backed by files and the MSS screen source.

        Args:
            config: Configuration dictionary; the module CONFIG when omitted

        Returns:
            ScreenshoterService: Ready to start
        """
        config = config or CONFIG
        prefs_dir = config["storage"]["prefs_dir"]
        capture = config["capture"]

        def source_factory() -> CaptureSource:
            return MssCaptureSource(monitor_num=capture["monitor"], frame_interval=capture["frame_interval"])

        return cls(
            collection_prefs=PreferenceStore.open(prefs_dir, COLLECTION_PREFS_NAMESPACE),
            session_prefs=PreferenceStore.open(prefs_dir, SESSION_PREFS_NAMESPACE),
            media_store=FileMediaStore(config["storage"]["root"]),
            source_factory=source_factory,
            auto_interval=capture["auto_interval"],
        )

    # Session

    def start(self) -> "Future[bool]":
        return self._capture_worker.submit(lambda: self.session.start(self._source_factory()))

    def stop(self) -> None:
        self.stop_auto_capture()
        self.session.stop()

    def select_collection(self, key: str) -> str:
        return self.session.set_current_collection(key)

    def set_require_confirmation(self, enabled: bool) -> bool:
        return self.session.set_require_confirmation(enabled)

    def session_state(self) -> SessionState:
        return self.session.state()

    # Capture

    def capture_now(
        self, mode: Optional[CaptureMode] = None, collection_key: Optional[str] = None
    ) -> "Future[CaptureResult]":
        return self._capture_worker.submit(self.pipeline.capture_once, mode, collection_key)

    def pending_capture(self) -> Optional[PendingCapture]:
        return self.slot.get()

    def confirm_pending(self) -> "Future[CaptureResult]":
        return self._capture_worker.submit(self.pipeline.confirm_pending)

    def reject_pending(self) -> bool:
        return self.pipeline.reject_pending()

    def start_auto_capture(self, interval: Optional[float] = None) -> bool:
        """
        Capture periodically until stop_auto_capture() or stop().

        Returns:
            bool: False if periodic capture was already running
        """
        with self._auto_lock:
            if self._auto is not None and self._auto.is_running:
                return False
            self._auto = PeriodicCapture(self.capture_now, interval or self.auto_interval)
            return self._auto.start()

    def stop_auto_capture(self) -> None:
        with self._auto_lock:
            auto, self._auto = self._auto, None
        if auto is not None:
            auto.stop()

    # Collections

    def add_collection(self, raw_label: str) -> AddResult:
        try:
            return self.collections.add(raw_label, reserved_keys=self.collections.reserved_keys())
        except OSError:
            logger.exception("saving collection failed")
            return AddResult(error=ErrorKind.PERSIST_FAILED)

    def list_collections(self) -> List[Dict[str, Any]]:
        """
        Every collection with its stored image count.

        Returns:
            List[Dict[str, Any]]: Dicts with key, label and count, Default first
        """
        collections = self.collections.all_collections()
        counts = self.library.get_folder_item_counts([c.key for c in collections])
        return [{"key": c.key, "label": c.label, "count": counts[c.key]} for c in collections]

    def last_export_name(self) -> Optional[str]:
        return self.collections.get_last_used_export_name()

    # Export

    def export_all(self, username: str, on_progress: Optional[ProgressCallback] = None) -> "Future[ExportReport]":
        """
        Export every non-empty collection on the export worker.

        An empty username is rejected right away with EMPTY_USERNAME. The name
        is remembered once at least one archive was written.
        """
        name = (username or "").strip()
        if not name:
            return _completed(ExportReport(results=[], error=ErrorKind.EMPTY_USERNAME))

        pairs = [(c.key, c.label) for c in self.collections.all_collections()]

        def run() -> ExportReport:
            results = self.exporter.export_all(pairs, name, on_progress)
            if any(result.success for result in results):
                try:
                    self.collections.save_last_used_export_name(name)
                except OSError:
                    logger.exception("saving last export name failed")
            return ExportReport(results=results)

        return self._export_worker.submit(run)

    # Lifecycle

    def close(self) -> None:
        """Stop capture and wait for queued work to finish."""
        self.stop()
        self._capture_worker.shutdown(wait=True)
        self._export_worker.shutdown(wait=True)

    def __enter__(self) -> "ScreenshoterService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

