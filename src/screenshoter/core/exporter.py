#!/usr/bin/env python3
"""
Collection Exporter for Screenshoter

This module bundles the images of each collection into its own zip archive.
Collections are processed one after another in the order given; a failure
only affects the archive being written and the batch always continues.

Archives are named ``<user>-<label>-<count>.zip`` and written into the export
namespace of the media store. Each archive is staged and committed only after
it has been fully written, so a failed archive never shows up half-written.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- exporter.export_all([("movies", "Movies"), ("food", "Food")], "Ada")

Expected output:
- [ZipJobResult(key="movies", label="Movies", file_count=3, success=True, ...)]
  (food is skipped when it holds no images)
"""

import shutil
import zipfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from loguru import logger

from screenshoter.core.constants import DEFAULT_COLLECTION_LABEL, EXPORT_NAMESPACE, ZIP_MIME_TYPE
from screenshoter.core.errors import ErrorKind
from screenshoter.core.sanitizer import build_zip_filename, sanitize
from screenshoter.core.storage import FileMediaStore, MediaHandle, MediaItem, ScreenshotLibrary
from screenshoter.core.utils import current_timestamp_ms

ProgressCallback = Callable[[int, int, str], None]


@dataclass(frozen=True)
class ZipJobResult:
    """Outcome of exporting one collection."""

    key: str
    label: str
    file_count: int
    success: bool
    location: Optional[MediaHandle] = None
    output_path: Optional[Path] = None
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "file_count": self.file_count,
            "success": self.success,
            "file": str(self.output_path) if self.output_path is not None else None,
            "error": self.error_message,
        }


class ExportOutcome(str, Enum):
    NOTHING_TO_EXPORT = "nothing_to_export"
    ALL_FAILED = "all_failed"
    PARTIAL = "partial"
    ALL_SUCCEEDED = "all_succeeded"


@dataclass(frozen=True)
class ExportSummary:
    success_count: int
    failure_count: int
    outcome: ExportOutcome


def summarize_results(results: Sequence[ZipJobResult]) -> ExportSummary:
    """
    Classify a batch of export results for user messaging.

    Args:
        results: Results returned by export_all

    Returns:
        ExportSummary: Counts and overall outcome
    """
    success_count = sum(1 for result in results if result.success)
    failure_count = len(results) - success_count
    if not results:
        outcome = ExportOutcome.NOTHING_TO_EXPORT
    elif success_count == 0:
        outcome = ExportOutcome.ALL_FAILED
    elif failure_count > 0:
        outcome = ExportOutcome.PARTIAL
    else:
        outcome = ExportOutcome.ALL_SUCCEEDED
    return ExportSummary(success_count=success_count, failure_count=failure_count, outcome=outcome)


class CollectionExporter:
    """Writes one zip archive per non-empty collection."""

    def __init__(self, store: FileMediaStore, library: ScreenshotLibrary):
        self.store = store
        self.library = library

    def export_all(
        self,
        collections: Sequence[Tuple[str, str]],
        username: str,
        on_progress: Optional[ProgressCallback] = None
    ) -> List[ZipJobResult]:
        """
        Export every non-empty collection.

        Args:
            collections: Ordered (key, label) pairs
            username: Name used as the first segment of each archive name
            on_progress: Called with (index, total, label) before each archive
                is written; index counts over all collections, empty ones
                included

        Returns:
            List[ZipJobResult]: One result per non-empty collection, in input order
        """
        total = len(collections)
        results = []
        for index, (raw_key, raw_label) in enumerate(collections, start=1):
            key = sanitize(raw_key)
            label = raw_label.strip() if raw_label and raw_label.strip() else DEFAULT_COLLECTION_LABEL
            items = self.library.list_items(key)
            if not items:
                logger.debug(f"export skip empty collection key={key or 'default'}")
                continue

            if on_progress is not None:
                try:
                    on_progress(index, total, label)
                except Exception:
                    logger.exception("export progress callback failed")

            results.append(self._export_collection(key, label, items, username))
        return results

    def _export_collection(self, key: str, label: str, items: List[MediaItem], username: str) -> ZipJobResult:
        filename = build_zip_filename(username, label, len(items))
        logger.info(f"export start key={key or 'default'} items={len(items)} file={filename}")

        try:
            destination = self.store.insert(EXPORT_NAMESPACE, filename, ZIP_MIME_TYPE)
        except OSError as e:
            logger.error(f"export destination failed file={filename}: {e}")
            return ZipJobResult(
                key=key,
                label=label,
                file_count=len(items),
                success=False,
                error_message=ErrorKind.DESTINATION_UNAVAILABLE.message,
            )

        try:
            with self.store.open_write_stream(destination) as stream:
                with zipfile.ZipFile(stream, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                    written = self._write_entries(archive, items)
            committed = self.store.commit_pending(destination)
        except Exception as e:
            logger.exception(f"export failed file={filename}")
            self.store.delete(destination)
            return ZipJobResult(
                key=key,
                label=label,
                file_count=len(items),
                success=False,
                error_message=f"{ErrorKind.ARCHIVE_WRITE_FAILED.message} {e}",
            )

        logger.info(f"export done file={committed.filename} entries={written}/{len(items)}")
        return ZipJobResult(
            key=key,
            label=label,
            file_count=len(items),
            success=True,
            location=committed,
            output_path=committed.path,
        )

    def _write_entries(self, archive: zipfile.ZipFile, items: List[MediaItem]) -> int:
        written = 0
        for item in items:
            try:
                source = self.store.open_read_stream(item.handle)
            except OSError as e:
                logger.warning(f"export skip unreadable item={item.display_name}: {e}")
                continue
            entry_name = item.display_name.strip() or f"image_{current_timestamp_ms()}"
            with source, archive.open(entry_name, "w") as entry:
                shutil.copyfileobj(source, entry)
            written += 1
        return written
