#!/usr/bin/env python3
"""
Storage for Screenshoter

Two layers live here:

1. FileMediaStore: a media/file store on a directory tree. Items are staged
   as hidden ".pending-" files and only become visible to query() once
   commit_pending() has moved them into place.
2. ScreenshotLibrary: the screenshot writer built on top of it. It maps a
   collection key to a namespace ("" is the base namespace, any other key a
   sub-namespace), writes time-named PNG files, and reports per-collection
   item counts.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- library.persist(image, "movies")

Expected output:
- MediaHandle pointing at <root>/Pictures/Screenshoter/movies/Screenshot_1718000000000.png
"""

import os
import threading
from dataclasses import dataclass, replace
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, List, Optional, Union

from PIL import Image
from loguru import logger

from screenshoter.core.constants import (
    DEFAULT_COLLECTION_KEY,
    IMAGE_BASE_NAMESPACE,
    IMAGE_SETTINGS,
)
from screenshoter.core.image_processing import encode_image
from screenshoter.core.sanitizer import sanitize
from screenshoter.core.utils import generate_filename

PENDING_PREFIX = ".pending-"


@dataclass(frozen=True)
class MediaHandle:
    """Durable location of one stored item."""

    namespace: str
    filename: str
    mime_type: str
    path: Path
    pending: bool = False

    @property
    def uri(self) -> str:
        return self.path.resolve().as_uri()

    @property
    def staging_path(self) -> Path:
        return self.path.with_name(PENDING_PREFIX + self.filename)


@dataclass(frozen=True)
class MediaItem:
    """A stored item: a stable locator plus the name shown to users."""

    handle: MediaHandle
    display_name: str


class FileMediaStore:
    """Media/file store backed by directories under a root path."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).expanduser()
        self._insert_lock = threading.Lock()

    def namespace_dir(self, namespace: str) -> Path:
        return self.root.joinpath(*[part for part in namespace.split("/") if part])

    def insert(self, namespace: str, filename: str, mime_type: str) -> MediaHandle:
        """
        Reserve a new pending item.

        A numeric suffix is added to the file name if the name is taken.

        Raises:
            OSError: If the namespace directory or the staging file cannot be
                created
        """
        directory = self.namespace_dir(namespace)
        directory.mkdir(parents=True, exist_ok=True)
        stem, dot, extension = filename.rpartition(".")
        if not dot:
            stem, extension = filename, ""

        with self._insert_lock:
            candidate = filename
            counter = 0
            while True:
                handle = MediaHandle(namespace, candidate, mime_type, directory / candidate, pending=True)
                if not handle.path.exists() and not handle.staging_path.exists():
                    break
                counter += 1
                candidate = f"{stem}_{counter}{dot}{extension}"
            handle.staging_path.touch(exist_ok=False)
        return handle

    def open_write_stream(self, handle: MediaHandle) -> BinaryIO:
        target = handle.staging_path if handle.pending else handle.path
        return open(target, "wb")

    def open_read_stream(self, handle: MediaHandle) -> BinaryIO:
        return open(handle.path, "rb")

    def query(self, namespace: str) -> List[MediaItem]:
        """
        List committed items directly inside a namespace, sorted by name.

        Sub-namespaces and pending items are not included.
        """
        directory = self.namespace_dir(namespace)
        if not directory.is_dir():
            return []
        items = []
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            if not entry.is_file() or entry.name.startswith("."):
                continue
            handle = MediaHandle(namespace, entry.name, _guess_mime_type(entry.name), entry)
            items.append(MediaItem(handle=handle, display_name=entry.name))
        return items

    def commit_pending(self, handle: MediaHandle) -> MediaHandle:
        """Make a pending item visible. The move is atomic."""
        if not handle.pending:
            return handle
        os.replace(handle.staging_path, handle.path)
        return replace(handle, pending=False)

    def delete(self, handle: MediaHandle) -> None:
        target = handle.staging_path if handle.pending else handle.path
        try:
            target.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not delete {target}: {e}")


def _guess_mime_type(filename: str) -> str:
    lowered = filename.lower()
    if lowered.endswith(".png"):
        return "image/png"
    if lowered.endswith((".jpg", ".jpeg")):
        return "image/jpeg"
    if lowered.endswith(".zip"):
        return "application/zip"
    return "application/octet-stream"


def collection_namespace(collection_key: str) -> str:
    """Namespace holding the images of a collection."""
    key = sanitize(collection_key)
    if key == DEFAULT_COLLECTION_KEY:
        return IMAGE_BASE_NAMESPACE
    return f"{IMAGE_BASE_NAMESPACE}/{key}"


class ScreenshotLibrary:
    """Writes captured images into collections and reads them back."""

    def __init__(self, store: FileMediaStore):
        self.store = store

    def persist(self, image: Image.Image, collection_key: str) -> Optional[MediaHandle]:
        """
        Save an image into a collection.

        Args:
            image: Image to encode
            collection_key: Target collection key (sanitized again here)

        Returns:
            Optional[MediaHandle]: Location of the committed file, or None if
                any step failed (the staged file is removed in that case)
        """
        namespace = collection_namespace(collection_key)
        filename = generate_filename(IMAGE_SETTINGS["FILENAME_PREFIX"], IMAGE_SETTINGS["EXTENSION"])
        try:
            handle = self.store.insert(namespace, filename, IMAGE_SETTINGS["MIME_TYPE"])
        except OSError as e:
            logger.error(f"persist insert failed namespace={namespace}: {e}")
            return None

        try:
            with self.store.open_write_stream(handle) as stream:
                encode_image(image, stream)
            committed = self.store.commit_pending(handle)
        except Exception as e:
            logger.error(f"persist failed file={handle.filename}: {e}")
            self.store.delete(handle)
            return None

        logger.debug(f"persisted file={committed.path}")
        return committed

    def list_items(self, collection_key: str) -> List[MediaItem]:
        return self.store.query(collection_namespace(collection_key))

    def get_folder_item_counts(self, collection_keys: Iterable[str]) -> Dict[str, int]:
        """
        Count stored items per collection.

        Args:
            collection_keys: Keys as shown to the user (sanitized for lookup)

        Returns:
            Dict[str, int]: Counts keyed by the keys exactly as passed in
        """
        counts = {}
        for key in collection_keys:
            counts[key] = len(self.list_items(key))
        return counts
