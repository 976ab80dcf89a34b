#!/usr/bin/env python3
"""
Preference Store for Screenshoter

Key/value persistence with string, boolean and string-set values. Each
namespace lives in its own JSON file so one namespace can be reset without
touching the other. Writes go to a temporary file that replaces the target
in one step, so a crash never leaves a half-written file behind.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- store = PreferenceStore.open(prefs_dir, "collection_prefs")
- store.put("last_zip_username", "alice")

Expected output:
- prefs_dir/collection_prefs.json containing {"last_zip_username": "alice"}
"""

import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Set, Union

from loguru import logger

PreferenceValue = Union[str, bool, Set[str], frozenset]

_SET_MARKER = "__set__"


class PreferenceStore:
    """
    Thread-safe preference namespace, optionally backed by a JSON file.

    A store created without a path keeps its values in memory only.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else None
        self._lock = threading.RLock()
        self._values: Dict[str, Any] = self._read()

    @classmethod
    def open(cls, directory: Union[str, Path], namespace: str) -> "PreferenceStore":
        """
        Open the store for a namespace inside a preferences directory.

        Args:
            directory: Directory holding one JSON file per namespace
            namespace: Namespace name, used as the file stem

        Returns:
            PreferenceStore: Store bound to directory/namespace.json
        """
        return cls(Path(directory) / f"{namespace}.json")

    def get(self, key: str, default: Optional[PreferenceValue] = None) -> Optional[PreferenceValue]:
        with self._lock:
            if key not in self._values:
                return default
            value = self._values[key]
            if isinstance(value, frozenset):
                return set(value)
            return value

    def put(self, key: str, value: PreferenceValue) -> None:
        with self.edit() as editor:
            editor[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            if key in self._values:
                del self._values[key]
                self._commit()

    @contextmanager
    def edit(self) -> Iterator[Dict[str, Any]]:
        """
        Batch several updates into a single atomic commit.

        The yielded dict only collects the changes; nothing is applied if the
        block raises.
        """
        with self._lock:
            changes: Dict[str, Any] = {}
            yield changes
            for key, value in changes.items():
                self._values[key] = _normalize(value)
            if changes:
                self._commit()

    def reset(self) -> None:
        """Remove every value in this namespace."""
        with self._lock:
            self._values = {}
            self._commit()

    def _read(self) -> Dict[str, Any]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"Ignoring malformed preferences file {self.path}")
            return {}
        return {key: _decode(value) for key, value in raw.items()}

    def _commit(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {key: _encode(value) for key, value in self._values.items()}
        fd, tmp_path = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise


def _normalize(value: PreferenceValue) -> Any:
    if isinstance(value, (set, frozenset)):
        return frozenset(str(item) for item in value)
    if isinstance(value, (str, bool)):
        return value
    raise TypeError(f"Unsupported preference value type: {type(value).__name__}")


def _encode(value: Any) -> Any:
    if isinstance(value, frozenset):
        return {_SET_MARKER: sorted(value)}
    return value


def _decode(value: Any) -> Any:
    if isinstance(value, dict) and _SET_MARKER in value:
        return frozenset(value[_SET_MARKER])
    return value
