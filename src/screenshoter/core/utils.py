#!/usr/bin/env python3
"""
Utility Functions for Screenshoter

This module provides common utility functions used by other core modules.
It includes functions for file naming, logging setup, and error formatting.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- generate_filename("Screenshot", "png")
- format_error_response(ErrorKind.NO_FRAME_AVAILABLE)

Expected output:
- "Screenshot_1718000000000.png"
- {"error": "No screen frame is ready yet, try again.", "error_kind": "no_frame_available", ...}
"""

import os
import sys
import threading
import time
from typing import Any, Dict, Optional, Union

from loguru import logger

from screenshoter.core.constants import LOG_MAX_STR_LEN
from screenshoter.core.errors import ErrorKind

_timestamp_lock = threading.Lock()
_last_timestamp_ms = 0


def current_timestamp_ms() -> int:
    """
    Wall-clock milliseconds, strictly increasing within this process.

    Two calls in the same millisecond return consecutive values.
    """
    global _last_timestamp_ms
    with _timestamp_lock:
        now = int(time.time() * 1000)
        _last_timestamp_ms = max(now, _last_timestamp_ms + 1)
        return _last_timestamp_ms


def generate_filename(prefix: str = "Screenshot", extension: str = "png") -> str:
    """
    Generates a unique filename with timestamp.

    Args:
        prefix: Filename prefix
        extension: File extension without dot

    Returns:
        str: Generated filename
    """
    return f"{prefix}_{current_timestamp_ms()}.{extension}"


def ensure_directory(directory: str) -> bool:
    """
    Ensures directory exists, creating it if necessary.

    Args:
        directory: Directory path

    Returns:
        bool: True if successful, False otherwise
    """
    try:
        os.makedirs(directory, exist_ok=True)
        return True
    except OSError as e:
        logger.error(f"Failed to create directory {directory}: {str(e)}")
        return False


def format_error_response(error: Union[ErrorKind, str], details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Creates a standardized error response.

    Args:
        error: Error kind or free-form error message
        details: Extra context to include

    Returns:
        Dict[str, Any]: Error response dictionary
    """
    if isinstance(error, ErrorKind):
        response = {
            "error": error.message,
            "error_kind": error.value,
            "error_category": error.category.value,
        }
    else:
        response = {"error": error}

    if details:
        response["details"] = details

    return response


def truncate_large_value(value: Any, max_str_len: int = LOG_MAX_STR_LEN) -> Any:
    """
    Truncates large string values for logging purposes.

    Args:
        value: The value to truncate
        max_str_len: Maximum string length to allow

    Returns:
        Truncated string, or the value unchanged if it is not a long string
    """
    if isinstance(value, str) and len(value) > max_str_len:
        return f"{value[:max_str_len]}... [truncated, {len(value)} chars total]"
    return value


def configure_logging(level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """
    Configure logging with proper format and level.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path of a rotating log file
    """
    logger.remove()

    logger.add(
        sys.stderr,
        format="<level>{level: <8}</level> | {message}",
        level=level,
        colorize=True
    )

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            ensure_directory(log_dir)
        logger.add(
            log_file,
            rotation="10 MB",
            retention="1 week",
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} | {message}"
        )
