#!/usr/bin/env python3
"""
MCP Wrappers for Screenshoter

This module provides MCP-specific wrapper functions around ScreenshoterService,
handling parameter validation and error formatting specific to MCP. Every
wrapper returns a plain dictionary and never raises.

This module is part of the Integration Layer and can depend on both
Core Layer and Presentation Layer components.

Sample input:
- capture_wrapper(service, collection="movies", mode="direct")

Expected output:
- {"success": True, "mode": "direct", "file": ".../movies/Screenshot_1718000000000.png", ...}
"""

import base64
import time
from typing import Any, Dict, Optional

from loguru import logger

from screenshoter.core.constants import IMAGE_SETTINGS
from screenshoter.core.errors import ErrorKind
from screenshoter.core.image_processing import encode_image_to_bytes, make_preview
from screenshoter.core.pipeline import CaptureMode, CaptureResult
from screenshoter.core.service import ScreenshoterService


def format_mcp_response(
    success: bool,
    data: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None
) -> Dict[str, Any]:
    """
    Format a response in MCP-compatible format.

    Args:
        success: Whether the operation was successful
        data: Response data (merged into the response in both cases)
        error: Error message (for failed operations)

    Returns:
        Dict[str, Any]: MCP-compatible response
    """
    response = {"success": success}

    if data is not None:
        response.update(data)
    if not success and error is not None:
        response["error"] = error

    response["success"] = success
    return response


def _result_response(result: Dict[str, Any]) -> Dict[str, Any]:
    success = result.pop("success", False)
    error = result.pop("error", None)
    return format_mcp_response(success, data=result, error=error)


def _parse_mode(mode: Optional[str]) -> Optional[CaptureMode]:
    if mode is None or mode == "":
        return None
    return CaptureMode(mode.lower())


def start_capture_wrapper(service: ScreenshoterService) -> Dict[str, Any]:
    """
    MCP wrapper for starting the capture session.

    Returns:
        Dict[str, Any]: MCP-compatible response with the session state
    """
    try:
        if not service.start().result():
            kind = ErrorKind.SOURCE_UNAVAILABLE
            return format_mcp_response(False, data={"error_kind": kind.value}, error=kind.message)
        return session_state_wrapper(service)
    except Exception as e:
        error_message = f"Start capture operation failed: {str(e)}"
        logger.exception(error_message)
        return format_mcp_response(False, error=error_message)


def stop_capture_wrapper(service: ScreenshoterService) -> Dict[str, Any]:
    """MCP wrapper for stopping the capture session and periodic capture."""
    try:
        service.stop()
        return session_state_wrapper(service)
    except Exception as e:
        error_message = f"Stop capture operation failed: {str(e)}"
        logger.exception(error_message)
        return format_mcp_response(False, error=error_message)


def session_state_wrapper(service: ScreenshoterService) -> Dict[str, Any]:
    """
    MCP wrapper reporting the session state.

    Returns:
        Dict[str, Any]: active, current_collection_key, require_confirmation
            and whether a capture awaits review
    """
    state = service.session_state()
    return format_mcp_response(True, data={
        "active": state.active,
        "current_collection_key": state.current_collection_key,
        "require_confirmation": state.require_confirmation,
        "pending": service.pending_capture() is not None,
    })


def capture_wrapper(
    service: ScreenshoterService,
    collection: Optional[str] = None,
    mode: Optional[str] = None,
    wait_seconds: float = 2.0
) -> Dict[str, Any]:
    """
    MCP wrapper for taking one screenshot.

    Args:
        service: Running service
        collection: Target collection key; the selected collection when omitted
        mode: "direct", "preview", or None to follow the confirmation setting
        wait_seconds: How long to wait for a screen frame

    Returns:
        Dict[str, Any]: MCP-compatible response
    """
    try:
        capture_mode = _parse_mode(mode)
    except ValueError:
        return format_mcp_response(False, error=f"Invalid mode: {mode}. Must be 'direct' or 'preview'.")

    try:
        deadline = time.monotonic() + max(0.0, wait_seconds)
        while True:
            result: CaptureResult = service.capture_now(capture_mode, collection).result()
            if result.error != ErrorKind.NO_FRAME_AVAILABLE or time.monotonic() >= deadline:
                break
            time.sleep(0.05)
        return _result_response(result.to_dict())
    except Exception as e:
        error_message = f"Capture operation failed: {str(e)}"
        logger.exception(error_message)
        return format_mcp_response(False, error=error_message)


def pending_wrapper(service: ScreenshoterService, include_image: bool = True) -> Dict[str, Any]:
    """
    MCP wrapper describing the capture awaiting review.

    Args:
        service: Running service
        include_image: Attach a base64 PNG thumbnail of the capture

    Returns:
        Dict[str, Any]: MCP-compatible response
    """
    pending = service.pending_capture()
    if pending is None:
        return format_mcp_response(True, data={"pending": False})

    data = {
        "pending": True,
        "collection_key": pending.collection_key,
        "width": pending.frame.width,
        "height": pending.frame.height,
    }
    if include_image:
        try:
            preview = make_preview(pending.frame.image)
            data["content"] = [{
                "type": "image",
                "data": base64.b64encode(encode_image_to_bytes(preview["image"])).decode("utf-8"),
                "mimeType": IMAGE_SETTINGS["MIME_TYPE"],
            }]
            data["preview_size"] = list(preview["preview_size"])
        except Exception as e:
            logger.error(f"Preview encoding failed: {str(e)}")
            data["preview_error"] = str(e)
    return format_mcp_response(True, data=data)


def confirm_wrapper(service: ScreenshoterService) -> Dict[str, Any]:
    """MCP wrapper saving the capture awaiting review."""
    try:
        return _result_response(service.confirm_pending().result().to_dict())
    except Exception as e:
        error_message = f"Confirm operation failed: {str(e)}"
        logger.exception(error_message)
        return format_mcp_response(False, error=error_message)


def reject_wrapper(service: ScreenshoterService) -> Dict[str, Any]:
    """MCP wrapper discarding the capture awaiting review."""
    return format_mcp_response(True, data={"discarded": service.reject_pending()})


def list_collections_wrapper(service: ScreenshoterService) -> Dict[str, Any]:
    """MCP wrapper listing collections with their screenshot counts."""
    try:
        return format_mcp_response(True, data={
            "collections": service.list_collections(),
            "current_collection_key": service.session_state().current_collection_key,
        })
    except Exception as e:
        error_message = f"List collections operation failed: {str(e)}"
        logger.exception(error_message)
        return format_mcp_response(False, error=error_message)


def add_collection_wrapper(service: ScreenshoterService, label: str) -> Dict[str, Any]:
    """
    MCP wrapper creating a custom collection.

    Args:
        service: Service instance
        label: Name of the new collection

    Returns:
        Dict[str, Any]: MCP-compatible response with the custom collections
    """
    result = service.add_collection(label)
    if not result.success:
        return format_mcp_response(False, data={"error_kind": result.error.value}, error=result.error.message)
    return format_mcp_response(True, data={
        "collections": [{"key": c.key, "label": c.label} for c in result.collections],
    })


def select_collection_wrapper(service: ScreenshoterService, key: str) -> Dict[str, Any]:
    """MCP wrapper selecting the collection new screenshots go to."""
    selected = service.select_collection(key)
    return format_mcp_response(True, data={
        "current_collection_key": selected,
        "label": service.collections.folder_label(selected),
    })


def set_confirmation_wrapper(service: ScreenshoterService, enabled: bool) -> Dict[str, Any]:
    """MCP wrapper toggling review of captures before saving."""
    try:
        persisted = service.set_require_confirmation(enabled)
        response = session_state_wrapper(service)
        response["persisted"] = persisted
        return response
    except Exception as e:
        error_message = f"Set confirmation operation failed: {str(e)}"
        logger.exception(error_message)
        return format_mcp_response(False, error=error_message)


def auto_capture_wrapper(service: ScreenshoterService, enabled: bool, interval: Optional[float] = None) -> Dict[str, Any]:
    """
    MCP wrapper starting or stopping periodic capture.

    Args:
        service: Service instance
        enabled: Start (True) or stop (False)
        interval: Seconds between captures

    Returns:
        Dict[str, Any]: MCP-compatible response
    """
    if interval is not None and interval <= 0:
        return format_mcp_response(False, error=f"Invalid interval: {interval}. Must be greater than 0.")
    if enabled:
        started = service.start_auto_capture(interval)
        return format_mcp_response(True, data={"auto_capture": True, "already_running": not started})
    service.stop_auto_capture()
    return format_mcp_response(True, data={"auto_capture": False})


def export_wrapper(service: ScreenshoterService, username: str) -> Dict[str, Any]:
    """
    MCP wrapper exporting every non-empty collection as zip archives.

    Args:
        service: Service instance
        username: Name used in the archive file names

    Returns:
        Dict[str, Any]: MCP-compatible response with one entry per archive
    """
    try:
        report = service.export_all(username).result()
        return _result_response(report.to_dict())
    except Exception as e:
        error_message = f"Export operation failed: {str(e)}"
        logger.exception(error_message)
        return format_mcp_response(False, error=error_message)
