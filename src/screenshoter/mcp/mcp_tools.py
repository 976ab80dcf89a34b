#!/usr/bin/env python3
"""
MCP Tools for Screenshoter

This module provides MCP tool definitions for capturing screenshots into
collections, reviewing them and exporting collections, to be used with MCP
clients.

This module is part of the Integration Layer and can depend on both
Core Layer and Presentation Layer components.

Sample input:
- create_mcp_server(ScreenshoterService.from_config())

Expected output:
- Configured MCP server with registered tools
"""

from typing import Any, Dict, Optional

from loguru import logger
from mcp.server.fastmcp import FastMCP

from screenshoter.core.service import ScreenshoterService
from screenshoter.mcp.wrappers import (
    add_collection_wrapper,
    auto_capture_wrapper,
    capture_wrapper,
    confirm_wrapper,
    export_wrapper,
    list_collections_wrapper,
    pending_wrapper,
    reject_wrapper,
    select_collection_wrapper,
    session_state_wrapper,
    set_confirmation_wrapper,
    start_capture_wrapper,
    stop_capture_wrapper,
)


def create_mcp_server(
    service: ScreenshoterService,
    name: str = "Screenshoter",
    host: str = "localhost",
    port: int = 3000
) -> FastMCP:
    """
    Create and configure MCP server with Screenshoter tools

    Args:
        service: Service the tools operate on
        name: Name for the MCP server
        host: Host to listen on
        port: Port to listen on

    Returns:
        FastMCP: Configured MCP server instance
    """
    mcp = FastMCP(name, host=host, port=port)
    logger.info(f"Initialized FastMCP server: {name} on {host}:{port}")

    register_session_tools(mcp, service)
    register_capture_tools(mcp, service)
    register_collection_tools(mcp, service)
    register_export_tool(mcp, service)

    return mcp


def register_session_tools(mcp: FastMCP, service: ScreenshoterService) -> None:
    """
    Register session tools with the MCP server

    Args:
        mcp: MCP server instance
        service: Service the tools operate on
    """
    @mcp.tool()
    def start_capture() -> Dict[str, Any]:
        """
        Starts capturing the screen. Screenshots can only be taken while capture is running.

        Returns:
            dict: Session state (active, current_collection_key, require_confirmation, pending).
                On error:
                - error: Error message as a string.
                - success: False.
        """
        logger.info("Start capture requested")
        return start_capture_wrapper(service)

    @mcp.tool()
    def stop_capture() -> Dict[str, Any]:
        """
        Stops capturing the screen and any periodic capture.

        Returns:
            dict: Session state after stopping.
        """
        logger.info("Stop capture requested")
        return stop_capture_wrapper(service)

    @mcp.tool()
    def session_state() -> Dict[str, Any]:
        """
        Returns whether capture is running, the selected collection, whether
        captures need confirmation, and whether one is awaiting review.
        """
        return session_state_wrapper(service)

    @mcp.tool()
    def set_require_confirmation(enabled: bool) -> Dict[str, Any]:
        """
        Turns review of each capture before saving on or off.
        Turning it off discards a capture that is awaiting review.

        Args:
            enabled (bool): True to review captures before they are saved.
        """
        logger.info(f"Require confirmation set to {enabled}")
        return set_confirmation_wrapper(service, enabled)


def register_capture_tools(mcp: FastMCP, service: ScreenshoterService) -> None:
    """
    Register capture and review tools with the MCP server

    Args:
        mcp: MCP server instance
        service: Service the tools operate on
    """
    @mcp.tool()
    def capture(collection: Optional[str] = None, mode: Optional[str] = None) -> Dict[str, Any]:
        """
        Takes a screenshot of the captured monitor.

        Args:
            collection (str, optional): Collection key to save into. Defaults to the selected collection.
            mode (str, optional): "direct" saves immediately, "preview" stages the capture for
                confirm_capture/reject_capture. Defaults to the confirmation setting.

        Returns:
            dict: MCP-compliant response containing:
                - file: Path of the saved screenshot (direct mode)
                - staged: True if the capture awaits review (preview mode)
                On error:
                - error: Error message as a string.
                - error_kind: e.g. "session_not_active", "capture_pending".
        """
        logger.info(f"Capture requested collection={collection} mode={mode}")
        return capture_wrapper(service, collection, mode)

    @mcp.tool()
    def pending_capture(include_image: bool = True) -> Dict[str, Any]:
        """
        Shows the capture awaiting review, with a PNG thumbnail.

        Args:
            include_image (bool, optional): Include a base64 thumbnail. Defaults to True.
        """
        return pending_wrapper(service, include_image)

    @mcp.tool()
    def confirm_capture() -> Dict[str, Any]:
        """
        Saves the capture awaiting review into its collection.
        If saving fails the capture stays pending so it can be retried.
        """
        logger.info("Confirm capture requested")
        return confirm_wrapper(service)

    @mcp.tool()
    def reject_capture() -> Dict[str, Any]:
        """
        Discards the capture awaiting review.
        """
        logger.info("Reject capture requested")
        return reject_wrapper(service)

    @mcp.tool()
    def auto_capture(enabled: bool, interval: Optional[float] = None) -> Dict[str, Any]:
        """
        Starts or stops taking screenshots periodically.

        Args:
            enabled (bool): True to start, False to stop.
            interval (float, optional): Seconds between screenshots.
        """
        logger.info(f"Auto capture requested enabled={enabled} interval={interval}")
        return auto_capture_wrapper(service, enabled, interval)


def register_collection_tools(mcp: FastMCP, service: ScreenshoterService) -> None:
    """
    Register collection tools with the MCP server

    Args:
        mcp: MCP server instance
        service: Service the tools operate on
    """
    @mcp.tool()
    def list_collections() -> Dict[str, Any]:
        """
        Lists every collection with its key, label and number of screenshots.
        """
        return list_collections_wrapper(service)

    @mcp.tool()
    def add_collection(label: str) -> Dict[str, Any]:
        """
        Creates a custom collection. The key is derived from the label.

        Args:
            label (str): Name of the collection.

        Returns:
            dict: The custom collections, or error_kind "empty_label"/"duplicate_key".
        """
        logger.info(f"Add collection requested label={label}")
        return add_collection_wrapper(service, label)

    @mcp.tool()
    def select_collection(key: str) -> Dict[str, Any]:
        """
        Selects the collection new screenshots are saved into.

        Args:
            key (str): Collection key ("" for Default).
        """
        logger.info(f"Select collection requested key={key}")
        return select_collection_wrapper(service, key)


def register_export_tool(mcp: FastMCP, service: ScreenshoterService) -> None:
    """
    Register export tool with the MCP server

    Args:
        mcp: MCP server instance
        service: Service the tool operates on
    """
    @mcp.tool()
    def export_collections(username: str) -> Dict[str, Any]:
        """
        Bundles every non-empty collection into its own zip archive named
        <username>-<collection>-<count>.zip.

        Args:
            username (str): Name used in the archive file names.

        Returns:
            dict: MCP-compliant response containing:
                - results: One entry per archive (label, file_count, success, file, error).
                - outcome: nothing_to_export, all_failed, partial or all_succeeded.
        """
        logger.info(f"Export requested username={username}")
        return export_wrapper(service, username)
