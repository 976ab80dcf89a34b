#!/usr/bin/env python3
"""
MCP Server Entry Point for Screenshoter

This is the main entry point for the Screenshoter MCP server, designed to be
directly referenced in the .mcp.json configuration.

This module is part of the Integration Layer and connects the MCP functionality
to the application core.
"""

import argparse
import json
import platform
import sys
from typing import Any, Dict

from loguru import logger

from screenshoter import __version__
from screenshoter.core.config import CONFIG, validate_config
from screenshoter.core.service import ScreenshoterService
from screenshoter.core.utils import configure_logging
from screenshoter.mcp.mcp_tools import create_mcp_server


def get_server_info() -> Dict[str, Any]:
    """
    Get server information.

    Returns:
        Dict[str, Any]: Server information
    """
    return {
        "name": "Screenshoter MCP Server",
        "version": __version__,
        "description": "Capture screenshots into collections and export them as zip archives",
        "storage_root": CONFIG["storage"]["root"],
    }


def health_check() -> Dict[str, Any]:
    """
    Perform a health check.

    Returns:
        Dict[str, Any]: Health check results
    """
    import mss
    import PIL

    problems = validate_config(CONFIG)
    if problems:
        return {"status": "unhealthy", "error": "; ".join(problems)}

    try:
        with mss.mss() as sct:
            monitor = CONFIG["capture"]["monitor"]
            if monitor >= len(sct.monitors):
                return {"status": "unhealthy", "error": f"Monitor {monitor} not found"}
            sct.grab(sct.monitors[monitor])

        return {
            "status": "healthy",
            "platform": platform.system(),
            "python_version": platform.python_version(),
            "mss_version": getattr(mss, "__version__", "unknown"),
            "pil_version": getattr(PIL, "__version__", "unknown"),
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e),
        }


def main() -> int:
    """
    Main entry point for the MCP server.

    Returns:
        int: Exit code
    """
    parser = argparse.ArgumentParser(description="Screenshoter MCP Server")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    start_parser = subparsers.add_parser("start", help="Start the MCP server")
    start_parser.add_argument("--host", type=str, default="localhost", help="Host to listen on")
    start_parser.add_argument("--port", type=int, default=3000, help="Port to listen on")
    start_parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    subparsers.add_parser("health", help="Check server health")
    subparsers.add_parser("info", help="Display server information")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "start":
        log_level = "DEBUG" if args.debug else CONFIG["logging"]["level"]
        configure_logging(log_level, CONFIG["logging"]["file"])

        logger.info("Starting MCP server for Screenshoter")
        logger.info(f"Host: {args.host}, Port: {args.port}, Debug: {args.debug}")

        service = ScreenshoterService.from_config(CONFIG)
        try:
            mcp = create_mcp_server(service, host=args.host, port=args.port)
            mcp.run()
        except KeyboardInterrupt:
            logger.info("Server stopped by user")
            return 0
        except Exception as e:
            logger.exception(f"Server failed to start: {str(e)}")
            return 1
        finally:
            service.close()

    elif args.command == "health":
        result = health_check()
        print(json.dumps(result, indent=2))
        return 0 if result["status"] == "healthy" else 1

    elif args.command == "info":
        print(json.dumps(get_server_info(), indent=2))
        return 0

    return 0


if __name__ == "__main__":
    """
    Direct entry point for the Screenshoter MCP server.

    Usage:
      python -m screenshoter.mcp.mcp_server start [--host HOST] [--port PORT] [--debug]
      python -m screenshoter.mcp.mcp_server health
      python -m screenshoter.mcp.mcp_server info
    """
    sys.exit(main())
