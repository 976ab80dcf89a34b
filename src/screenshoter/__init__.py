"""
Screenshoter

Capture screenshots into user-organised collections, optionally review each
capture before it is saved, and export every collection as a zip archive.

This package implements a three-layer architecture:

1. Core Layer: Pure business logic (screenshoter.core)
2. Presentation Layer: CLI interface with rich formatting (screenshoter.cli)
3. Integration Layer: MCP server for AI agent usage (screenshoter.mcp)

Usage:
    # Direct API usage (Core Layer)
    from screenshoter.core import ScreenshoterService
    with ScreenshoterService.from_config() as service:
        service.start().result()
        result = service.capture_now().result()

    # CLI usage (Presentation Layer)
    # screenshoter capture --collection movies

    # MCP server usage (Integration Layer)
    # screenshoter-mcp start
"""

__version__ = "1.0.0"

__all__ = [
    '__version__',
]
