"""
MCP Layer for Screenshoter

This package contains the MCP (Model Context Protocol) layer, exposing the
Screenshoter service commands as tools for AI agents.

The MCP layer is designed to:
1. Expose service commands as MCP tools
2. Handle MCP-specific protocol requirements
3. Manage server startup and configuration
4. Implement MCP-compatible error handling

Usage:
    # Start the MCP server
    python -m screenshoter.mcp.mcp_server start

    # Use the MCP server in Python
    from screenshoter.core import ScreenshoterService
    from screenshoter.mcp import create_mcp_server
    mcp = create_mcp_server(ScreenshoterService.from_config())
    mcp.run()
"""

# MCP server creation
from screenshoter.mcp.mcp_tools import create_mcp_server

# MCP server entry point
from screenshoter.mcp.mcp_server import (
    main,
    health_check,
    get_server_info
)

# MCP wrappers
from screenshoter.mcp.wrappers import (
    capture_wrapper,
    confirm_wrapper,
    reject_wrapper,
    export_wrapper,
    format_mcp_response
)

__all__ = [
    # MCP server
    'create_mcp_server',
    'main',
    'health_check',
    'get_server_info',

    # MCP wrappers
    'capture_wrapper',
    'confirm_wrapper',
    'reject_wrapper',
    'export_wrapper',
    'format_mcp_response'
]

# Example configuration for .mcp.json
EXAMPLE_MCP_CONFIG = """
{
  "mcpServers": {
    "screenshoter": {
      "command": "screenshoter-mcp",
      "args": ["start"]
    }
  }
}
"""
