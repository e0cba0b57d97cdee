"""
MCP Server module for formcraft.

Provides Model Context Protocol server implementation
with stdio and SSE transport support.
"""

from formcraft.mcp_server.server import create_mcp_server, run_mcp_server
from formcraft.mcp_server.tools import get_mcp_tools, handle_tool_call

__all__ = [
    "create_mcp_server",
    "run_mcp_server",
    "get_mcp_tools",
    "handle_tool_call",
]
