"""MCP tool surface."""

from orca_mcp.server.app import SERVER_NAME, create_server
from orca_mcp.server.boundary import INTERNAL_PREFIX, WIRE_PREFIXES, format_error, tool_boundary
from orca_mcp.server.tools import OrcaTools

__all__ = [
    "INTERNAL_PREFIX",
    "SERVER_NAME",
    "WIRE_PREFIXES",
    "OrcaTools",
    "create_server",
    "format_error",
    "tool_boundary",
]
