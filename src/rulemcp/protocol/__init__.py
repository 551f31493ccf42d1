"""MCP envelope protocol: models, error codes, tool catalog and dispatcher."""

from rulemcp.protocol.dispatcher import ProtocolDispatcher
from rulemcp.protocol.errors import ERROR_CODES, map_error
from rulemcp.protocol.models import MCPError, MCPRequest, MCPResponse
from rulemcp.protocol.tools import TOOLS

__all__ = [
    "ERROR_CODES",
    "MCPError",
    "MCPRequest",
    "MCPResponse",
    "ProtocolDispatcher",
    "TOOLS",
    "map_error",
]
