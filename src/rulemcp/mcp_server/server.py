"""MCP stdio server exposing the rule tools and proxying calls to the HTTP endpoint."""

from __future__ import annotations

import json

import anyio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.stdio import stdio_server

from rulemcp import __version__
from rulemcp.mcp_server.client import RuleServerClient
from rulemcp.protocol.tools import TOOLS


class ToolCallError(Exception):
    """The rule server answered a tool call with an error envelope."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"Error {code}: {message}")
        self.code = code
        self.message = message


def create_mcp_server() -> Server:
    """Create and configure the MCP server with one tool per rule method."""
    server = Server("rulemcp", __version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=tool["name"],
                description=tool["description"],
                inputSchema=tool["inputSchema"],
            )
            for tool in TOOLS
        ]

    @server.call_tool()
    async def call_tool(
        name: str,
        arguments: dict | None,
    ) -> list[types.TextContent]:
        if name not in {tool["name"] for tool in TOOLS}:
            return [types.TextContent(type="text", text=f"Unknown tool: {name}")]

        client = RuleServerClient()
        try:
            envelope = await client.call(name, arguments or {})
        finally:
            await client.close()

        error = envelope.get("error")
        if error:
            raise ToolCallError(error.get("code", 0), error.get("message", ""))

        return [
            types.TextContent(type="text", text=json.dumps(envelope.get("result"), indent=2))
        ]

    return server


async def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    server = create_mcp_server()
    async with stdio_server() as (read_stream, write_stream):
        init_options = server.create_initialization_options(
            notification_options=NotificationOptions(),
        )
        await server.run(read_stream, write_stream, init_options)


def main() -> None:
    anyio.run(run_mcp_server)
