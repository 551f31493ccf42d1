"""MCP routes: request/response over HTTP POST and a sequential WebSocket loop."""

from __future__ import annotations

import asyncio
import json
import logging

from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route, WebSocketRoute
from starlette.websockets import WebSocket, WebSocketDisconnect

from rulemcp.protocol.dispatcher import ProtocolDispatcher
from rulemcp.protocol.errors import CODE_VALIDATION
from rulemcp.protocol.models import MCPRequest, MCPResponse

logger = logging.getLogger(__name__)

INVALID_REQUEST_MESSAGE = "Invalid request format"
WS_UNSUPPORTED_DATA = 1003


async def mcp_request(request: Request) -> JSONResponse:
    """POST /mcp/request: one envelope in, one envelope out, always HTTP 200."""
    body = await request.body()
    try:
        envelope = MCPRequest.model_validate_json(body)
    except ValidationError:
        response = MCPResponse.failure("", CODE_VALIDATION, INVALID_REQUEST_MESSAGE)
        return JSONResponse(response.to_wire())

    dispatcher: ProtocolDispatcher = request.app.state.dispatcher
    response = await asyncio.to_thread(dispatcher.dispatch, envelope)
    return JSONResponse(response.to_wire())


async def mcp_websocket(websocket: WebSocket) -> None:
    """WS /mcp/ws: read, dispatch, write, repeat. One call in flight per connection.

    An undecodable frame closes the connection.
    """
    await websocket.accept()
    dispatcher: ProtocolDispatcher = websocket.app.state.dispatcher
    client = websocket.client.host if websocket.client else "unknown"
    logger.info("MCP WebSocket connected: %s", client)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            try:
                envelope = MCPRequest.model_validate_json(raw)
            except ValidationError:
                logger.warning("Closing MCP WebSocket %s: invalid request frame", client)
                await websocket.close(code=WS_UNSUPPORTED_DATA, reason=INVALID_REQUEST_MESSAGE)
                return

            response = await asyncio.to_thread(dispatcher.dispatch, envelope)
            await websocket.send_text(json.dumps(response.to_wire()))
    except WebSocketDisconnect:
        pass
    finally:
        logger.info("MCP WebSocket closed: %s", client)


routes = [
    Route("/mcp/request", mcp_request, methods=["POST"]),
    WebSocketRoute("/mcp/ws", mcp_websocket),
]
