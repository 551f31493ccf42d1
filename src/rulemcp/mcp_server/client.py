"""Async httpx client wrapper for the MCP request endpoint."""

from __future__ import annotations

import os
import uuid
from typing import Any

import httpx


class RuleServerClient:
    def __init__(self, base_url: str | None = None) -> None:
        if base_url is None:
            base_url = os.environ.get("RULEMCP_SERVER_URL")
        if base_url is None:
            from rulemcp.server.runner import get_api_url

            base_url = get_api_url()
        self._base_url = base_url
        self._client = httpx.AsyncClient(base_url=base_url, timeout=10.0)

    async def close(self) -> None:
        await self._client.aclose()

    async def health(self) -> dict:
        resp = await self._client.get("/health")
        resp.raise_for_status()
        return resp.json()

    async def call(self, method: str, params: dict[str, Any] | None = None) -> dict:
        """POST one envelope to /mcp/request and return the response envelope."""
        envelope = {"id": str(uuid.uuid4()), "method": method, "params": params or {}}
        resp = await self._client.post("/mcp/request", json=envelope)
        resp.raise_for_status()
        return resp.json()
