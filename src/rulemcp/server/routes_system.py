"""System routes: health, version, stats."""

from __future__ import annotations

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from rulemcp import __version__ as VERSION


async def health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def version(request: Request) -> JSONResponse:
    return JSONResponse({"version": VERSION})


async def stats(request: Request) -> JSONResponse:
    db = request.app.state.db
    metrics = request.app.state.metrics
    data = db.get_stats()
    data["mcp_requests_24h"] = metrics.get_request_count()
    data["mcp_methods"] = [s.model_dump() for s in metrics.get_method_stats()]
    return JSONResponse(data)


routes = [
    Route("/health", health),
    Route("/api/version", version),
    Route("/api/stats", stats),
]
