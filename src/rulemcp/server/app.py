"""Starlette app factory with lifespan for database management."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from starlette.applications import Starlette

from rulemcp.config import Config, load_config
from rulemcp.protocol.dispatcher import ProtocolDispatcher
from rulemcp.server.routes_mcp import routes as mcp_routes
from rulemcp.server.routes_system import routes as system_routes
from rulemcp.store.database import RuleDatabase
from rulemcp.store.metrics import SqliteMetricsSink

logger = logging.getLogger(__name__)


def create_app(
    db_path: str | None = None,
    config: Config | None = None,
) -> Starlette:
    """Create a Starlette app serving the MCP endpoints over the given database."""
    if config is None:
        config = load_config()

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncGenerator[None, None]:
        resolved_path = db_path
        if resolved_path is None:
            config.db_path.parent.mkdir(parents=True, exist_ok=True)
            resolved_path = str(config.db_path)

        app.state.db = RuleDatabase(resolved_path)
        app.state.metrics = SqliteMetricsSink(app.state.db.connection, app.state.db.lock)
        app.state.dispatcher = ProtocolDispatcher.from_database(
            app.state.db, config, metrics=app.state.metrics
        )
        logger.info("Rules database opened at %s", resolved_path)

        yield

        app.state.db.close()

    app = Starlette(routes=system_routes + mcp_routes, lifespan=lifespan)
    app.state.config = config
    return app
