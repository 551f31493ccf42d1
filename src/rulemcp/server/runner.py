"""Run the MCP server under uvicorn and advertise its address in port.lock."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from rulemcp.config import DEFAULT_HOST, DEFAULT_PORT, Config, get_data_dir, load_config

logger = logging.getLogger(__name__)

# Bind-all addresses are not dialable; clients connect over loopback instead.
_WILDCARD_HOSTS = ("0.0.0.0", "::")


def get_port_lock_path() -> Path:
    return get_data_dir() / "port.lock"


def write_port_lock(host: str, port: int) -> Path:
    lock_path = get_port_lock_path()
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock_path.write_text(json.dumps({"host": host, "port": port, "pid": os.getpid()}))
    return lock_path


def read_port_lock() -> dict[str, Any]:
    try:
        return json.loads(get_port_lock_path().read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def remove_port_lock() -> None:
    get_port_lock_path().unlink(missing_ok=True)


@contextmanager
def port_lock(host: str, port: int) -> Iterator[Path]:
    """Advertise ``host:port`` in port.lock for as long as the block runs."""
    lock_path = write_port_lock(host, port)
    try:
        yield lock_path
    finally:
        remove_port_lock()


def get_api_url() -> str:
    """Server URL from port.lock, falling back to the defaults."""
    data = read_port_lock()
    host = data.get("host", DEFAULT_HOST)
    if host in _WILDCARD_HOSTS:
        host = DEFAULT_HOST
    port = data.get("port", DEFAULT_PORT)
    return f"http://{host}:{port}"


def run_server(config: Config | None = None) -> None:
    """Serve the MCP HTTP/WebSocket app built from ``config`` until uvicorn exits.

    The app is built here rather than by uvicorn's factory loader so the
    database, default project and cache settings of ``config`` are the ones
    the server runs with.
    """
    import uvicorn

    from rulemcp.server.app import create_app

    if config is None:
        config = load_config()

    app = create_app(config=config)
    with port_lock(config.host, config.port):
        logger.info("Starting MCP server on %s (db: %s)", config.address, config.db_path)
        uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level)
