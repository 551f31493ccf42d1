"""CLI entry point for the rule server."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, cast

from rulemcp import __version__
from rulemcp.config import Config, load_config
from rulemcp.mcp_server.server import main as mcp_main
from rulemcp.protocol.dispatcher import ProtocolDispatcher
from rulemcp.protocol.models import MCPRequest, MCPResponse
from rulemcp.server.runner import run_server
from rulemcp.store.database import RuleDatabase


def _configure_logging(config: Config) -> None:
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _call_local(config: Config, method: str, params: dict[str, Any]) -> MCPResponse:
    """Dispatch one call in-process against the configured database."""
    config.db_path.parent.mkdir(parents=True, exist_ok=True)
    db = RuleDatabase(str(config.db_path))
    try:
        dispatcher = ProtocolDispatcher.from_database(db, config)
        return dispatcher.dispatch(MCPRequest(id="cli", method=method, params=params))
    finally:
        db.close()


def _print_response(response: MCPResponse) -> None:
    if response.error is not None:
        print(f"Error {response.error.code}: {response.error.message}", file=sys.stderr)
        sys.exit(1)
    print(json.dumps(response.result, indent=2))


def _cmd_serve(args: argparse.Namespace) -> None:
    config = cast(Config, args.config)
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    run_server(config)


def _cmd_mcp_serve(_args: argparse.Namespace) -> None:
    mcp_main()


def _cmd_validate(args: argparse.Namespace) -> None:
    source = cast(Path, args.file)
    if str(source) == "-":
        code = sys.stdin.read()
    else:
        if not source.exists():
            print(f"Error: file not found: {source}", file=sys.stderr)
            sys.exit(1)
        code = source.read_text()

    response = _call_local(
        args.config, "validateCode", {"project_id": args.project_id, "code": code}
    )
    _print_response(response)
    if not response.result["is_valid"]:
        sys.exit(1)


def _cmd_detect(args: argparse.Namespace) -> None:
    path = str(Path(args.path).resolve())
    _print_response(_call_local(args.config, "autoDetectProject", {"path": path}))


def _cmd_scan(args: argparse.Namespace) -> None:
    params = {"base_path": str(Path(args.base_path).resolve())} if args.base_path else {}
    _print_response(_call_local(args.config, "scanLocalProjects", params))


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="rulemcp",
        description="Project coding-rule server speaking MCP over HTTP, WebSocket and stdio",
    )
    _ = parser.add_argument(
        "-V", "--version", action="version", version=f"rulemcp {__version__}"
    )
    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        dest="config_path",
        help="Path to a JSON config file (default: ./.rulemcp.json)",
    )
    subparsers = parser.add_subparsers(dest="command")

    # serve subcommand
    serve_p = subparsers.add_parser("serve", help="Start the HTTP/WebSocket MCP server")
    _ = serve_p.add_argument("--host", default=None, help="Bind address")
    _ = serve_p.add_argument("--port", type=int, default=None, help="Listen port")

    # mcp-serve subcommand
    _ = subparsers.add_parser("mcp-serve", help="Start the MCP stdio bridge")

    # validate subcommand
    validate_p = subparsers.add_parser("validate", help="Validate a file against project rules")
    _ = validate_p.add_argument("project_id", help="Project ID to validate against")
    _ = validate_p.add_argument("file", type=Path, help="Source file to validate, or - for stdin")

    # detect subcommand
    detect_p = subparsers.add_parser("detect", help="Detect the project for a directory")
    _ = detect_p.add_argument("path", help="Directory to detect")

    # scan subcommand
    scan_p = subparsers.add_parser("scan", help="Scan a directory tree for known projects")
    _ = scan_p.add_argument(
        "base_path", nargs="?", default=None, help="Base directory (default: /)"
    )

    args = parser.parse_args()
    dispatch = {
        "serve": _cmd_serve,
        "mcp-serve": _cmd_mcp_serve,
        "validate": _cmd_validate,
        "detect": _cmd_detect,
        "scan": _cmd_scan,
    }
    command = cast(str | None, args.command)
    handler = dispatch.get(command) if command is not None else None
    if handler is None:
        parser.print_help()
        sys.exit(1)

    config = load_config(args.config_path)
    _configure_logging(config)
    args.config = config
    handler(args)
