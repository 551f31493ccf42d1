"""Configuration defaults, config file loading, and environment overrides."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Server defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 18080
DEFAULT_DB_NAME = "rules.db"
DEFAULT_LOG_LEVEL = "info"

# Detection
DEFAULT_PROJECT_ID = "default"

CONFIG_FILE_NAME = ".rulemcp.json"


def get_data_dir() -> Path:
    env = os.environ.get("RULEMCP_DATA_DIR")
    if env:
        return Path(env)
    return Path.home() / ".rulemcp" / "data"


def _safe_int(value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        return default


@dataclass
class Config:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    db_name: str = DEFAULT_DB_NAME
    log_level: str = DEFAULT_LOG_LEVEL
    default_project_id: str = DEFAULT_PROJECT_ID
    pattern_cache: bool = True

    @property
    def db_path(self) -> Path:
        return get_data_dir() / self.db_name

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


def load_config(path: Path | None = None) -> Config:
    """Load config from a JSON file with env var overrides."""
    if path is None:
        path = Path.cwd() / CONFIG_FILE_NAME
    config = Config()

    if path.exists():
        try:
            text = path.read_text()
            if text.strip():
                data = json.loads(text)
                if isinstance(data, dict):
                    _apply(config, data)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")

    if host := os.environ.get("RULEMCP_HOST"):
        config.host = host
    if port := os.environ.get("RULEMCP_PORT"):
        config.port = _safe_int(port, config.port)
    if db_name := os.environ.get("RULEMCP_DB_NAME"):
        config.db_name = db_name
    if log_level := os.environ.get("RULEMCP_LOG_LEVEL"):
        config.log_level = log_level.lower()
    if default_project := os.environ.get("RULEMCP_DEFAULT_PROJECT"):
        config.default_project_id = default_project
    if cache := os.environ.get("RULEMCP_PATTERN_CACHE"):
        config.pattern_cache = cache.lower() in ("true", "1", "yes")

    return config


def _apply(cfg: Config, data: dict[str, object]) -> None:
    if isinstance(data.get("host"), str):
        cfg.host = data["host"]  # type: ignore[assignment]
    if isinstance(data.get("port"), int):
        cfg.port = data["port"]  # type: ignore[assignment]
    if isinstance(data.get("db_name"), str):
        cfg.db_name = data["db_name"]  # type: ignore[assignment]
    if isinstance(data.get("log_level"), str):
        cfg.log_level = data["log_level"].lower()  # type: ignore[union-attr]
    if isinstance(data.get("default_project_id"), str):
        cfg.default_project_id = data["default_project_id"]  # type: ignore[assignment]
    if isinstance(data.get("pattern_cache"), bool):
        cfg.pattern_cache = data["pattern_cache"]  # type: ignore[assignment]
