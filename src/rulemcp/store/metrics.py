"""Metrics sinks for per-method dispatch timings."""

from __future__ import annotations

import logging
import sqlite3
import threading
from dataclasses import dataclass, field
from typing import Protocol

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class MethodStat(BaseModel):
    method: str
    count: int
    last_used: str
    status: str = "active"


class MetricsSink(Protocol):
    def record(self, method: str, status: str, duration_ms: int) -> None: ...


class NullMetricsSink:
    def record(self, method: str, status: str, duration_ms: int) -> None:
        return None


@dataclass
class InMemoryMetricsSink:
    calls: list[tuple[str, str, int]] = field(default_factory=list)

    def record(self, method: str, status: str, duration_ms: int) -> None:
        self.calls.append((method, status, duration_ms))


class SqliteMetricsSink:
    """Persists calls to the ``mcp_requests`` table of the rules database.

    Recording is best-effort: a failed insert is logged and dropped so that a
    metrics problem never changes a dispatch outcome.
    """

    def __init__(self, conn: sqlite3.Connection, lock: threading.Lock) -> None:
        self._conn = conn
        self._lock = lock

    def record(self, method: str, status: str, duration_ms: int) -> None:
        try:
            with self._lock:
                self._conn.execute(
                    "INSERT INTO mcp_requests (method, status, duration_ms) VALUES (?, ?, ?)",
                    (method, status, duration_ms),
                )
                self._conn.commit()
        except sqlite3.Error as e:
            logger.warning("Failed to record metrics for %s: %s", method, e)

    def get_method_stats(self) -> list[MethodStat]:
        """Per-method call counts over the last 24 hours, busiest first."""
        with self._lock:
            rows = self._conn.execute(
                """SELECT method, COUNT(*) AS count, MAX(created_at) AS last_used
                   FROM mcp_requests
                   WHERE created_at > strftime('%Y-%m-%dT%H:%M:%fZ', 'now', '-24 hours')
                   GROUP BY method
                   ORDER BY count DESC, method ASC"""
            ).fetchall()
        return [
            MethodStat(method=row["method"], count=row["count"], last_used=row["last_used"])
            for row in rows
        ]

    def get_request_count(self) -> int:
        with self._lock:
            row = self._conn.execute(
                """SELECT COUNT(*) FROM mcp_requests
                   WHERE created_at > strftime('%Y-%m-%dT%H:%M:%fZ', 'now', '-24 hours')"""
            ).fetchone()
        return row[0]
