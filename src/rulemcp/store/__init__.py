"""Stores: read interfaces, SQLite and in-memory implementations, metrics sinks."""

from rulemcp.store.base import GlobalRuleStore, ProjectStore, RuleStore
from rulemcp.store.database import GlobalRuleView, RuleDatabase
from rulemcp.store.memory import InMemoryGlobalRuleStore, InMemoryProjectStore, InMemoryRuleStore
from rulemcp.store.metrics import (
    InMemoryMetricsSink,
    MethodStat,
    MetricsSink,
    NullMetricsSink,
    SqliteMetricsSink,
)

__all__ = [
    "GlobalRuleStore",
    "GlobalRuleView",
    "InMemoryGlobalRuleStore",
    "InMemoryMetricsSink",
    "InMemoryProjectStore",
    "InMemoryRuleStore",
    "MethodStat",
    "MetricsSink",
    "NullMetricsSink",
    "ProjectStore",
    "RuleDatabase",
    "RuleStore",
    "SqliteMetricsSink",
]
