"""Shared fixtures for rulemcp tests."""

import pytest

from rulemcp.detection.detector import ProjectDetector
from rulemcp.protocol.dispatcher import ProtocolDispatcher
from rulemcp.rule_engine.models import GlobalRule, Project, Rule
from rulemcp.rule_engine.resolver import RuleResolver
from rulemcp.rule_engine.validator import CodeValidator
from rulemcp.store.memory import (
    InMemoryGlobalRuleStore,
    InMemoryProjectStore,
    InMemoryRuleStore,
)
from rulemcp.store.metrics import InMemoryMetricsSink


def _make_project(project_id: str, language: str = "", **kwargs) -> Project:
    return Project(project_id=project_id, name=project_id.title(), language=language, **kwargs)


def _make_rule(rule_id: str, project_id: str, **kwargs) -> Rule:
    kwargs.setdefault("name", rule_id)
    return Rule(rule_id=rule_id, project_id=project_id, **kwargs)


def _make_global_rule(rule_id: str, language: str, **kwargs) -> GlobalRule:
    kwargs.setdefault("name", rule_id)
    return GlobalRule(rule_id=rule_id, language=language, **kwargs)


@pytest.fixture
def projects() -> InMemoryProjectStore:
    """p1 (javascript, global rules on), p2 (python, global rules off), default."""
    return InMemoryProjectStore(
        [
            _make_project("p1", "javascript"),
            _make_project("p2", "python", apply_global_rules=False),
            _make_project("default"),
        ]
    )


@pytest.fixture
def rules() -> InMemoryRuleStore:
    return InMemoryRuleStore(
        [
            _make_rule(
                "no-eval",
                "p1",
                name="No eval",
                severity="error",
                pattern=r"eval\(",
                message="eval is forbidden",
            ),
            _make_rule(
                "no-print",
                "p2",
                name="No print",
                severity="warning",
                pattern=r"print\(",
                message="use logging instead of print",
            ),
        ]
    )


@pytest.fixture
def global_rules() -> InMemoryGlobalRuleStore:
    return InMemoryGlobalRuleStore(
        [
            _make_global_rule(
                "no-var",
                "javascript",
                name="No var",
                severity="warning",
                pattern="var ",
                message="prefer let or const",
            ),
            _make_global_rule(
                "no-star-import",
                "python",
                name="No star import",
                severity="error",
                pattern=r"import \*",
                message="star imports are forbidden",
            ),
        ]
    )


@pytest.fixture
def resolver(projects, rules, global_rules) -> RuleResolver:
    return RuleResolver(projects, rules, global_rules)


@pytest.fixture
def validator(resolver) -> CodeValidator:
    return CodeValidator(resolver)


@pytest.fixture
def detector(projects, rules) -> ProjectDetector:
    return ProjectDetector(projects, rules)


@pytest.fixture
def metrics() -> InMemoryMetricsSink:
    return InMemoryMetricsSink()


@pytest.fixture
def dispatcher(resolver, validator, detector, metrics) -> ProtocolDispatcher:
    return ProtocolDispatcher(resolver, validator, detector, metrics)

