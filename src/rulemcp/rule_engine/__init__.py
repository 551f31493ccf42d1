"""Rule engine: models, resolution and validation of project rules."""

from rulemcp.rule_engine.models import (
    GlobalRule,
    Project,
    ProjectRules,
    Rule,
    Severity,
    ValidationResult,
)
from rulemcp.rule_engine.resolver import RuleResolver
from rulemcp.rule_engine.validator import CodeValidator, PatternCache

__all__ = [
    "CodeValidator",
    "GlobalRule",
    "PatternCache",
    "Project",
    "ProjectRules",
    "Rule",
    "RuleResolver",
    "Severity",
    "ValidationResult",
]
