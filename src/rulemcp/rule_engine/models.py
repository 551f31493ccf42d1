"""Pydantic models for projects, rules and validation results."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


def _now() -> datetime:
    return datetime.now(UTC)


class Project(BaseModel):
    project_id: str
    name: str
    description: str = ""
    language: str = ""
    apply_global_rules: bool = True
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class Rule(BaseModel):
    rule_id: str
    project_id: str = ""
    name: str
    description: str = ""
    type: str = ""
    severity: str = Severity.WARNING  # open set; only error/warning affect validation
    pattern: str = ""
    message: str = ""
    is_active: bool = True


class GlobalRule(BaseModel):
    rule_id: str
    language: str
    name: str
    description: str = ""
    type: str = ""
    severity: str = Severity.WARNING
    pattern: str = ""
    message: str = ""
    is_active: bool = True

    def to_rule(self, project_id: str = "") -> Rule:
        """Convert into the project Rule shape, dropping the language tag."""
        return Rule(
            rule_id=self.rule_id,
            project_id=project_id,
            name=self.name,
            description=self.description,
            type=self.type,
            severity=self.severity,
            pattern=self.pattern,
            message=self.message,
            is_active=self.is_active,
        )


class ProjectRules(BaseModel):
    """Project rules followed by the language's global rules, in that order."""

    project_id: str
    rules: list[Rule] = Field(default_factory=list)


class ValidationResult(BaseModel):
    valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
