"""Read interfaces the core consumes from the persistence layer."""

from __future__ import annotations

from typing import Protocol, TypeVar

from rulemcp.rule_engine.models import GlobalRule, Project, Rule

R = TypeVar("R", Rule, GlobalRule)


class ProjectStore(Protocol):
    def get_by_id(self, project_id: str) -> Project:
        """Return the project or raise NotFoundError."""
        ...

    def get_by_language(self, language: str) -> list[Project]:
        """Return projects configured for a language, newest first."""
        ...


class RuleStore(Protocol):
    def get_by_project_id(self, project_id: str) -> list[Rule]:
        """Return active rules ordered by severity desc, name asc."""
        ...


class GlobalRuleStore(Protocol):
    def get_by_language(self, language: str) -> list[GlobalRule]:
        """Return active global rules ordered by severity desc, name asc."""
        ...


def sort_rules(rules: list[R]) -> list[R]:
    """Order rules the way the relational store does: severity desc, then name asc."""
    by_name = sorted(rules, key=lambda r: r.name)
    return sorted(by_name, key=lambda r: r.severity, reverse=True)
