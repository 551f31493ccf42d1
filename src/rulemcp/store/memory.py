"""In-memory stores for tests and fixtures."""

from __future__ import annotations

from collections.abc import Iterable

from rulemcp.errors import NotFoundError
from rulemcp.rule_engine.models import GlobalRule, Project, Rule
from rulemcp.store.base import sort_rules


class InMemoryProjectStore:
    def __init__(self, projects: Iterable[Project] = ()) -> None:
        self._projects: dict[str, Project] = {p.project_id: p for p in projects}

    def add(self, project: Project) -> None:
        self._projects[project.project_id] = project

    def get_by_id(self, project_id: str) -> Project:
        project = self._projects.get(project_id)
        if project is None:
            raise NotFoundError(f"Project '{project_id}' not found")
        return project

    def get_by_language(self, language: str) -> list[Project]:
        matches = sorted(
            (p for p in self._projects.values() if p.language == language),
            key=lambda p: p.project_id,
        )
        return sorted(matches, key=lambda p: p.created_at, reverse=True)


class InMemoryRuleStore:
    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: list[Rule] = list(rules)

    def add(self, rule: Rule) -> None:
        self._rules.append(rule)

    def get_by_project_id(self, project_id: str) -> list[Rule]:
        return sort_rules([r for r in self._rules if r.project_id == project_id and r.is_active])


class InMemoryGlobalRuleStore:
    def __init__(self, rules: Iterable[GlobalRule] = ()) -> None:
        self._rules: list[GlobalRule] = list(rules)

    def add(self, rule: GlobalRule) -> None:
        self._rules.append(rule)

    def get_by_language(self, language: str) -> list[GlobalRule]:
        return sort_rules([r for r in self._rules if r.language == language and r.is_active])
