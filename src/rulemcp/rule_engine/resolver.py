"""RuleResolver: merge a project's rules with its language's global rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rulemcp.rule_engine.models import GlobalRule, ProjectRules

if TYPE_CHECKING:
    from rulemcp.store.base import GlobalRuleStore, ProjectStore, RuleStore


class RuleResolver:
    def __init__(
        self,
        projects: ProjectStore,
        rules: RuleStore,
        global_rules: GlobalRuleStore,
    ) -> None:
        self._projects = projects
        self._rules = rules
        self._global_rules = global_rules

    def get_project_rules(self, project_id: str) -> ProjectRules:
        """Return the project's active rules, then its language's active global rules.

        Each bucket keeps the store's severity/name ordering; the merged list is
        not re-sorted, so project rules always come first. Rule IDs may repeat
        across the two buckets. Raises NotFoundError for an unknown project;
        any other store error propagates unchanged.
        """
        project = self._projects.get_by_id(project_id)
        rules = list(self._rules.get_by_project_id(project_id))

        if project.apply_global_rules:
            for global_rule in self._global_rules.get_by_language(project.language):
                rules.append(global_rule.to_rule(project_id))

        return ProjectRules(project_id=project_id, rules=rules)

    def get_global_rules(self, language: str) -> list[GlobalRule]:
        return self._global_rules.get_by_language(language)
