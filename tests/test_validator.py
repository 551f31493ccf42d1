"""Tests for CodeValidator and PatternCache."""

import re
from unittest.mock import patch

import pytest

from rulemcp.errors import NotFoundError
from rulemcp.rule_engine.models import Project, ProjectRules, Rule
from rulemcp.rule_engine.resolver import RuleResolver
from rulemcp.rule_engine.validator import CodeValidator, PatternCache, issue_message
from rulemcp.store.memory import (
    InMemoryGlobalRuleStore,
    InMemoryProjectStore,
    InMemoryRuleStore,
)


def _validator_for(rules: list[Rule], cache: PatternCache | None = None) -> CodeValidator:
    resolver = RuleResolver(
        InMemoryProjectStore([Project(project_id="p", name="P")]),
        InMemoryRuleStore(rules),
        InMemoryGlobalRuleStore(),
    )
    return CodeValidator(resolver, cache)


class TestValidateCode:
    def test_p1_javascript_scenario(self, validator: CodeValidator):
        result = validator.validate_code("p1", "eval(x); var y=1;")
        assert result.valid is False
        assert result.errors == ["eval is forbidden"]
        assert result.warnings == ["prefer let or const"]

    def test_clean_code_is_valid(self, validator: CodeValidator):
        result = validator.validate_code("p1", "const y = 1;")
        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_warnings_alone_keep_code_valid(self, validator: CodeValidator):
        result = validator.validate_code("p1", "var y = 1;")
        assert result.valid is True
        assert result.warnings == ["prefer let or const"]

    def test_global_rules_skipped_when_disabled(self, validator: CodeValidator):
        result = validator.validate_code("p2", "from os import *\nprint(1)")
        assert result.valid is True
        assert result.errors == []
        assert result.warnings == ["use logging instead of print"]

    def test_unknown_project_raises(self, validator: CodeValidator):
        with pytest.raises(NotFoundError):
            validator.validate_code("missing", "x")

    def test_search_is_unanchored(self):
        validator = _validator_for(
            [Rule(rule_id="r", project_id="p", name="R", severity="error", pattern="TODO")]
        )
        assert validator.validate_code("p", "x = 1  # TODO: fix").valid is False

    def test_empty_pattern_never_matches(self):
        validator = _validator_for(
            [Rule(rule_id="r", project_id="p", name="R", severity="error", pattern="")]
        )
        with patch("rulemcp.rule_engine.validator._compile") as compile_mock:
            result = validator.validate_code("p", "anything")
        compile_mock.assert_not_called()
        assert result.valid is True

    def test_inactive_rule_pattern_never_evaluated(self):
        rule = Rule(
            rule_id="off",
            project_id="p",
            name="Off",
            severity="error",
            pattern="x",
            is_active=False,
        )

        class Resolver:
            def get_project_rules(self, project_id):
                return ProjectRules(project_id=project_id, rules=[rule])

        with patch("rulemcp.rule_engine.validator._compile") as compile_mock:
            result = CodeValidator(Resolver()).validate_code("p", "x")
        compile_mock.assert_not_called()
        assert result.valid is True

    def test_invalid_pattern_is_skipped(self):
        validator = _validator_for(
            [
                Rule(rule_id="bad", project_id="p", name="Bad", severity="error", pattern="(["),
                Rule(rule_id="good", project_id="p", name="Good", severity="error", pattern="x"),
            ]
        )
        result = validator.validate_code("p", "x")
        assert result.valid is False
        assert result.errors == ["Good"]

    def test_other_severities_are_ignored(self):
        validator = _validator_for(
            [
                Rule(rule_id="i", project_id="p", name="Info", severity="info", pattern="x"),
                Rule(rule_id="c", project_id="p", name="Custom", severity="critical", pattern="x"),
            ]
        )
        result = validator.validate_code("p", "x")
        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_messages_follow_rule_order(self):
        validator = _validator_for(
            [
                Rule(rule_id="a", project_id="p", name="A", severity="error", pattern="a"),
                Rule(rule_id="b", project_id="p", name="B", severity="error", pattern="b"),
            ]
        )
        assert validator.validate_code("p", "ab").errors == ["A", "B"]

    def test_multiline_code(self):
        validator = _validator_for(
            [Rule(rule_id="r", project_id="p", name="R", severity="error", pattern="^import os$")]
        )
        assert validator.validate_code("p", "x = 1\nimport os\n").valid is True
        multiline = Rule(
            rule_id="r", project_id="p", name="R", severity="error", pattern="(?m)^import os$"
        )
        validator = _validator_for([multiline])
        assert validator.validate_code("p", "x = 1\nimport os\n").valid is False


class TestIssueMessage:
    def test_prefers_message(self):
        rule = Rule(rule_id="r", name="Name", description="Desc", message="Msg")
        assert issue_message(rule) == "Msg"

    def test_falls_back_to_name(self):
        rule = Rule(rule_id="r", name="Name", description="Desc")
        assert issue_message(rule) == "Name"

    def test_falls_back_to_description(self):
        rule = Rule(rule_id="r", name="", description="Desc")
        assert issue_message(rule) == "Desc"


class TestPatternCache:
    def test_compiles_once_per_key(self):
        cache = PatternCache()
        first = cache.get("p", "r", "abc")
        second = cache.get("p", "r", "abc")
        assert isinstance(first, re.Pattern)
        assert first is second
        assert len(cache) == 1

    def test_edited_pattern_replaces_old_entry(self):
        cache = PatternCache()
        old = cache.get("p", "r", "abc")
        new = cache.get("p", "r", "xyz")
        assert old is not new
        assert new.pattern == "xyz"
        assert len(cache) == 1

    def test_repeated_edits_stay_bounded(self):
        cache = PatternCache()
        for i in range(50):
            cache.get("p", "r", f"v{i}")
        assert len(cache) == 1
        assert cache.get("p", "r", "v49").pattern == "v49"

    def test_scope_and_rule_id_keep_separate_entries(self):
        cache = PatternCache()
        cache.get("p", "r", "abc")
        cache.get("global:python", "r", "abc")
        cache.get("p", "other", "abc")
        assert len(cache) == 3

    def test_invalid_pattern_cached_as_none(self):
        cache = PatternCache()
        assert cache.get("p", "r", "([") is None
        with patch("rulemcp.rule_engine.validator._compile") as compile_mock:
            assert cache.get("p", "r", "([") is None
        compile_mock.assert_not_called()

    def test_clear(self):
        cache = PatternCache()
        cache.get("p", "r", "abc")
        cache.clear()
        assert len(cache) == 0

    def test_cached_and_uncached_results_match(self, resolver: RuleResolver):
        code = "eval(x); var y=1;"
        plain = CodeValidator(resolver).validate_code("p1", code)
        cached_validator = CodeValidator(resolver, PatternCache())
        first = cached_validator.validate_code("p1", code)
        second = cached_validator.validate_code("p1", code)
        assert plain == first == second
