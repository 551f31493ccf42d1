"""CodeValidator: evaluate source text against a project's resolved rules."""

from __future__ import annotations

import logging
import re
import threading

from rulemcp.rule_engine.models import Rule, Severity, ValidationResult
from rulemcp.rule_engine.resolver import RuleResolver

logger = logging.getLogger(__name__)

_INVALID = object()


class PatternCache:
    """Compiled patterns, one entry per (scope, rule_id).

    Each entry remembers the pattern text it was compiled from. An edited rule
    misses the cache and its new pattern replaces the old entry, so the cache
    never holds more entries than there are rules. Patterns that fail to
    compile are cached as invalid.
    """

    def __init__(self) -> None:
        self._compiled: dict[tuple[str, str], tuple[str, re.Pattern[str] | object]] = {}
        self._lock = threading.Lock()

    def get(self, scope: str, rule_id: str, pattern: str) -> re.Pattern[str] | None:
        key = (scope, rule_id)
        with self._lock:
            entry = self._compiled.get(key)
        if entry is not None and entry[0] == pattern:
            cached = entry[1]
        else:
            cached = _compile(pattern)
            with self._lock:
                self._compiled[key] = (pattern, cached)
        return None if cached is _INVALID else cached  # type: ignore[return-value]

    def clear(self) -> None:
        with self._lock:
            self._compiled.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._compiled)


def _compile(pattern: str) -> re.Pattern[str] | object:
    try:
        return re.compile(pattern)
    except (re.error, RecursionError, OverflowError) as e:
        logger.debug("Skipping invalid rule pattern %r: %s", pattern, e)
        return _INVALID


def issue_message(rule: Rule) -> str:
    return rule.message or rule.name or rule.description


class CodeValidator:
    def __init__(self, resolver: RuleResolver, cache: PatternCache | None = None) -> None:
        self._resolver = resolver
        self._cache = cache

    def validate_code(self, project_id: str, code: str) -> ValidationResult:
        """Search ``code`` with every active, non-empty rule pattern in resolution order.

        A rule whose pattern cannot be compiled is skipped without failing the
        call. Matches of ``error`` rules go to ``errors``, ``warning`` rules to
        ``warnings``; other severities are ignored.
        """
        project_rules = self._resolver.get_project_rules(project_id)
        result = ValidationResult()

        for rule in project_rules.rules:
            if not rule.is_active or not rule.pattern:
                continue

            compiled = self._compile(project_id, rule)
            if compiled is None:
                continue

            try:
                matched = compiled.search(code) is not None
            except (RecursionError, MemoryError) as e:
                logger.debug("Skipping rule %s: pattern evaluation failed: %s", rule.rule_id, e)
                continue

            if not matched:
                continue
            if rule.severity == Severity.ERROR:
                result.errors.append(issue_message(rule))
            elif rule.severity == Severity.WARNING:
                result.warnings.append(issue_message(rule))

        result.valid = len(result.errors) == 0
        return result

    def _compile(self, scope: str, rule: Rule) -> re.Pattern[str] | None:
        if self._cache is None:
            compiled = _compile(rule.pattern)
            return None if compiled is _INVALID else compiled  # type: ignore[return-value]
        return self._cache.get(scope, rule.rule_id, rule.pattern)
