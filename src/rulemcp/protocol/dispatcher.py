"""ProtocolDispatcher: route MCP envelopes to engine operations and map errors to codes.

Both transports (HTTP request/response and WebSocket) hand decoded envelopes to
``ProtocolDispatcher.dispatch``; it is the only place an exception becomes a
wire error code.
"""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from rulemcp.errors import AppError, InternalError, ValidationError
from rulemcp.protocol.errors import CODE_NOT_FOUND, map_error
from rulemcp.protocol.models import (
    AutoDetectParams,
    GetRulesParams,
    MCPRequest,
    MCPResponse,
    ProjectInfoParams,
    RulesResponse,
    ScanParams,
    ScanResponse,
    ValidateCodeParams,
    ValidateCodeResponse,
    ValidationIssue,
)
from rulemcp.protocol.tools import TOOLS
from rulemcp.rule_engine.models import GlobalRule, Rule
from rulemcp.store.metrics import NullMetricsSink

if TYPE_CHECKING:
    from rulemcp.config import Config
    from rulemcp.detection.detector import ProjectDetector
    from rulemcp.rule_engine.resolver import RuleResolver
    from rulemcp.rule_engine.validator import CodeValidator
    from rulemcp.store.database import RuleDatabase
    from rulemcp.store.metrics import MetricsSink

logger = logging.getLogger(__name__)

DEFAULT_SCAN_PATH = "/"

M = TypeVar("M", bound=BaseModel)


@contextmanager
def _error_context(context: str) -> Iterator[None]:
    """Prefix the message of an AppError raised inside the block with ``context``."""
    try:
        yield
    except AppError as e:
        e.message = f"{context}: {e.message}"
        raise


def _parse_params(model: type[M], params: Any) -> M:
    if params is None:
        params = {}
    if not isinstance(params, dict):
        raise ValidationError("Invalid parameters")
    try:
        return model.model_validate(params)
    except PydanticValidationError as e:
        raise ValidationError("Invalid parameters", details=e.errors()) from e


class ProtocolDispatcher:
    def __init__(
        self,
        resolver: RuleResolver,
        validator: CodeValidator,
        detector: ProjectDetector,
        metrics: MetricsSink | None = None,
        *,
        default_scan_path: str = DEFAULT_SCAN_PATH,
    ) -> None:
        self._resolver = resolver
        self._validator = validator
        self._detector = detector
        self._metrics = metrics or NullMetricsSink()
        self._default_scan_path = default_scan_path
        self._handlers: dict[str, Callable[[Any], Any]] = {
            "tools/list": self._tools_list,
            "getRules": self._get_rules,
            "validateCode": self._validate_code,
            "getProjectInfo": self._get_project_info,
            "autoDetectProject": self._auto_detect_project,
            "scanLocalProjects": self._scan_local_projects,
        }

    @classmethod
    def from_database(
        cls,
        db: RuleDatabase,
        config: Config,
        *,
        metrics: MetricsSink | None = None,
    ) -> ProtocolDispatcher:
        """Wire resolver, validator and detector over a RuleDatabase."""
        from rulemcp.detection.detector import ProjectDetector
        from rulemcp.rule_engine.resolver import RuleResolver
        from rulemcp.rule_engine.validator import CodeValidator, PatternCache
        from rulemcp.store.database import GlobalRuleView

        resolver = RuleResolver(db, db, GlobalRuleView(db))
        validator = CodeValidator(resolver, PatternCache() if config.pattern_cache else None)
        detector = ProjectDetector(db, db, default_project_id=config.default_project_id)
        return cls(resolver, validator, detector, metrics)

    @property
    def methods(self) -> list[str]:
        return list(self._handlers)

    def dispatch(self, request: MCPRequest) -> MCPResponse:
        """Route one envelope. Never raises; every failure becomes an error envelope."""
        handler = self._handlers.get(request.method)
        if handler is None:
            return MCPResponse.failure(
                request.id, CODE_NOT_FOUND, f"Method not found: {request.method}"
            )

        start = time.perf_counter()
        status = "ok"
        try:
            result = handler(request.params)
            try:
                payload = to_jsonable_python(result)
            except PydanticSerializationError as e:
                raise InternalError("Failed to marshal response") from e
            return MCPResponse.success(request.id, payload)
        except Exception as e:
            status = "error"
            if not isinstance(e, AppError):
                logger.exception("Unhandled error in %s", request.method)
            code, message = map_error(e)
            return MCPResponse.failure(request.id, code, message)
        finally:
            duration_ms = int((time.perf_counter() - start) * 1000)
            self._metrics.record(request.method, status, duration_ms)

    # -- handlers -------------------------------------------------------

    def _tools_list(self, _params: Any) -> dict:
        return {"tools": copy.deepcopy(list(TOOLS))}

    def _get_rules(self, raw: Any) -> RulesResponse:
        params = _parse_params(GetRulesParams, raw)
        if not params.project_id:
            raise ValidationError("Project ID is required")

        with _error_context("Failed to get project rules"):
            project_rules = self._resolver.get_project_rules(params.project_id)

        global_rules: list[GlobalRule] = []
        if params.language:
            try:
                global_rules = self._resolver.get_global_rules(params.language)
            except Exception as e:
                logger.warning("Ignoring global rules for %s: %s", params.language, e)

        applied: list[Rule] = list(project_rules.rules)
        applied.extend(gr.to_rule(params.project_id) for gr in global_rules)

        return RulesResponse(
            project_id=params.project_id,
            language=params.language,
            rules=project_rules.rules,
            global_rules=global_rules,
            applied_rules=applied,
        )

    def _validate_code(self, raw: Any) -> ValidateCodeResponse:
        params = _parse_params(ValidateCodeParams, raw)
        if not params.project_id or not params.code:
            raise ValidationError("Project ID and code are required")

        with _error_context("Failed to validate code"):
            result = self._validator.validate_code(params.project_id, params.code)

        issues = [
            ValidationIssue(
                rule_id="validation-error",
                rule_name="Code Validation Error",
                severity="error",
                message=message,
            )
            for message in result.errors
        ]
        issues.extend(
            ValidationIssue(
                rule_id="validation-warning",
                rule_name="Code Validation Warning",
                severity="warning",
                message=message,
            )
            for message in result.warnings
        )

        try:
            applied = self._resolver.get_project_rules(params.project_id).rules
        except Exception as e:
            logger.warning("Could not reload applied rules for %s: %s", params.project_id, e)
            applied = []

        return ValidateCodeResponse(is_valid=result.valid, issues=issues, applied_rules=applied)

    def _get_project_info(self, raw: Any) -> None:
        params = _parse_params(ProjectInfoParams, raw)
        if not params.project_id:
            raise ValidationError("Project ID is required")
        raise InternalError("getProjectInfo not yet implemented")

    def _auto_detect_project(self, raw: Any) -> BaseModel:
        params = _parse_params(AutoDetectParams, raw)
        if not params.path:
            raise ValidationError("Path is required")

        with _error_context("Project not found"):
            return self._detector.auto_detect_project(params.path)

    def _scan_local_projects(self, raw: Any) -> ScanResponse:
        params = _parse_params(ScanParams, raw)
        base_path = params.base_path or self._default_scan_path

        with _error_context("Failed to scan local projects"):
            results = self._detector.scan_local_projects(base_path)

        return ScanResponse(projects=results, count=len(results))
