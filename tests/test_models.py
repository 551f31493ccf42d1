"""Tests for domain and protocol models."""

import pytest
from pydantic import ValidationError

from rulemcp.detection.models import CONFIDENCE, DetectionMethod, DetectionResult
from rulemcp.protocol.models import MCPRequest, MCPResponse
from rulemcp.rule_engine.models import GlobalRule, Project, Severity


class TestGlobalRuleToRule:
    def test_fields_map_one_to_one(self):
        global_rule = GlobalRule(
            rule_id="g1",
            language="go",
            name="No panic",
            description="avoid panic",
            type="style",
            severity=Severity.ERROR,
            pattern=r"panic\(",
            message="do not panic",
            is_active=True,
        )
        rule = global_rule.to_rule("svc")
        assert rule.project_id == "svc"
        assert rule.model_dump(exclude={"project_id"}) == global_rule.model_dump(
            exclude={"language"}
        )


class TestDetectionResult:
    def test_confidence_table(self):
        assert CONFIDENCE == {
            DetectionMethod.DIRECTORY_NAME: 0.95,
            DetectionMethod.GIT_REPOSITORY: 0.90,
            DetectionMethod.LANGUAGE_FILES: 0.85,
            DetectionMethod.DEFAULT_PROJECT: 0.70,
        }

    def test_confidence_bounds(self):
        with pytest.raises(ValidationError):
            DetectionResult(
                project=Project(project_id="p", name="P"),
                detection_method=DetectionMethod.DEFAULT_PROJECT,
                confidence=1.5,
            )


class TestEnvelope:
    def test_request_defaults(self):
        request = MCPRequest.model_validate_json('{"method": "tools/list"}')
        assert request.id == ""
        assert request.params is None

    def test_success_wire(self):
        assert MCPResponse.success("1", {"ok": True}).to_wire() == {
            "id": "1",
            "result": {"ok": True},
        }

    def test_success_with_null_result_keeps_result_key(self):
        assert MCPResponse.success("1", None).to_wire() == {"id": "1", "result": None}

    def test_failure_wire(self):
        assert MCPResponse.failure("1", 4000, "bad").to_wire() == {
            "id": "1",
            "error": {"code": 4000, "message": "bad"},
        }
