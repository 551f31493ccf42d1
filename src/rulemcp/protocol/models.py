"""Pydantic models for the MCP envelope and per-method params/results."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from rulemcp.detection.models import DetectionResult
from rulemcp.rule_engine.models import GlobalRule, Rule


class MCPRequest(BaseModel):
    id: str = ""
    method: str = ""
    params: Any = None


class MCPError(BaseModel):
    code: int
    message: str


class MCPResponse(BaseModel):
    id: str
    result: Any = None
    error: MCPError | None = None

    @classmethod
    def success(cls, request_id: str, result: Any) -> MCPResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: str, code: int, message: str) -> MCPResponse:
        return cls(id=request_id, error=MCPError(code=code, message=message))

    def to_wire(self) -> dict[str, Any]:
        """Envelope dict carrying exactly one of ``result`` or ``error``."""
        if self.error is not None:
            return {"id": self.id, "error": self.error.model_dump()}
        return {"id": self.id, "result": self.result}


# -- params ---------------------------------------------------------------


class GetRulesParams(BaseModel):
    project_id: str = ""
    language: str = ""


class ValidateCodeParams(BaseModel):
    project_id: str = ""
    code: str = ""
    language: str = ""


class ProjectInfoParams(BaseModel):
    project_id: str = ""


class AutoDetectParams(BaseModel):
    path: str = ""


class ScanParams(BaseModel):
    base_path: str = ""


# -- results --------------------------------------------------------------


class RulesResponse(BaseModel):
    project_id: str
    language: str = ""
    rules: list[Rule] = Field(default_factory=list)
    global_rules: list[GlobalRule] = Field(default_factory=list)
    applied_rules: list[Rule] = Field(default_factory=list)


class ValidationIssue(BaseModel):
    rule_id: str
    rule_name: str
    severity: str
    message: str


class ValidateCodeResponse(BaseModel):
    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    applied_rules: list[Rule] = Field(default_factory=list)


class ScanResponse(BaseModel):
    projects: list[DetectionResult] = Field(default_factory=list)
    count: int = 0
