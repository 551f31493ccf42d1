"""Pydantic models for project auto-detection."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from rulemcp.rule_engine.models import Project, Rule


class DetectionMethod(StrEnum):
    DIRECTORY_NAME = "directory_name"
    GIT_REPOSITORY = "git_repository"
    LANGUAGE_FILES = "language_files"
    DEFAULT_PROJECT = "default_project"


CONFIDENCE: dict[DetectionMethod, float] = {
    DetectionMethod.DIRECTORY_NAME: 0.95,
    DetectionMethod.GIT_REPOSITORY: 0.90,
    DetectionMethod.LANGUAGE_FILES: 0.85,
    DetectionMethod.DEFAULT_PROJECT: 0.70,
}


class DetectionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    project: Project
    rules: list[Rule] = Field(default_factory=list)
    detection_method: DetectionMethod
    confidence: float = Field(ge=0.0, le=1.0)
    message: str = ""
