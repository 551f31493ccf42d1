"""Project auto-detection from filesystem paths."""

from rulemcp.detection.detector import EXCLUDED_DIRS, LANGUAGE_MARKERS, ProjectDetector
from rulemcp.detection.models import CONFIDENCE, DetectionMethod, DetectionResult

__all__ = [
    "CONFIDENCE",
    "EXCLUDED_DIRS",
    "LANGUAGE_MARKERS",
    "DetectionMethod",
    "DetectionResult",
    "ProjectDetector",
]
