"""Project detection heuristics: map a filesystem path to a configured project."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from rulemcp.config import DEFAULT_PROJECT_ID
from rulemcp.detection.models import CONFIDENCE, DetectionMethod, DetectionResult
from rulemcp.errors import NotFoundError, ValidationError
from rulemcp.rule_engine.models import Project, Rule

if TYPE_CHECKING:
    from rulemcp.store.base import ProjectStore, RuleStore

logger = logging.getLogger(__name__)

EXCLUDED_DIRS = frozenset(
    {
        "node_modules",
        "vendor",
        "dist",
        "build",
        "target",
        ".git",
        ".vscode",
    }
)

# Checked in this order; the first marker whose language has a project wins.
LANGUAGE_MARKERS: tuple[tuple[str, str], ...] = (
    ("go.mod", "go"),
    ("package.json", "javascript"),
    ("requirements.txt", "python"),
    ("pom.xml", "java"),
    ("Cargo.toml", "rust"),
    ("composer.json", "php"),
    ("Gemfile", "ruby"),
)


def extract_repo_name(url: str) -> str:
    """Return the repository name of a git remote URL, or "" if unrecognized.

    Handles scp-like SSH remotes (``git@host:org/repo.git``) and URL remotes
    (``https://host/org/repo.git``, ``ssh://git@host/org/repo``).
    """
    url = url.strip().rstrip("/")
    if "://" in url:
        repo = url.rsplit("/", 1)[-1]
    elif "@" in url and ":" in url:
        repo = url.split(":", 1)[1].rsplit("/", 1)[-1]
    else:
        return ""
    return repo.removesuffix(".git")


def read_remote_urls(git_config: Path) -> list[str]:
    urls: list[str] = []
    for line in git_config.read_text(encoding="utf-8", errors="replace").splitlines():
        key, sep, value = line.strip().partition("=")
        if sep and key.strip() == "url" and value.strip():
            urls.append(value.strip())
    return urls


class ProjectDetector:
    def __init__(
        self,
        projects: ProjectStore,
        rules: RuleStore,
        *,
        default_project_id: str = DEFAULT_PROJECT_ID,
    ) -> None:
        self._projects = projects
        self._rules = rules
        self._default_project_id = default_project_id

    def auto_detect_project(self, path: str) -> DetectionResult:
        """Run the detection chain on ``path``; the first strategy that finds a project wins.

        Raises NotFoundError when no strategy (including the default project)
        produces a project.
        """
        target = Path(path)
        dir_name = target.name

        project = self._detect_from_directory_name(dir_name)
        if project is not None:
            return self._result(
                project,
                DetectionMethod.DIRECTORY_NAME,
                f"Detected project from directory name '{dir_name}'",
            )

        project = self._detect_from_git(target)
        if project is not None:
            return self._result(
                project,
                DetectionMethod.GIT_REPOSITORY,
                "Detected project from git repository name",
            )

        project = self._detect_from_language_files(target)
        if project is not None:
            return self._result(
                project,
                DetectionMethod.LANGUAGE_FILES,
                "Detected project from language-specific files",
            )

        project = self._find(self._default_project_id)
        if project is not None:
            return self._result(
                project,
                DetectionMethod.DEFAULT_PROJECT,
                "Using the default project",
            )

        raise NotFoundError(f"Could not detect a project for path: {path}")

    def scan_local_projects(self, base_path: str) -> list[DetectionResult]:
        """Walk ``base_path`` and run the full detection chain at every directory.

        Excluded directories are pruned and never descended into. Nested project
        directories can yield overlapping results.
        """
        if not os.path.isdir(base_path):
            raise ValidationError(f"Base path is not a directory: {base_path}")
        if Path(base_path).name in EXCLUDED_DIRS:
            return []

        results: list[DetectionResult] = []
        for dirpath, dirnames, _filenames in os.walk(base_path):
            dirnames[:] = [d for d in dirnames if d not in EXCLUDED_DIRS]
            try:
                results.append(self.auto_detect_project(dirpath))
            except NotFoundError:
                continue
            except Exception as e:
                logger.debug("Detection failed in %s: %s", dirpath, e)
                continue
        logger.info("Scanned %s: %d project matches", base_path, len(results))
        return results

    def _detect_from_directory_name(self, dir_name: str) -> Project | None:
        if not dir_name or dir_name in EXCLUDED_DIRS:
            return None
        return self._find(dir_name)

    def _detect_from_git(self, path: Path) -> Project | None:
        git_config = path / ".git" / "config"
        try:
            urls = read_remote_urls(git_config)
        except OSError:
            return None

        for url in urls:
            repo_name = extract_repo_name(url)
            if not repo_name:
                continue
            project = self._find(repo_name)
            if project is not None:
                return project
        return None

    def _detect_from_language_files(self, path: Path) -> Project | None:
        for filename, language in LANGUAGE_MARKERS:
            if not os.path.exists(path / filename):
                continue
            try:
                projects = self._projects.get_by_language(language)
            except Exception as e:
                logger.debug("Project lookup for language %s failed: %s", language, e)
                continue
            if projects:
                return projects[0]
        return None

    def _find(self, project_id: str) -> Project | None:
        try:
            return self._projects.get_by_id(project_id)
        except NotFoundError:
            return None
        except Exception as e:
            logger.debug("Project lookup for %s failed: %s", project_id, e)
            return None

    def _active_rules(self, project_id: str) -> list[Rule]:
        try:
            return self._rules.get_by_project_id(project_id)
        except Exception as e:
            logger.warning("Could not load rules for detected project %s: %s", project_id, e)
            return []

    def _result(self, project: Project, method: DetectionMethod, message: str) -> DetectionResult:
        return DetectionResult(
            project=project,
            rules=self._active_rules(project.project_id),
            detection_method=method,
            confidence=CONFIDENCE[method],
            message=message,
        )
