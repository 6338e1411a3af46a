import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from cargo_janitor.deps.pruner import DependencyPruner
from cargo_janitor.deps.scanners import UnusedDependency, UnusedDependencyDetector
from cargo_janitor.exceptions import JanitorError
from cargo_janitor.project import Project

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DependencyCleanResult:
    """Unused dependencies found in one project and how many were removed."""
    path: str
    success: bool
    unused_deps: List[UnusedDependency] = field(default_factory=list)
    removed_count: int = 0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "success": self.success,
            "unused_deps": [dep.to_dict() for dep in self.unused_deps],
            "removed_count": self.removed_count,
            "error": self.error,
        }


class DependencyCleaner:
    """Detects unused dependencies and, when asked, removes them."""

    def __init__(self, detector: Optional[UnusedDependencyDetector] = None,
                 pruner: Optional[DependencyPruner] = None):
        self.detector = detector or UnusedDependencyDetector()
        self.pruner = pruner or DependencyPruner()

    def clean(self, project: Project, dry_run: bool = False,
              remove: bool = True) -> DependencyCleanResult:
        path = str(project.path)
        unused_deps = self.detector.detect(project)

        removed_count = 0
        if remove and unused_deps:
            try:
                removed_count = self.pruner.prune(project, unused_deps, dry_run)
            except JanitorError as e:
                logger.debug(f"Dependency removal failed in {path}: {e}")
                return DependencyCleanResult(
                    path=path,
                    success=False,
                    unused_deps=unused_deps,
                    error=str(e),
                )

        return DependencyCleanResult(
            path=path,
            success=True,
            unused_deps=unused_deps,
            removed_count=removed_count,
        )
