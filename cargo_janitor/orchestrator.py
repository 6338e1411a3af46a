"""
Batch orchestration: clean every discovered project and summarize.

Each project is processed independently on a worker thread. Workers never
touch shared state; they return a ``ProjectOutcome`` and the Summary is
reduced from those outcomes on the calling thread once work has finished.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from cargo_janitor.cleanup.cleaner import ArtifactCleaner, CleanResult
from cargo_janitor.deps.cleaner import DependencyCleaner, DependencyCleanResult
from cargo_janitor.project import Project

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectOutcome:
    """Everything that happened to one project during a run."""
    index: int
    project: Project
    clean_result: CleanResult
    dependency_result: Optional[DependencyCleanResult] = None


@dataclass(frozen=True)
class Summary:
    """Aggregate of one batch run; results are in discovery order."""
    total_projects: int
    cleaned: int
    failed: int
    total_freed_bytes: int
    results: List[CleanResult] = field(default_factory=list)
    dependency_results: List[DependencyCleanResult] = field(default_factory=list)
    skipped: int = 0

    @classmethod
    def from_results(cls, outcomes: Iterable[ProjectOutcome], skipped: int = 0) -> "Summary":
        ordered = sorted(outcomes, key=lambda o: o.index)
        results = [o.clean_result for o in ordered]
        succeeded = [r for r in results if r.success]

        return cls(
            total_projects=len(results),
            cleaned=len(succeeded),
            failed=len(results) - len(succeeded),
            total_freed_bytes=sum(r.freed_bytes for r in succeeded),
            results=results,
            dependency_results=[o.dependency_result for o in ordered if o.dependency_result],
            skipped=skipped,
        )

    @property
    def failures(self) -> List[CleanResult]:
        return [r for r in self.results if not r.success]

    @property
    def unused_dependency_count(self) -> int:
        return sum(len(r.unused_deps) for r in self.dependency_results)

    @property
    def removed_dependency_count(self) -> int:
        return sum(r.removed_count for r in self.dependency_results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_projects": self.total_projects,
            "cleaned": self.cleaned,
            "failed": self.failed,
            "skipped": self.skipped,
            "total_freed_bytes": self.total_freed_bytes,
            "results": [r.to_dict() for r in self.results],
            "dependency_results": [r.to_dict() for r in self.dependency_results],
        }


class BatchOrchestrator:
    """Runs the artifact cleaner (and optionally the dependency cleaner) over many projects."""

    def __init__(
        self,
        cleaner: Optional[ArtifactCleaner] = None,
        dependency_cleaner: Optional[DependencyCleaner] = None,
        workers: int = 1,
        cancel_event: Optional[threading.Event] = None,
        on_result: Optional[Callable[[ProjectOutcome], None]] = None,
    ):
        """
        Args:
            cleaner: Artifact cleaner used for every project.
            dependency_cleaner: Used when dependency checking is requested.
            workers: Size of the worker pool.
            cancel_event: Once set, no further project work is started.
            on_result: Called on the calling thread as each project finishes.
        """
        self.cleaner = cleaner or ArtifactCleaner()
        self.dependency_cleaner = dependency_cleaner
        self.workers = max(1, workers)
        self.cancel_event = cancel_event or threading.Event()
        self.on_result = on_result

    def _clean(self, project: Project, dry_run: bool) -> CleanResult:
        try:
            return self.cleaner.clean(project, dry_run=dry_run)
        except Exception as e:
            logger.error(f"Failed to clean {project.path}: {e}")
            return CleanResult(path=str(project.path), success=False, freed_bytes=0, error=str(e))

    def _clean_dependencies(self, project: Project, dry_run: bool,
                            remove: bool) -> DependencyCleanResult:
        dependency_cleaner = self.dependency_cleaner or DependencyCleaner()
        try:
            return dependency_cleaner.clean(project, dry_run=dry_run, remove=remove)
        except Exception as e:
            logger.error(f"Failed to check dependencies of {project.path}: {e}")
            return DependencyCleanResult(path=str(project.path), success=False, error=str(e))

    def _process(self, index: int, project: Project, dry_run: bool, verbose: bool,
                 also_prune_deps: bool, check_deps: bool) -> Optional[ProjectOutcome]:
        if self.cancel_event.is_set():
            return None

        clean_result = self._clean(project, dry_run)
        if verbose and clean_result.success:
            logger.info(f"Cleaned {project.path}: {clean_result.freed_bytes} bytes")

        dependency_result = None
        if also_prune_deps or check_deps:
            dependency_result = self._clean_dependencies(project, dry_run, remove=also_prune_deps)

        return ProjectOutcome(
            index=index,
            project=project,
            clean_result=clean_result,
            dependency_result=dependency_result,
        )

    def _collect(self, future: Future, outcomes: List[ProjectOutcome]) -> None:
        outcome = future.result()
        if outcome is None:
            return
        outcomes.append(outcome)
        if self.on_result:
            self.on_result(outcome)

    def run(
        self,
        projects: Iterable[Project],
        dry_run: bool = False,
        verbose: bool = False,
        also_prune_deps: bool = False,
        check_deps: bool = False,
    ) -> Summary:
        """
        Process every project and return the Summary.

        A failure in one project is recorded in its CleanResult and never
        stops the others. On KeyboardInterrupt, projects not yet started are
        skipped while running ones finish.
        """
        projects = list(projects)
        outcomes: List[ProjectOutcome] = []
        if not projects:
            return Summary.from_results(outcomes)

        pool_size = min(self.workers, len(projects))
        with ThreadPoolExecutor(max_workers=pool_size, thread_name_prefix="janitor") as executor:
            futures = [
                executor.submit(self._process, index, project, dry_run, verbose,
                                also_prune_deps, check_deps)
                for index, project in enumerate(projects)
            ]
            pending = set(futures)
            try:
                for future in as_completed(futures):
                    pending.discard(future)
                    self._collect(future, outcomes)
            except KeyboardInterrupt:
                logger.warning("Interrupted; waiting for running projects to finish")
                self.cancel_event.set()
                for future in pending:
                    future.cancel()
                for future in pending:
                    if not future.cancelled():
                        self._collect(future, outcomes)

        skipped = len(projects) - len(outcomes)
        if skipped:
            logger.info(f"Skipped {skipped} project(s) after cancellation")
        return Summary.from_results(outcomes, skipped=skipped)
