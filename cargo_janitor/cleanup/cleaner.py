import logging
import shutil
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from cargo_janitor.exceptions import CleanupError
from cargo_janitor.project import Project
from cargo_janitor.utils.commands import CommandRunner, run_command
from cargo_janitor.utils.sizes import get_directory_size

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanResult:
    """
    Outcome of cleaning one project.

    Args:
        path (str): Project directory.
        success (bool): Whether the build output was dealt with.
        freed_bytes (int): Bytes reclaimed; in dry-run mode, bytes that would be.
        error (Optional[str]): Failure description when success is False.
    """
    path: str
    success: bool
    freed_bytes: int = 0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ArtifactCleaner:
    """
    Removes a project's build output, preferring `cargo clean` and falling
    back to deleting the target directory when the tool fails.
    """
    def __init__(self, runner: CommandRunner = run_command, cargo: str = "cargo"):
        """
        Initialize the ArtifactCleaner.

        Args:
            runner: Callable used to invoke external commands.
            cargo (str): Cargo executable to run.
        """
        self.runner = runner
        self.cargo = cargo

    def _measure(self, path: Path) -> int:
        """Size of ``path`` in bytes, 0 when it cannot be determined."""
        try:
            return get_directory_size(path)
        except OSError as e:
            logger.debug(f"Could not measure {path}: {e}")
            return 0

    def clean(self, project: Project, dry_run: bool = False) -> CleanResult:
        """
        Clean a single project.

        In dry-run mode the reported ``freed_bytes`` is the current size of
        the build output, i.e. the potential saving; nothing is touched.

        Args:
            project (Project): Project to clean.
            dry_run (bool): If True, only measure.

        Returns:
            CleanResult: Successful result with the bytes freed.

        Raises:
            CleanupError: If the fallback removal of the target directory fails.
        """
        target_dir = project.build_output_dir
        path = str(project.path)
        freed_bytes = self._measure(target_dir)

        if dry_run:
            return CleanResult(path=path, success=True, freed_bytes=freed_bytes)

        result = self.runner([self.cargo, "clean"], cwd=project.path)

        if result.success:
            after_size = self._measure(target_dir)
            return CleanResult(
                path=path,
                success=True,
                freed_bytes=max(0, freed_bytes - after_size),
            )

        logger.debug(
            f"cargo clean failed in {path} ({result.error or result.stderr.strip()}); "
            "removing target directory directly"
        )
        return self._remove_target_dir(project, freed_bytes)

    def _remove_target_dir(self, project: Project, size_before: int) -> CleanResult:
        target_dir = project.build_output_dir
        path = str(project.path)

        if not target_dir.exists():
            return CleanResult(path=path, success=True, freed_bytes=0)

        try:
            shutil.rmtree(target_dir)
        except OSError as e:
            raise CleanupError(f"Failed to remove target directory {target_dir}: {e}") from e

        return CleanResult(path=path, success=True, freed_bytes=size_before)
