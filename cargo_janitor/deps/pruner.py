import logging
from typing import List, Optional, Sequence

from cargo_janitor.deps.manifest import remove_manifest_dependency
from cargo_janitor.deps.scanners import BUILD_DEPENDENCIES, DEV_DEPENDENCIES, UnusedDependency
from cargo_janitor.exceptions import ManifestNotFoundError
from cargo_janitor.project import Project
from cargo_janitor.utils.commands import CommandRunner, run_command

logger = logging.getLogger(__name__)

SECTION_FLAGS = {
    DEV_DEPENDENCIES: "--dev",
    BUILD_DEPENDENCIES: "--build",
}


class DependencyPruner:
    """
    Removes unused dependencies from a project's Cargo.toml with `cargo remove`.

    Each removal is independent: a failed one is skipped and the rest of
    the list is still attempted. When `cargo remove` cannot be launched at
    all, the manifest is edited directly instead (if ``edit_manifest``).
    """

    def __init__(self, runner: CommandRunner = run_command, cargo: str = "cargo",
                 edit_manifest: bool = True, timeout: Optional[float] = None):
        self.runner = runner
        self.cargo = cargo
        self.edit_manifest = edit_manifest
        self.timeout = timeout

    def _remove_command(self, dep: UnusedDependency) -> List[str]:
        cmd = [self.cargo, "remove", dep.name]
        flag = SECTION_FLAGS.get(dep.location)
        if flag:
            cmd.append(flag)
        return cmd

    def _edit_manifest(self, project: Project, dep: UnusedDependency) -> bool:
        try:
            return remove_manifest_dependency(project.manifest_path, dep.name, dep.location)
        except OSError as e:
            logger.debug(f"Could not edit {project.manifest_path}: {e}")
            return False

    def prune(self, project: Project, unused_deps: Sequence[UnusedDependency],
              dry_run: bool = False) -> int:
        """
        Remove ``unused_deps`` from the project manifest.

        Returns:
            int: Number of dependencies actually removed.

        Raises:
            ManifestNotFoundError: If the project has no Cargo.toml.
        """
        if dry_run or not unused_deps:
            return 0

        if not project.manifest_path.exists():
            raise ManifestNotFoundError(f"Cargo.toml not found in {project.path}")

        removed = 0
        for dep in unused_deps:
            result = self.runner(self._remove_command(dep), cwd=project.path, timeout=self.timeout)

            if result.success:
                removed += 1
            elif not result.launched and self.edit_manifest:
                if self._edit_manifest(project, dep):
                    removed += 1
            else:
                logger.debug(
                    f"cargo remove {dep.name} failed in {project.path}: "
                    f"{result.error or result.stderr.strip()}"
                )

        return removed
