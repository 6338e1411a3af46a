"""
Cargo project model and discovery.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from cargo_janitor.exceptions import DiscoveryError
from cargo_janitor.utils.sizes import get_directory_size

logger = logging.getLogger(__name__)

MANIFEST_NAME = "Cargo.toml"


@dataclass(frozen=True)
class Project:
    """A Cargo project rooted at ``path``."""
    path: Path
    name: str = ""
    target_dir: str = field(default="target", compare=False)

    def __post_init__(self):
        if not self.name:
            object.__setattr__(self, "name", self.path.name or str(self.path))

    @property
    def manifest_path(self) -> Path:
        return self.path / MANIFEST_NAME

    @property
    def build_output_dir(self) -> Path:
        return self.path / self.target_dir


def find_projects(
    root: Union[str, Path],
    skip_dirs: Optional[Iterable[str]] = None,
    target_dir: str = "target",
) -> List[Project]:
    """
    Find every directory below ``root`` (inclusive) that holds a Cargo.toml.

    Hidden directories, the build-output directory and any name in
    ``skip_dirs`` are never descended into.

    Raises:
        DiscoveryError: If ``root`` is missing, not a directory or unreadable.
    """
    root = Path(root).expanduser()
    if not root.exists():
        raise DiscoveryError(f"Root path does not exist: {root}")
    if not root.is_dir():
        raise DiscoveryError(f"Root path is not a directory: {root}")
    if not os.access(root, os.R_OK | os.X_OK):
        raise DiscoveryError(f"Root path is not readable: {root}")

    root = root.resolve()
    skipped = set(skip_dirs or ()) | {target_dir}
    projects = []

    def _log_walk_error(error: OSError) -> None:
        logger.warning("Skipping unreadable directory %s: %s", error.filename, error.strerror)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        dirnames[:] = sorted(
            d for d in dirnames if d not in skipped and not d.startswith(".")
        )
        if MANIFEST_NAME in filenames:
            projects.append(Project(path=Path(dirpath), target_dir=target_dir))

    projects.sort(key=lambda p: str(p.path))
    logger.debug("Found %d project(s) under %s", len(projects), root)
    return projects


def filter_by_min_size(projects: List[Project], min_bytes: int) -> List[Project]:
    """Keep the projects whose build-output directory measures at least ``min_bytes``."""
    if min_bytes <= 0:
        return list(projects)

    kept = []
    for project in projects:
        try:
            size = get_directory_size(project.build_output_dir)
        except OSError as e:
            logger.debug("Could not measure %s: %s", project.build_output_dir, e)
            size = 0
        if size >= min_bytes:
            kept.append(project)
        else:
            logger.debug("Skipping %s: %d bytes below threshold", project.path, size)
    return kept
