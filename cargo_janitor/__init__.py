__version__ = "0.1.0"

from .cleanup import ArtifactCleaner, CleanResult
from .orchestrator import BatchOrchestrator, Summary
from .project import Project, find_projects

__all__ = [
    "ArtifactCleaner",
    "BatchOrchestrator",
    "CleanResult",
    "Project",
    "Summary",
    "find_projects",
]
