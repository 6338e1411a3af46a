"""
Unused dependency handling for cargo-janitor.

- Detecting unused dependencies with cargo-udeps, falling back to cargo-machete
- Removing them from Cargo.toml with `cargo remove`, or by editing the manifest
"""

from cargo_janitor.deps.cleaner import DependencyCleaner, DependencyCleanResult
from cargo_janitor.deps.manifest import remove_manifest_dependency
from cargo_janitor.deps.pruner import DependencyPruner
from cargo_janitor.deps.scanners import (
    MacheteScanner,
    UdepsScanner,
    UnusedDependency,
    UnusedDependencyDetector,
    UnusedDependencyScanner,
    parse_machete_output,
    parse_udeps_output,
)

__all__ = [
    "DependencyCleaner",
    "DependencyCleanResult",
    "DependencyPruner",
    "MacheteScanner",
    "UdepsScanner",
    "UnusedDependency",
    "UnusedDependencyDetector",
    "UnusedDependencyScanner",
    "parse_machete_output",
    "parse_udeps_output",
    "remove_manifest_dependency",
]
