"""
Cleanup module for cargo-janitor.

This module reclaims the space held by Cargo build-output directories:
- Measuring the target directory before and after cleaning
- Running `cargo clean`, with direct removal when the tool fails
- Reporting potential savings in dry-run mode
"""

from cargo_janitor.cleanup.cleaner import ArtifactCleaner, CleanResult

__all__ = [
    "ArtifactCleaner",
    "CleanResult",
]
