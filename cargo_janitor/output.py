"""
Human-readable and JSON rendering of cleanup runs.
"""

import json
from pathlib import Path
from typing import Optional, Union

from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from cargo_janitor.branding import cj_header, cj_print, console
from cargo_janitor.cleanup.cleaner import CleanResult
from cargo_janitor.deps.cleaner import DependencyCleanResult
from cargo_janitor.orchestrator import Summary
from cargo_janitor.utils.sizes import format_bytes


def create_progress(show_progress: bool) -> Optional[Progress]:
    """Create the overall progress bar, or None when progress is disabled."""
    if not show_progress:
        return None
    return Progress(
        SpinnerColumn(style="green"),
        TimeElapsedColumn(),
        BarColumn(bar_width=40, style="blue", complete_style="cyan"),
        MofNCompleteColumn(),
        TextColumn("projects completed"),
        TextColumn("[dim]{task.description}"),
        console=console,
        transient=True,
    )


def print_start_info(root: Union[str, Path], project_count: int, dry_run: bool) -> None:
    cj_print(f"Starting cargo clean from: {escape(str(root))}", "info")
    cj_print(f"Found {project_count} project(s)", "info")
    if dry_run:
        cj_print("DRY RUN MODE - no changes will be made", "warning")
    console.print()


def print_verbose_cleaned(result: CleanResult, dry_run: bool = False) -> None:
    """Print the outcome of one successfully cleaned project."""
    path = escape(result.path)
    if result.freed_bytes > 0:
        verb = "would free" if dry_run else "freed"
        cj_print(f"Cleaned: {path} ({verb}: {format_bytes(result.freed_bytes)})", "success")
    else:
        cj_print(f"Cleaned: {path} (already clean)", "success")


def print_error(project_path: Union[str, Path], error_msg: str) -> None:
    cj_print(f"Failed to clean: {escape(str(project_path))} - {escape(error_msg)}", "error")


def print_dependency_result(result: DependencyCleanResult, dry_run: bool = False) -> None:
    """Print the unused dependencies found in one project."""
    path = escape(result.path)
    if not result.success:
        cj_print(f"Dependency check failed: {path} - {escape(result.error or '')}", "error")
        return
    if not result.unused_deps:
        return

    table = Table(title=f"Unused dependencies in {path}", show_header=True, header_style="bold magenta")
    table.add_column("Dependency", style="cyan")
    table.add_column("Section")
    for dep in result.unused_deps:
        table.add_row(escape(dep.name), escape(dep.location))
    console.print(table)

    if dry_run:
        cj_print(f"Would remove {len(result.unused_deps)} dependency(ies)", "info")
    elif result.removed_count:
        cj_print(
            f"Removed {result.removed_count} of {len(result.unused_deps)} unused dependency(ies)",
            "success",
        )


def print_summary(summary: Summary) -> None:
    cj_header("SUMMARY")
    cj_print(f"Successfully cleaned: {summary.cleaned} project(s)", "success")

    if summary.total_freed_bytes > 0:
        cj_print(f"Total storage freed: {format_bytes(summary.total_freed_bytes)}", "success")
    else:
        cj_print("No storage was freed", "info")

    if summary.dependency_results:
        cj_print(
            f"Unused dependencies found: {summary.unused_dependency_count}, "
            f"removed: {summary.removed_dependency_count}",
            "info",
        )

    if summary.skipped:
        cj_print(f"Skipped after interruption: {summary.skipped} project(s)", "warning")

    if summary.failed > 0:
        cj_print(f"Failed to clean: {summary.failed} project(s)", "error")
    else:
        cj_print("All done!", "success")


def print_json(summary: Summary) -> None:
    """Write the summary as JSON to stdout, bypassing rich markup."""
    console.print_json(json.dumps(summary.to_dict()))
