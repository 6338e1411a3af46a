"""cargo-janitor CLI - Main entry point.

Usage:
    cargo-janitor ~/code
    cargo-janitor ~/code --dry-run --min-size 100MB
    cargo-janitor ~/code --remove-unused-deps --jobs 4
"""

import argparse
import logging
import sys
import threading
from typing import List, Optional

from rich.markup import escape

from cargo_janitor import __version__
from cargo_janitor.branding import cj_print, console, err_console
from cargo_janitor.cleanup.cleaner import ArtifactCleaner
from cargo_janitor.config import JanitorConfig, load_config
from cargo_janitor.deps.cleaner import DependencyCleaner
from cargo_janitor.deps.pruner import DependencyPruner
from cargo_janitor.deps.scanners import UnusedDependencyDetector, default_scanners
from cargo_janitor.exceptions import ConfigError, DiscoveryError, SizeFormatError
from cargo_janitor.orchestrator import BatchOrchestrator, ProjectOutcome, Summary
from cargo_janitor.output import (
    create_progress,
    print_dependency_result,
    print_error,
    print_json,
    print_start_info,
    print_summary,
    print_verbose_cleaned,
)
from cargo_janitor.project import filter_by_min_size, find_projects
from cargo_janitor.utils.commands import run_command
from cargo_janitor.utils.sizes import parse_size

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


class CleanHandler:
    """Handler for the clean run."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def _build_orchestrator(self, config: JanitorConfig, workers: int,
                            cancel_event: threading.Event, on_result) -> BatchOrchestrator:
        cleaner = ArtifactCleaner(runner=run_command, cargo=config.cargo)
        dependency_cleaner = DependencyCleaner(
            detector=UnusedDependencyDetector(
                default_scanners(runner=run_command, cargo=config.cargo,
                                 timeout=config.command_timeout)
            ),
            pruner=DependencyPruner(
                runner=run_command,
                cargo=config.cargo,
                edit_manifest=config.edit_manifest,
                timeout=config.command_timeout,
            ),
        )
        return BatchOrchestrator(
            cleaner=cleaner,
            dependency_cleaner=dependency_cleaner,
            workers=workers,
            cancel_event=cancel_event,
            on_result=on_result,
        )

    def clean(self, args: argparse.Namespace) -> int:
        """Handle a clean run. Returns the process exit code."""
        try:
            min_bytes = parse_size(args.min_size) if args.min_size else 0
            config = load_config(args.config)
            workers = args.jobs if args.jobs is not None else config.workers
            if workers < 1:
                raise ConfigError(f"--jobs must be at least 1, got {workers}")
            projects = find_projects(args.root, config.skip_dirs, config.target_dir)
        except (SizeFormatError, ConfigError, DiscoveryError) as e:
            cj_print(escape(str(e)), "error", target=err_console)
            return EXIT_CONFIG_ERROR

        projects = filter_by_min_size(projects, min_bytes)
        check_deps = args.check_unused_deps or args.remove_unused_deps

        if not args.json:
            print_start_info(args.root, len(projects), args.dry_run)

        if not projects:
            if args.json:
                print_json(Summary.from_results([]))
            else:
                cj_print("No Cargo projects found", "warning")
            return EXIT_OK

        progress = create_progress(args.progress and not args.json)
        task_id = None

        def on_result(outcome: ProjectOutcome) -> None:
            if progress is not None:
                progress.update(task_id, advance=1, description=outcome.project.name)
            if args.json:
                return
            result = outcome.clean_result
            if not result.success:
                print_error(result.path, result.error or "unknown error")
            elif self.verbose:
                print_verbose_cleaned(result, dry_run=args.dry_run)
            if outcome.dependency_result is not None:
                print_dependency_result(outcome.dependency_result, dry_run=args.dry_run)

        cancel_event = threading.Event()
        orchestrator = self._build_orchestrator(config, workers, cancel_event, on_result)
        run_kwargs = dict(
            dry_run=args.dry_run,
            verbose=self.verbose,
            also_prune_deps=args.remove_unused_deps,
            check_deps=check_deps,
        )

        if progress is not None:
            with progress:
                task_id = progress.add_task("Starting...", total=len(projects))
                summary = orchestrator.run(projects, **run_kwargs)
        else:
            summary = orchestrator.run(projects, **run_kwargs)

        if args.json:
            print_json(summary)
        else:
            print_summary(summary)

        return EXIT_INTERRUPTED if cancel_event.is_set() else EXIT_OK


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cargo-janitor",
        description="Reclaim disk space from every Cargo project under a directory "
                    "and optionally prune unused dependencies.",
    )
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Directory to search for Cargo projects (default: current directory)",
    )
    parser.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="Show how much space would be freed without deleting anything",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show per-project results and debug logging",
    )
    parser.add_argument(
        "--remove-unused-deps",
        action="store_true",
        help="Detect unused dependencies and remove them from Cargo.toml",
    )
    parser.add_argument(
        "--check-unused-deps",
        action="store_true",
        help="Report unused dependencies without removing them",
    )
    parser.add_argument(
        "--progress",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Show a progress bar (default: on)",
    )
    parser.add_argument(
        "--min-size",
        metavar="SIZE",
        help="Only clean projects whose target directory is at least SIZE (e.g. 100MB, 1GB)",
    )
    parser.add_argument(
        "--jobs", "-j",
        type=int,
        metavar="N",
        help="Number of projects to clean in parallel (default: CPU count)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the summary as JSON",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to a YAML configuration file",
    )
    parser.add_argument("--version", "-V", action="version", version=f"cargo-janitor {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the cargo-janitor CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    handler = CleanHandler(verbose=args.verbose)
    try:
        return handler.clean(args)
    except KeyboardInterrupt:
        console.print("\nInterrupted")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
