"""
Unused dependency detection.

Two external scanners are tried in priority order:

1. ``cargo udeps --output json`` - structured output, more accurate.
2. ``cargo machete`` - line-oriented text output.

Neither tool's exit status is meaningful: cargo-udeps exits non-zero even on
success and cargo-machete exits 1 when it finds something. Both output
streams are therefore parsed and the exit code is ignored.

The output parsers are pure functions so they can be tested against captured
tool output.
"""

import json
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence

from cargo_janitor.exceptions import JanitorError
from cargo_janitor.project import Project
from cargo_janitor.utils.commands import CommandResult, CommandRunner, run_command

logger = logging.getLogger(__name__)

DEPENDENCIES = "[dependencies]"
DEV_DEPENDENCIES = "[dev-dependencies]"
BUILD_DEPENDENCIES = "[build-dependencies]"

# cargo-udeps native report keys, in the order they are emitted
UDEPS_KIND_LOCATIONS = [
    ("normal", DEPENDENCIES),
    ("development", DEV_DEPENDENCIES),
    ("build", BUILD_DEPENDENCIES),
]

MACHETE_MARKER = "unused dependency:"


@dataclass(frozen=True)
class UnusedDependency:
    """A manifest entry a scanner reported as unused."""
    name: str
    location: str = DEPENDENCIES

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def parse_udeps_output(output: str) -> List[UnusedDependency]:
    """
    Parse cargo-udeps JSON output.

    Accepts ``{"unused_deps": [{"name": ..., "location": ...}]}`` as well as
    the native report where ``unused_deps`` maps package ids to
    ``{"normal": [...], "development": [...], "build": [...]}``.
    Anything malformed yields an empty list.
    """
    text = output.strip()
    if not text:
        return []

    try:
        data = json.loads(text)
    except ValueError:
        return []
    if not isinstance(data, dict):
        return []

    unused_deps = data.get("unused_deps")
    unused: List[UnusedDependency] = []

    if isinstance(unused_deps, list):
        for entry in unused_deps:
            if not isinstance(entry, dict):
                continue
            name = entry.get("name")
            location = entry.get("location")
            if isinstance(name, str) and name and isinstance(location, str):
                unused.append(UnusedDependency(name=name, location=location))

    elif isinstance(unused_deps, dict):
        for package in unused_deps.values():
            if not isinstance(package, dict):
                continue
            for kind, location in UDEPS_KIND_LOCATIONS:
                names = package.get(kind) or []
                if not isinstance(names, list):
                    continue
                for name in names:
                    if isinstance(name, str) and name:
                        unused.append(UnusedDependency(name=name, location=location))

    return unused


def _bare_backtick_token(line: str) -> Optional[str]:
    if len(line) <= 2 or not (line.startswith("`") and line.endswith("`")):
        return None
    token = line[1:-1]
    if "`" in token or any(ch.isspace() for ch in token):
        return None
    return token


def parse_machete_output(output: str) -> List[UnusedDependency]:
    """
    Parse cargo-machete text output.

    Recognized lines:
        unused dependency: `some-crate`
        `some-crate`

    The second form is a heuristic: any line that is exactly one
    backtick-quoted token is taken as a dependency name, so unrelated tool
    chatter in that shape produces false positives.
    """
    unused: List[UnusedDependency] = []

    for raw_line in output.splitlines():
        line = raw_line.strip()

        if MACHETE_MARKER in line:
            start = line.find("`")
            if start == -1:
                continue
            end = line.find("`", start + 1)
            if end == -1:
                continue
            name = line[start + 1:end]
            if name:
                unused.append(UnusedDependency(name=name, location=DEPENDENCIES))
            continue

        token = _bare_backtick_token(line)
        if token:
            unused.append(UnusedDependency(name=token, location=DEPENDENCIES))

    return unused


class UnusedDependencyScanner:
    """Base class for one external unused-dependency tool."""

    name = "scanner"

    def __init__(self, runner: CommandRunner = run_command, cargo: str = "cargo",
                 timeout: Optional[float] = None):
        self.runner = runner
        self.cargo = cargo
        self.timeout = timeout

    def command(self) -> List[str]:
        raise NotImplementedError("Subclasses must implement command()")

    def parse(self, output: str) -> List[UnusedDependency]:
        raise NotImplementedError("Subclasses must implement parse()")

    def attempt(self, project: Project) -> List[UnusedDependency]:
        """
        Run the tool in the project directory and parse stdout, then stderr.

        Returns:
            The first non-empty parse, or an empty list.
        """
        result = self.runner(self.command(), cwd=project.path, timeout=self.timeout)
        if not result.launched:
            logger.debug(f"{self.name} unavailable: {result.error}")
            return []
        return self._parse_streams(result)

    def _parse_streams(self, result: CommandResult) -> List[UnusedDependency]:
        for stream in (result.stdout, result.stderr):
            if not stream:
                continue
            parsed = self.parse(stream)
            if parsed:
                return parsed
        return []


class UdepsScanner(UnusedDependencyScanner):
    """cargo-udeps, asked for JSON output."""

    name = "cargo-udeps"

    def command(self) -> List[str]:
        return [self.cargo, "udeps", "--output", "json"]

    def parse(self, output: str) -> List[UnusedDependency]:
        return parse_udeps_output(output)


class MacheteScanner(UnusedDependencyScanner):
    """cargo-machete, plain text output."""

    name = "cargo-machete"

    def command(self) -> List[str]:
        return [self.cargo, "machete"]

    def parse(self, output: str) -> List[UnusedDependency]:
        return parse_machete_output(output)


def default_scanners(runner: CommandRunner = run_command, cargo: str = "cargo",
                     timeout: Optional[float] = None) -> List[UnusedDependencyScanner]:
    """Scanners in priority order."""
    return [
        UdepsScanner(runner=runner, cargo=cargo, timeout=timeout),
        MacheteScanner(runner=runner, cargo=cargo, timeout=timeout),
    ]


class UnusedDependencyDetector:
    """Tries each scanner in order and keeps the first non-empty answer."""

    def __init__(self, scanners: Optional[Sequence[UnusedDependencyScanner]] = None):
        self.scanners = list(scanners) if scanners is not None else default_scanners()

    def detect(self, project: Project) -> List[UnusedDependency]:
        """Unused dependencies of ``project``; empty when no scanner finds any."""
        for scanner in self.scanners:
            try:
                found = scanner.attempt(project)
            except (OSError, JanitorError) as e:
                logger.debug(f"{scanner.name} failed in {project.path}: {e}")
                continue
            if found:
                logger.debug(f"{scanner.name} reported {len(found)} unused dependencies in {project.path}")
                return found
        return []
