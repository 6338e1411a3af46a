"""Shared fixtures for the cargo-janitor test suite.

Tests never invoke real cargo subcommands: components take a ``runner``
callable, and ``fake_runner`` records calls and replays canned results.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Callable, Dict, List, Tuple, Union

import pytest

from cargo_janitor.project import Project
from cargo_janitor.utils.commands import CommandResult

MANIFEST = """[package]
name = "{name}"
version = "0.1.0"
edition = "2021"

[dependencies]
"""

Response = Union[CommandResult, Callable[[List[str], Path], CommandResult]]


class FakeRunner:
    """Stand-in for run_command keyed by the command's arguments after the executable."""

    def __init__(self):
        self.responses: Dict[Tuple[str, ...], Response] = {}
        self.calls: List[Tuple[Tuple[str, ...], Path]] = []
        self.default = CommandResult(launched=False, error="cargo not found")

    @staticmethod
    def ok(stdout: str = "", stderr: str = "") -> CommandResult:
        return CommandResult(stdout=stdout, stderr=stderr, return_code=0)

    @staticmethod
    def failed(stdout: str = "", stderr: str = "", code: int = 1) -> CommandResult:
        return CommandResult(stdout=stdout, stderr=stderr, return_code=code)

    @classmethod
    def deleting_target(cls, cmd, cwd) -> CommandResult:
        """Behaves like a working `cargo clean`."""
        shutil.rmtree(Path(cwd) / "target", ignore_errors=True)
        return cls.ok()

    def on(self, *args: str, result: Response) -> "FakeRunner":
        self.responses[tuple(args)] = result
        return self

    def called(self, *args: str) -> bool:
        return any(call_args == tuple(args) for call_args, _ in self.calls)

    def __call__(self, cmd, cwd=None, timeout=None) -> CommandResult:
        args = tuple(cmd[1:])
        self.calls.append((args, cwd))
        response = self.responses.get(args, self.default)
        if callable(response):
            return response(list(cmd), cwd)
        return response


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_project(tmp_path):
    """Factory creating a Cargo project with an optional target directory of a given size."""

    def _make(name: str = "demo", target_bytes: int | None = None, root: Path | None = None) -> Project:
        path = (root or tmp_path) / name
        path.mkdir(parents=True, exist_ok=True)
        (path / "Cargo.toml").write_text(MANIFEST.format(name=name))
        (path / "src").mkdir(exist_ok=True)
        (path / "src" / "main.rs").write_text("fn main() {}\n")
        if target_bytes is not None:
            debug_dir = path / "target" / "debug"
            debug_dir.mkdir(parents=True, exist_ok=True)
            with open(debug_dir / "artifact.bin", "wb") as f:
                # Sparse file: st_size is exact without writing the bytes
                f.truncate(target_bytes)
        return Project(path=path)

    return _make
