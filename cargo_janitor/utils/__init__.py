"""Shared helpers: subprocess invocation and size measurement."""

from cargo_janitor.utils.commands import CommandResult, run_command
from cargo_janitor.utils.sizes import format_bytes, get_directory_size, parse_size

__all__ = [
    "CommandResult",
    "run_command",
    "format_bytes",
    "get_directory_size",
    "parse_size",
]
