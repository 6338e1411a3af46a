"""
Console styling shared by every cargo-janitor command.
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)

STATUS_TAGS = {
    "info": ("[INFO]", "bold blue"),
    "success": ("[SUCCESS]", "bold green"),
    "warning": ("[WARNING]", "bold yellow"),
    "error": ("[ERROR]", "bold red"),
}


def cj_print(message: str, status: str = "info", target: Optional[Console] = None) -> None:
    """Print a message prefixed with a colored status tag."""
    tag, style = STATUS_TAGS.get(status, STATUS_TAGS["info"])
    (target or console).print(f"[{style}]{escape(tag)}[/{style}] {message}")


def cj_header(title: str) -> None:
    """Print a section header."""
    console.print()
    cj_print(f"=== {title} ===", "info")
