"""
Minimal Cargo.toml editing, used when `cargo remove` is not installed.

Only the shapes Cargo itself writes are handled:

    [dependencies]
    serde = "1"
    tokio = { version = "1", features = ["full"] }
    anyhow.workspace = true

    [dependencies.regex]
    version = "1"

Everything else in the file is preserved byte for byte.
"""

import logging
import re
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

_HEADER_PATTERN = re.compile(r"^\s*\[\[?\s*([^\[\]]+?)\s*\]\]?\s*(#.*)?$")


def _section_name(section: str) -> str:
    return section.strip().strip("[]").strip()


def _bracket_balance(line: str) -> int:
    # Strip string contents so brackets inside values do not count
    stripped = re.sub(r'"(\\.|[^"\\])*"|\'[^\']*\'', "", line.split("#", 1)[0])
    return stripped.count("[") + stripped.count("{") - stripped.count("]") - stripped.count("}")


def remove_manifest_dependency(
    manifest_path: Union[str, Path],
    name: str,
    section: str = "[dependencies]",
) -> bool:
    """
    Remove dependency ``name`` from ``section`` of a Cargo.toml.

    Args:
        manifest_path: Path to Cargo.toml.
        name: Dependency name as written in the manifest.
        section: Section label, e.g. "[dev-dependencies]".

    Returns:
        True if the manifest was changed.

    Raises:
        OSError: If the manifest cannot be read or written.
    """
    path = Path(manifest_path)
    table = _section_name(section)
    key_pattern = re.compile(rf'^\s*(?:{re.escape(name)}|"{re.escape(name)}")\s*[.=]')
    subtable = f"{table}.{name}"

    lines = path.read_text().splitlines(keepends=True)
    kept: List[str] = []
    current = None
    dropping_table = False
    pending_balance = 0
    removed = False

    for line in lines:
        if pending_balance > 0:
            pending_balance += _bracket_balance(line)
            continue

        header = _HEADER_PATTERN.match(line)
        if header:
            current = header.group(1)
            dropping_table = current in (subtable, f'{table}."{name}"')
            if dropping_table:
                removed = True
                continue
            kept.append(line)
            continue

        if dropping_table:
            continue

        if current == table and key_pattern.match(line):
            removed = True
            pending_balance = max(0, _bracket_balance(line))
            continue

        kept.append(line)

    if removed:
        path.write_text("".join(kept))
        logger.debug(f"Removed {name} from {section} in {path}")
    return removed
