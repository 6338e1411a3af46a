"""
Size measurement and human-readable size formatting.
"""

import os
import re
import stat
from pathlib import Path
from typing import Union

from cargo_janitor.exceptions import SizeFormatError

UNITS = ["B", "KB", "MB", "GB", "TB"]

MULTIPLIERS = {unit: 1024 ** power for power, unit in enumerate(UNITS)}

_SIZE_PATTERN = re.compile(r"^([^A-Z]*?)\s*([KMGT]?B)$")


def format_bytes(num_bytes: int) -> str:
    """
    Format a byte count as a human-readable string.

    Values below 1024 are shown as an integer number of bytes; larger values
    use two decimals and the largest unit not exceeding the value.
    """
    size = float(num_bytes)
    unit_idx = 0

    while size >= 1024.0 and unit_idx < len(UNITS) - 1:
        size /= 1024.0
        unit_idx += 1

    if unit_idx == 0:
        return f"{num_bytes} {UNITS[0]}"
    return f"{size:.2f} {UNITS[unit_idx]}"


def parse_size(size_str: str) -> int:
    """
    Parse a size string such as ``"100MB"`` or ``"1.5gb"`` into bytes.

    Raises:
        SizeFormatError: If the unit is missing or unknown, or the magnitude
            is not a non-negative number.
    """
    text = size_str.strip().upper()
    match = _SIZE_PATTERN.match(text)
    if not match:
        raise SizeFormatError(
            f"Invalid size format '{size_str}': expected format like '100MB' or '1GB'"
        )

    number_str, unit = match.groups()
    try:
        number = float(number_str)
    except ValueError:
        raise SizeFormatError(f"Invalid number in size: '{number_str}'") from None

    if number < 0:
        raise SizeFormatError(f"Invalid number in size: '{number_str}'")

    return int(number * MULTIPLIERS[unit])


def _raise_walk_error(error: OSError) -> None:
    raise error


def get_directory_size(path: Union[str, Path]) -> int:
    """
    Get the total size of the regular files below ``path`` in bytes.

    Missing paths measure 0. Symbolic links are neither followed nor
    counted. Errors reading individual entries propagate as ``OSError``.
    """
    path = Path(path)
    if not os.path.lexists(path):
        return 0

    st = os.lstat(path)
    if stat.S_ISREG(st.st_mode):
        return st.st_size
    if not stat.S_ISDIR(st.st_mode):
        return 0

    total = 0
    for dirpath, _dirnames, filenames in os.walk(path, onerror=_raise_walk_error):
        for filename in filenames:
            entry = os.lstat(os.path.join(dirpath, filename))
            if stat.S_ISREG(entry.st_mode):
                total += entry.st_size
    return total
