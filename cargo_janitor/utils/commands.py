"""
Subprocess boundary for every external tool cargo-janitor drives.

Callers never branch on subprocess exceptions: a tool that is missing or
cannot be started comes back as a ``CommandResult`` with ``launched=False``.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Captured result of one external command."""
    stdout: str = ""
    stderr: str = ""
    return_code: Optional[int] = None
    launched: bool = True
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.launched and self.return_code == 0


# Signature shared by run_command and the fakes used in tests
CommandRunner = Callable[..., CommandResult]


def run_command(
    cmd: List[str],
    cwd: Optional[Union[str, Path]] = None,
    timeout: Optional[float] = None,
) -> CommandResult:
    """
    Run an external command and capture its output.

    Args:
        cmd: Program and arguments.
        cwd: Working directory for the command.
        timeout: Seconds before the command is abandoned. ``None`` waits
            indefinitely, which is what build-tool cleans need.

    Returns:
        CommandResult describing the outcome. Never raises for launch errors.
    """
    logger.debug("Running %s in %s", " ".join(cmd), cwd or ".")
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except (FileNotFoundError, PermissionError) as e:
        logger.debug("Could not launch %s: %s", cmd[0], e)
        return CommandResult(launched=False, error=f"{cmd[0]} not found: {e}")
    except subprocess.TimeoutExpired:
        logger.debug("Command timed out after %ss: %s", timeout, " ".join(cmd))
        return CommandResult(error="Command timed out")
    except OSError as e:
        logger.debug("Could not launch %s: %s", cmd[0], e)
        return CommandResult(launched=False, error=str(e))

    logger.debug("%s exited with %s", " ".join(cmd), proc.returncode)
    return CommandResult(
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
        return_code=proc.returncode,
    )
