"""
Configuration for cargo-janitor.

Settings come from three layers, later layers winning:
defaults, an optional YAML file, and CARGO_JANITOR_* environment variables.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from cargo_janitor.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "cargo-janitor" / "config.yaml"
DEFAULT_SKIP_DIRS = ["target", ".git", "node_modules"]

ENV_PREFIX = "CARGO_JANITOR_"


def _default_workers() -> int:
    return os.cpu_count() or 1


@dataclass
class JanitorConfig:
    """Runtime settings shared by discovery, cleaning and dependency pruning."""
    workers: int = field(default_factory=_default_workers)
    cargo: str = "cargo"
    target_dir: str = "target"
    skip_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_SKIP_DIRS))
    # Applies to scanners and `cargo remove`; `cargo clean` always runs to completion
    command_timeout: Optional[float] = None
    edit_manifest: bool = True

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if not isinstance(self.workers, int) or isinstance(self.workers, bool) or self.workers < 1:
            raise ConfigError(f"workers must be a positive integer, got {self.workers!r}")
        if not isinstance(self.cargo, str) or not self.cargo:
            raise ConfigError("cargo must be a non-empty string")
        if not isinstance(self.target_dir, str) or not self.target_dir or "/" in self.target_dir:
            raise ConfigError(f"target_dir must be a plain directory name, got {self.target_dir!r}")
        if not isinstance(self.skip_dirs, list) or not all(isinstance(d, str) for d in self.skip_dirs):
            raise ConfigError("skip_dirs must be a list of directory names")
        if self.command_timeout is not None:
            if isinstance(self.command_timeout, bool) or not isinstance(self.command_timeout, (int, float)) \
                    or self.command_timeout <= 0:
                raise ConfigError(
                    f"command_timeout must be a positive number, got {self.command_timeout!r}"
                )
        if not isinstance(self.edit_manifest, bool):
            raise ConfigError("edit_manifest must be true or false")


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _env_overrides(environ) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}

    workers = environ.get(f"{ENV_PREFIX}WORKERS")
    if workers:
        try:
            overrides["workers"] = int(workers)
        except ValueError:
            raise ConfigError(f"{ENV_PREFIX}WORKERS must be an integer, got {workers!r}") from None

    cargo = environ.get(f"{ENV_PREFIX}CARGO")
    if cargo:
        overrides["cargo"] = cargo

    target_dir = environ.get(f"{ENV_PREFIX}TARGET_DIR")
    if target_dir:
        overrides["target_dir"] = target_dir

    timeout = environ.get(f"{ENV_PREFIX}COMMAND_TIMEOUT")
    if timeout:
        try:
            overrides["command_timeout"] = float(timeout)
        except ValueError:
            raise ConfigError(
                f"{ENV_PREFIX}COMMAND_TIMEOUT must be a number, got {timeout!r}"
            ) from None

    return overrides


def load_config(path: Optional[str] = None, environ=None) -> JanitorConfig:
    """
    Load configuration.

    Args:
        path: Explicit config file. When omitted, $CARGO_JANITOR_CONFIG is
            used, then ~/.config/cargo-janitor/config.yaml if it exists.
        environ: Environment mapping, defaults to os.environ.

    Raises:
        ConfigError: If the file cannot be read or holds invalid settings.
    """
    environ = os.environ if environ is None else environ

    config_path: Optional[Path] = None
    if path:
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
    elif environ.get(f"{ENV_PREFIX}CONFIG"):
        config_path = Path(environ[f"{ENV_PREFIX}CONFIG"])
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
    elif DEFAULT_CONFIG_PATH.is_file():
        config_path = DEFAULT_CONFIG_PATH

    values: Dict[str, Any] = {}
    if config_path is not None:
        logger.debug("Loading configuration from %s", config_path)
        values.update(_read_config_file(config_path))

    known = {f.name for f in fields(JanitorConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    values.update(_env_overrides(environ))
    return JanitorConfig(**values)
