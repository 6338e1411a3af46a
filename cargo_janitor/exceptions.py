"""
Custom exceptions for cargo-janitor.
"""


class JanitorError(Exception):
    """Base exception for cargo-janitor errors."""
    pass


class ConfigError(JanitorError):
    """Raised when the configuration file or a configuration value is invalid."""
    pass


class SizeFormatError(JanitorError, ValueError):
    """Raised when a human-readable size string cannot be parsed."""
    pass


class DiscoveryError(JanitorError):
    """Raised when the root directory cannot be searched for projects."""
    pass


class CleanupError(JanitorError):
    """Raised when removing a build-output directory fails."""
    pass


class ManifestNotFoundError(JanitorError):
    """Raised when a project has no Cargo.toml to remove dependencies from."""
    pass
