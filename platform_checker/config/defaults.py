"""Default configuration values for platform-checker."""

from __future__ import annotations

from platform_checker.models.config import CheckerConfig

# Default configuration file names to search for
DEFAULT_CONFIG_NAMES = [".platform-checker.yaml", ".platform-checker.yml"]


def get_default_config() -> CheckerConfig:
    """Get the default configuration.

    Returns:
        CheckerConfig with all defaults.
    """
    return CheckerConfig()
