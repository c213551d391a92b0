"""Configuration handling for platform-checker."""
from __future__ import annotations

from platform_checker.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from platform_checker.config.loader import (
    find_config_file,
    load_config,
    load_config_file,
)
from platform_checker.models.config import CheckerConfig

__all__ = [
    "CheckerConfig",
    "DEFAULT_CONFIG_NAMES",
    "find_config_file",
    "get_default_config",
    "load_config",
    "load_config_file",
]
