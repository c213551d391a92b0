"""Loading of the checker configuration file.

The configuration lives in ``.platform-checker.yaml`` (or ``.yml``) next to
the build, or anywhere else when passed with ``--config``. Catalog files named
in it are resolved against the directory holding the configuration file.
"""
from __future__ import annotations

from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from platform_checker.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from platform_checker.exceptions import ConfigurationError
from platform_checker.models.config import CheckerConfig

log = structlog.get_logger("platform_checker.config")

# Fields holding paths to catalog files
_CATALOG_PATH_FIELDS = ("managed_versions_file", "alternatives_file")


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Locate the checker configuration in a directory.

    Args:
        start_dir: Directory to look in. Defaults to the working directory.

    Returns:
        The first of DEFAULT_CONFIG_NAMES present, or None.
    """
    directory = start_dir or Path.cwd()
    candidates = (directory / name for name in DEFAULT_CONFIG_NAMES)
    return next((path for path in candidates if path.is_file()), None)


def load_config_file(path: Path) -> CheckerConfig:
    """Read and validate a checker configuration file.

    A file that is blank or holds only comments gives the default policy.

    Args:
        path: The YAML configuration file.

    Returns:
        The validated configuration, with relative catalog paths resolved
        against the file's directory.

    Raises:
        ConfigurationError: If the file is unreadable, is not a YAML mapping,
            or holds unknown or mistyped settings.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read configuration file '{path}': {e}"
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax in '{path}': {e}") from e

    if data is None:
        log.debug("config.empty", path=str(path))
        return get_default_config()

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid configuration in '{path}': "
            f"expected a mapping at root level, got {type(data).__name__}"
        )

    try:
        config = CheckerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in '{path}': {format_validation_errors(e)}"
        ) from e

    config = _resolve_catalog_paths(config, path.parent)
    log.debug("config.loaded", path=str(path))
    return config


def _resolve_catalog_paths(config: CheckerConfig, base_dir: Path) -> CheckerConfig:
    updates: dict[str, str] = {}
    for field in _CATALOG_PATH_FIELDS:
        value = getattr(config, field)
        if value is not None and not Path(value).is_absolute():
            updates[field] = str(base_dir / value)
    return config.model_copy(update=updates) if updates else config


def format_validation_errors(error: ValidationError) -> str:
    """Join pydantic errors into ``loc: msg`` pairs separated by ``; ``."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'root'}: {err['msg']}"
        for err in error.errors()
    )


def load_config(config_path: str | None = None) -> CheckerConfig:
    """Load the checker configuration for a run.

    Args:
        config_path: Explicit configuration file. When None, the working
            directory is searched and the defaults apply if nothing is found.

    Returns:
        The configuration to run with.

    Raises:
        ConfigurationError: If the configuration file is invalid.
    """
    path = Path(config_path) if config_path is not None else find_config_file()
    if path is None:
        return get_default_config()
    return load_config_file(path)
