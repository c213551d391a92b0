"""Loading of dependency graph snapshots exported by the build tool.

A snapshot is a YAML (or JSON) document describing one project::

    project: my-app
    configurations:
      - name: compile
        dependencies:
          - group: commons-logging
            name: commons-logging
            version: "1.2"
            excludes:
              - group: log4j
                module: log4j
          - kind: project
            path: ":core"
          - kind: files
            files: [libs/vendor.jar]
      - name: runtime
        extends_from: [compile]
        resolved:
          - {group: commons-logging, name: commons-logging, version: "1.2"}
        managed_versions:
          commons-logging:commons-logging: "1.2"
"""
from __future__ import annotations

from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from platform_checker.config.loader import format_validation_errors
from platform_checker.exceptions import ConfigurationError
from platform_checker.models.dependency import DependencySnapshot

log = structlog.get_logger("platform_checker.snapshot")


def load_snapshot(path: Path) -> DependencySnapshot:
    """Load and validate a dependency graph snapshot.

    Args:
        path: Path to the YAML or JSON snapshot.

    Returns:
        The validated DependencySnapshot.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid YAML,
            or does not describe a snapshot.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read snapshot '{path}': {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax in '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid snapshot in '{path}': "
            f"expected a mapping at root level, got {type(data).__name__}"
        )

    try:
        snapshot = DependencySnapshot.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid snapshot in '{path}': {format_validation_errors(e)}"
        ) from e

    log.debug(
        "snapshot.loaded",
        path=str(path),
        project=snapshot.project,
        configurations=len(snapshot.configurations),
    )
    return snapshot
