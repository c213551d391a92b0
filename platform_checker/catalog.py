"""Managed-version and alternatives catalogs.

Catalogs map ``group:name`` identifiers to a value: the approved version for
managed versions, or a suggested replacement for alternatives. They are read
from properties files (the format build tools export), YAML or JSON, and are
passed to the validators explicitly.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from importlib import resources
from pathlib import Path
from typing import Any, Optional

import structlog
import yaml

from platform_checker.constants import DEFAULT_ALTERNATIVES_RESOURCE
from platform_checker.exceptions import ConfigurationError
from platform_checker.models.config import CheckerConfig
from platform_checker.models.dependency import ConfigurationView, DependencyId

log = structlog.get_logger("platform_checker.catalog")

_SEPARATORS = "=: \t\f"
_WHITESPACE = " \t\f"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def parse_properties(text: str) -> dict[str, str]:
    """Parse properties file content.

    Supports ``#``/``!`` comments, ``=``, ``:`` or whitespace separators,
    backslash escapes (including ``\\uXXXX``) and line continuations.

    Args:
        text: The properties file content.

    Returns:
        Mapping of keys to values, in file order. Later keys win.

    Raises:
        ValueError: If a ``\\u`` escape is malformed.
    """
    entries: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        entries[key] = value
    return entries


def _logical_lines(text: str) -> Iterator[str]:
    pending: Optional[str] = None
    for raw_line in text.splitlines():
        line = raw_line.lstrip(_WHITESPACE)
        if pending is None and (not line or line[0] in "#!"):
            continue
        if _continues(line):
            pending = (pending or "") + line[:-1]
            continue
        yield (pending or "") + line
        pending = None
    if pending:
        yield pending


def _continues(line: str) -> bool:
    # An odd number of trailing backslashes escapes the line break
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _split_entry(line: str) -> tuple[str, str]:
    index = 0
    while index < len(line):
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in _SEPARATORS:
            break
        index += 1
    key = line[:index]
    rest = line[index:].lstrip(_WHITESPACE)
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(_WHITESPACE)
    return _unescape(key), _unescape(rest)


def _unescape(value: str) -> str:
    if "\\" not in value:
        return value
    chars: list[str] = []
    index = 0
    while index < len(value):
        char = value[index]
        index += 1
        if char != "\\":
            chars.append(char)
            continue
        if index >= len(value):
            break
        escaped = value[index]
        index += 1
        if escaped == "u":
            code = value[index:index + 4]
            if len(code) != 4:
                raise ValueError(f"Malformed \\uxxxx encoding: \\u{code}")
            try:
                chars.append(chr(int(code, 16)))
            except ValueError as e:
                raise ValueError(f"Malformed \\uxxxx encoding: \\u{code}") from e
            index += 4
        else:
            chars.append(_ESCAPES.get(escaped, escaped))
    return "".join(chars)


def load_properties_file(path: Path) -> dict[str, str]:
    """Load a properties file.

    Args:
        path: Path to the properties file.

    Returns:
        The parsed entries.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read properties file '{path}': {e}") from e
    try:
        return parse_properties(content)
    except ValueError as e:
        raise ConfigurationError(f"Invalid properties file '{path}': {e}") from e


def validate_catalog(entries: Mapping[Any, Any], source: str) -> dict[str, str]:
    """Check that a catalog maps ``group:name`` strings to strings.

    Args:
        entries: The raw catalog.
        source: Description of where the catalog came from, for messages.

    Returns:
        The catalog as a plain dict.

    Raises:
        ConfigurationError: If a key is not ``group:name`` or a value is not
            a string (unquoted YAML versions such as 1.10 parse as numbers).
    """
    catalog: dict[str, str] = {}
    for key, value in entries.items():
        try:
            DependencyId.parse(str(key))
        except ValueError as e:
            raise ConfigurationError(f"Invalid entry in {source}: {e}") from e
        if not isinstance(value, str):
            raise ConfigurationError(
                f"Invalid entry in {source}: value for '{key}' must be a string, "
                f"got {type(value).__name__} (quote it)"
            )
        catalog[str(key)] = value
    return catalog


def load_catalog_file(path: Path) -> dict[str, str]:
    """Load a catalog from a properties, YAML or JSON file.

    Args:
        path: Path to the catalog file. ``.properties`` files are parsed as
            properties; anything else as YAML, which also covers JSON.

    Returns:
        The validated catalog.

    Raises:
        ConfigurationError: If the file cannot be read or is not a valid catalog.
    """
    if path.suffix == ".properties":
        return validate_catalog(load_properties_file(path), f"'{path}'")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read catalog file '{path}': {e}") from e
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax in '{path}': {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid catalog in '{path}': "
            f"expected a mapping at root level, got {type(data).__name__}"
        )
    return validate_catalog(data, f"'{path}'")


def load_default_alternatives() -> dict[str, str]:
    """Load the bundled list of superseded dependencies.

    Returns:
        Mapping of superseded ``group:name`` to the preferred alternative.
    """
    content = (
        resources.files("platform_checker.resources")
        .joinpath(DEFAULT_ALTERNATIVES_RESOURCE)
        .read_text(encoding="utf-8")
    )
    return parse_properties(content)


def resolve_alternatives(
    config: CheckerConfig,
    alternatives_path: Optional[Path] = None,
) -> dict[str, str]:
    """Determine the alternatives catalog to check against.

    An explicit file wins; otherwise ``alternatives_file`` and the inline
    ``alternatives`` from the configuration are combined (inline entries
    win). The bundled list is used only when none of these are given.

    Args:
        config: The checker configuration.
        alternatives_path: Optional file given on the command line.

    Returns:
        The alternatives catalog.
    """
    if alternatives_path is not None:
        return load_catalog_file(alternatives_path)

    if config.alternatives is None and config.alternatives_file is None:
        log.debug("catalog.default_alternatives")
        return load_default_alternatives()

    catalog: dict[str, str] = {}
    if config.alternatives_file is not None:
        catalog.update(load_catalog_file(Path(config.alternatives_file)))
    if config.alternatives is not None:
        catalog.update(validate_catalog(config.alternatives, "configured alternatives"))
    return catalog


def resolve_managed_versions(
    config: CheckerConfig,
    configuration: ConfigurationView,
    managed_versions_path: Optional[Path] = None,
) -> dict[str, str]:
    """Determine the managed versions for a configuration.

    Precedence: explicit file, then the configuration file's
    ``managed_versions_file`` and ``managed_versions`` (inline entries win),
    then the versions exported with the snapshot for the configuration.

    Args:
        config: The checker configuration.
        configuration: The configuration being checked.
        managed_versions_path: Optional file given on the command line.

    Returns:
        The managed versions catalog.

    Raises:
        ConfigurationError: If no managed versions are available.
    """
    if managed_versions_path is not None:
        return load_catalog_file(managed_versions_path)

    if config.managed_versions is not None or config.managed_versions_file is not None:
        catalog: dict[str, str] = {}
        if config.managed_versions_file is not None:
            catalog.update(load_catalog_file(Path(config.managed_versions_file)))
        if config.managed_versions is not None:
            catalog.update(
                validate_catalog(config.managed_versions, "configured managed versions")
            )
        return catalog

    if configuration.managed_versions is not None:
        return dict(configuration.managed_versions)

    raise ConfigurationError(
        f"No managed versions available for configuration '{configuration.name}'. "
        "Export them with the snapshot or set managed_versions_file."
    )
