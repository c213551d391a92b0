"""Checking a configuration's dependencies against managed versions.

A dependency is direct when it is declared, as an external module, in the
configuration or one of the configurations it extends. Everything else that
appears in the resolved graph is transitive.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Optional

import structlog

from platform_checker.exceptions import ConfigurationError, PolicyViolationError
from platform_checker.models.dependency import (
    DeclaredDependency,
    DependencyId,
    DependencySnapshot,
    ExternalModuleDependency,
)
from platform_checker.models.problem import VersionMappingResult

log = structlog.get_logger("platform_checker.versions")


def build_direct_index(dependencies: Iterable[DeclaredDependency]) -> set[DependencyId]:
    """Index the external module dependencies among declarations.

    Project and file dependencies have no module identity and are skipped,
    so they can never make a resolved artifact count as direct.

    Args:
        dependencies: Declared dependencies of any kind.

    Returns:
        Identities of the declared external modules.
    """
    return {
        dep.dependency_id
        for dep in dependencies
        if isinstance(dep, ExternalModuleDependency)
    }


def classify_unmapped(
    configuration: str,
    dependency_ids: Iterable[DependencyId],
    direct_index: set[DependencyId],
    managed_versions: Mapping[str, str],
) -> VersionMappingResult:
    """Classify dependencies without a managed version as direct or transitive.

    Args:
        configuration: Name of the configuration being checked.
        dependency_ids: Identities to check, duplicates allowed.
        direct_index: Identities of the direct dependencies.
        managed_versions: Managed versions keyed by ``group:name``.

    Returns:
        VersionMappingResult with deduplicated ids in first-seen order.
    """
    unmapped_direct: dict[DependencyId, None] = {}
    unmapped_transitive: dict[DependencyId, None] = {}
    for dependency_id in dependency_ids:
        if str(dependency_id) in managed_versions:
            continue
        if dependency_id in direct_index:
            unmapped_direct[dependency_id] = None
        else:
            unmapped_transitive[dependency_id] = None
    return VersionMappingResult(
        configuration=configuration,
        unmapped_direct=list(unmapped_direct),
        unmapped_transitive=list(unmapped_transitive),
    )


def _require_managed_versions(
    managed_versions: Optional[Mapping[str, str]], configuration: str
) -> Mapping[str, str]:
    if managed_versions is None:
        raise ConfigurationError(
            f"No managed versions available for configuration '{configuration}'"
        )
    return managed_versions


def check_version_mapping(
    snapshot: DependencySnapshot,
    configuration: str,
    managed_versions: Optional[Mapping[str, str]],
) -> VersionMappingResult:
    """Check the resolved graph of a configuration against managed versions.

    Resolved artifacts without a module identity (raw files) are skipped.

    Args:
        snapshot: The project's dependency snapshot.
        configuration: Name of the configuration to check.
        managed_versions: Managed versions keyed by ``group:name``.

    Returns:
        The unmapped direct and transitive dependencies.

    Raises:
        ConfigurationError: If the configuration is unknown or no managed
            versions were supplied.
    """
    managed = _require_managed_versions(managed_versions, configuration)
    view = snapshot.get_configuration(configuration)
    direct_index = build_direct_index(snapshot.all_dependencies(configuration))
    resolved_ids = (
        artifact.dependency_id
        for artifact in view.resolved
        if artifact.dependency_id is not None
    )
    result = classify_unmapped(configuration, resolved_ids, direct_index, managed)
    log.info(
        "versions.checked",
        configuration=configuration,
        resolved=len(view.resolved),
        unmapped_direct=len(result.unmapped_direct),
        unmapped_transitive=len(result.unmapped_transitive),
    )
    return result


def check_requested_versions(
    snapshot: DependencySnapshot,
    configuration: str,
    managed_versions: Optional[Mapping[str, str]],
) -> VersionMappingResult:
    """Check the modules requested while resolving a configuration.

    Unlike check_version_mapping this works from the selectors seen during
    resolution, so it also covers modules that conflict resolution later
    replaced.

    Args:
        snapshot: The project's dependency snapshot.
        configuration: Name of the configuration to check.
        managed_versions: Managed versions keyed by ``group:name``.

    Returns:
        The unmapped direct and transitive dependencies.

    Raises:
        ConfigurationError: If the configuration is unknown or no managed
            versions were supplied.
    """
    managed = _require_managed_versions(managed_versions, configuration)
    view = snapshot.get_configuration(configuration)
    direct_index = build_direct_index(snapshot.all_dependencies(configuration))
    result = classify_unmapped(
        configuration,
        (module.dependency_id for module in view.requested),
        direct_index,
        managed,
    )
    log.info(
        "versions.requested_checked",
        configuration=configuration,
        requested=len(view.requested),
        unmapped_direct=len(result.unmapped_direct),
        unmapped_transitive=len(result.unmapped_transitive),
    )
    return result


def format_version_mapping_message(
    result: VersionMappingResult,
    fail_on_unmapped_direct: bool = True,
    fail_on_unmapped_transitive: bool = False,
    help_text: Optional[str] = None,
) -> Optional[str]:
    """Build the failure message for a version mapping result.

    Args:
        result: The classification to report.
        fail_on_unmapped_direct: Whether unmapped direct dependencies fail.
        fail_on_unmapped_transitive: Whether unmapped transitive ones fail.
        help_text: Optional paragraph appended to the message.

    Returns:
        The message, or None if the policy is satisfied.
    """
    sections: list[str] = []
    if fail_on_unmapped_direct and result.unmapped_direct:
        sections.append(_format_section("direct", result.unmapped_direct))
    if fail_on_unmapped_transitive and result.unmapped_transitive:
        sections.append(_format_section("transitive", result.unmapped_transitive))
    if not sections:
        return None
    message = "".join(sections)
    if help_text:
        message += f"\n{help_text}"
    return message


def _format_section(kind: str, dependencies: list[DependencyId]) -> str:
    lines = [f"The following {kind} dependencies do not have managed versions:"]
    lines.extend(f"    - {dep}" for dep in dependencies)
    return "\n".join(lines) + "\n"


def enforce_version_mapping(
    result: VersionMappingResult,
    fail_on_unmapped_direct: bool = True,
    fail_on_unmapped_transitive: bool = False,
    help_text: Optional[str] = None,
) -> None:
    """Fail if the result violates the version mapping policy.

    Args:
        result: The classification to enforce.
        fail_on_unmapped_direct: Whether unmapped direct dependencies fail.
        fail_on_unmapped_transitive: Whether unmapped transitive ones fail.
        help_text: Optional paragraph appended to the failure message.

    Raises:
        PolicyViolationError: Listing every flagged dependency.
    """
    message = format_version_mapping_message(
        result, fail_on_unmapped_direct, fail_on_unmapped_transitive, help_text
    )
    if message is not None:
        raise PolicyViolationError(
            message,
            result.to_problems(fail_on_unmapped_direct, fail_on_unmapped_transitive),
        )
