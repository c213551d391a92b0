"""Detection of dependencies that have a preferred alternative."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

import structlog

from platform_checker.exceptions import PolicyViolationError
from platform_checker.models.dependency import ConfigurationView
from platform_checker.models.problem import Problem
from platform_checker.output.report import ReportWriter, format_grouped_report

log = structlog.get_logger("platform_checker.alternatives")


def find_alternatives(
    configurations: Iterable[ConfigurationView],
    alternatives: Mapping[str, str],
) -> dict[str, list[Problem]]:
    """Find declared dependencies that should be replaced.

    Args:
        configurations: Configurations to scan.
        alternatives: Preferred alternative by banned ``group:name``.

    Returns:
        Problems by configuration name; configurations without problems
        are omitted.
    """
    problems_by_configuration: dict[str, list[Problem]] = {}
    for configuration in configurations:
        problems: list[Problem] = []
        for dependency in configuration.module_dependencies():
            dependency_id = str(dependency.dependency_id)
            alternative = alternatives.get(dependency_id)
            if alternative is not None:
                problems.append(
                    Problem(
                        configuration=configuration.name,
                        dependency=dependency_id,
                        message=(
                            f"Please depend on {alternative} instead of {dependency_id}"
                        ),
                    )
                )
        if problems:
            problems_by_configuration[configuration.name] = problems
    return problems_by_configuration


def check_alternative_dependencies(
    project: str,
    configurations: Iterable[ConfigurationView],
    alternatives: Mapping[str, str],
    report_path: Path,
) -> list[Problem]:
    """Check for dependencies with alternatives, reporting and failing if any exist.

    Args:
        project: Project name, used as the report header.
        configurations: Configurations to scan.
        alternatives: Preferred alternative by banned ``group:name``.
        report_path: Report file to append to when problems are found.

    Returns:
        An empty list when no problems were found.

    Raises:
        PolicyViolationError: If any dependency has an alternative. The
            report is written before raising.
        ConfigurationError: If the report cannot be written.
    """
    problems_by_configuration = find_alternatives(configurations, alternatives)
    problems = [p for group in problems_by_configuration.values() for p in group]
    log.info("alternatives.checked", project=project, problems=len(problems))
    if not problems:
        return problems

    ReportWriter(report_path).append(
        format_grouped_report(
            project,
            {
                configuration: [p.message for p in group]
                for configuration, group in problems_by_configuration.items()
            },
        )
    )
    raise PolicyViolationError(
        "Found dependencies that have better alternatives. See "
        f"{report_path} for a detailed report",
        problems,
    )
