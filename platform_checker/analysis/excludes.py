"""Detection of incomplete dependency exclusions.

An exclusion that names only a group or only a module is dropped when the
dependency is written to a generated POM, so the published artifact would
silently pull in what the build excluded.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import structlog

from platform_checker.exceptions import PolicyViolationError
from platform_checker.models.dependency import ConfigurationView, ExcludeRule
from platform_checker.models.problem import Problem
from platform_checker.output.report import ReportWriter, format_nested_report

log = structlog.get_logger("platform_checker.excludes")

ProblemsByDependency = dict[str, list[str]]


def check_exclude_rule(rule: ExcludeRule) -> str | None:
    """Check a single exclusion.

    Args:
        rule: The exclusion to check.

    Returns:
        A problem message naming the missing qualifier, or None if complete.
    """
    if not rule.group:
        return (
            f"Exclude for module {rule.module} does not specify a group. "
            "The exclusion will not be included in generated POMs"
        )
    if not rule.module:
        return (
            f"Exclude for group {rule.group} does not specify a module. "
            "The exclusion will not be included in generated POMs"
        )
    return None


def find_incomplete_excludes(
    configurations: Iterable[ConfigurationView],
) -> dict[str, ProblemsByDependency]:
    """Find incomplete exclusions on external module dependencies.

    Args:
        configurations: Configurations to scan.

    Returns:
        Problem messages by dependency notation (``group:name:version``),
        by configuration name. Configurations and dependencies without
        problems are omitted.
    """
    problems_by_configuration: dict[str, ProblemsByDependency] = {}
    for configuration in configurations:
        problems_by_dependency: ProblemsByDependency = {}
        for dependency in configuration.module_dependencies():
            problems = [
                problem
                for problem in map(check_exclude_rule, dependency.excludes)
                if problem is not None
            ]
            if problems:
                problems_by_dependency.setdefault(dependency.notation, []).extend(problems)
        if problems_by_dependency:
            problems_by_configuration[configuration.name] = problems_by_dependency
    return problems_by_configuration


def flatten_exclude_problems(
    problems_by_configuration: dict[str, ProblemsByDependency],
) -> list[Problem]:
    return [
        Problem(configuration=configuration, dependency=dependency, message=message)
        for configuration, by_dependency in problems_by_configuration.items()
        for dependency, messages in by_dependency.items()
        for message in messages
    ]


def check_incomplete_excludes(
    project: str,
    configurations: Iterable[ConfigurationView],
    report_path: Path,
) -> list[Problem]:
    """Check for incomplete exclusions, reporting and failing if any exist.

    Args:
        project: Project name, used as the report header.
        configurations: Configurations to scan.
        report_path: Report file to append to when problems are found.

    Returns:
        An empty list when no problems were found.

    Raises:
        PolicyViolationError: If any exclusion is incomplete. The report is
            written before raising.
        ConfigurationError: If the report cannot be written.
    """
    problems_by_configuration = find_incomplete_excludes(configurations)
    problems = flatten_exclude_problems(problems_by_configuration)
    log.info("excludes.checked", project=project, problems=len(problems))
    if not problems:
        return problems

    ReportWriter(report_path).append(
        format_nested_report(project, problems_by_configuration)
    )
    raise PolicyViolationError(
        f"Found incomplete dependency exclusions. See {report_path} "
        "for a detailed report",
        problems,
    )
