"""Orchestration of the platform checks.

Each ``run_*`` function performs one check and turns a policy failure into a
failed CheckResult. Configuration errors are not caught: a check that cannot
run aborts the whole run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import structlog

from platform_checker.analysis.alternatives import check_alternative_dependencies
from platform_checker.analysis.excludes import check_incomplete_excludes
from platform_checker.analysis.filtering import select_configurations
from platform_checker.analysis.versions import (
    check_requested_versions,
    check_version_mapping,
    enforce_version_mapping,
)
from platform_checker.catalog import resolve_alternatives, resolve_managed_versions
from platform_checker.constants import (
    ALTERNATIVE_DEPENDENCIES_CHECK,
    ALTERNATIVES_REPORT_NAME,
    INCOMPLETE_EXCLUDES_CHECK,
    INCOMPLETE_EXCLUDES_REPORT_NAME,
    JDK_TESTS_CHECK,
    VERSION_MAPPING_CHECK,
    VERSION_MAPPING_HELP,
)
from platform_checker.exceptions import JdkTestError, PolicyViolationError
from platform_checker.jdk import discover_jdk_targets, enforce_jdk_tests, run_jdk_tests
from platform_checker.models.config import CheckerConfig
from platform_checker.models.dependency import DependencySnapshot
from platform_checker.models.problem import CheckResult, CheckSummary
from platform_checker.output.report import default_report_path

log = structlog.get_logger("platform_checker.checker")


def _failed(
    name: str, error: PolicyViolationError, report_path: Optional[Path] = None
) -> CheckResult:
    return CheckResult(
        name=name,
        passed=False,
        problems=error.problems,
        message=str(error),
        report_path=str(report_path) if report_path is not None else None,
    )


def run_version_mapping(
    snapshot: DependencySnapshot,
    config: CheckerConfig,
    configuration: Optional[str] = None,
    managed_versions_path: Optional[Path] = None,
    before_resolve: bool = False,
) -> CheckResult:
    """Check a configuration's dependencies against the managed versions.

    Args:
        snapshot: The project's dependency snapshot.
        config: Checker configuration with the fail-on policy.
        configuration: Configuration to check. Defaults to
            ``config.version_mapping_configuration``.
        managed_versions_path: Optional managed versions file overriding
            the configured ones.
        before_resolve: Check the requested module selectors instead of
            the resolved artifacts.

    Returns:
        The check result.

    Raises:
        ConfigurationError: If the configuration or managed versions are missing.
    """
    name = configuration or config.version_mapping_configuration
    view = snapshot.get_configuration(name)
    managed = resolve_managed_versions(config, view, managed_versions_path)

    if before_resolve:
        result = check_requested_versions(snapshot, name, managed)
        help_text: Optional[str] = VERSION_MAPPING_HELP
    else:
        result = check_version_mapping(snapshot, name, managed)
        help_text = None

    try:
        enforce_version_mapping(
            result,
            fail_on_unmapped_direct=config.fail_on_unmapped_direct_dependency,
            fail_on_unmapped_transitive=config.fail_on_unmapped_transitive_dependency,
            help_text=help_text,
        )
    except PolicyViolationError as e:
        return _failed(VERSION_MAPPING_CHECK, e)
    return CheckResult(name=VERSION_MAPPING_CHECK, passed=True)


def run_incomplete_excludes(
    snapshot: DependencySnapshot,
    config: CheckerConfig,
    configurations: Optional[list[str]] = None,
    report_path: Optional[Path] = None,
) -> CheckResult:
    """Check the selected configurations for incomplete exclusions.

    Args:
        snapshot: The project's dependency snapshot.
        config: Checker configuration.
        configurations: Configuration names overriding ``config.configurations``.
        report_path: Report file overriding the default location.

    Returns:
        The check result.
    """
    path = report_path or default_report_path(
        Path(config.build_dir), INCOMPLETE_EXCLUDES_REPORT_NAME
    )
    selected = select_configurations(
        snapshot, configurations if configurations is not None else config.configurations
    )
    try:
        check_incomplete_excludes(snapshot.project, selected, path)
    except PolicyViolationError as e:
        return _failed(INCOMPLETE_EXCLUDES_CHECK, e, path)
    return CheckResult(name=INCOMPLETE_EXCLUDES_CHECK, passed=True)


def run_alternative_dependencies(
    snapshot: DependencySnapshot,
    config: CheckerConfig,
    configurations: Optional[list[str]] = None,
    alternatives_path: Optional[Path] = None,
    report_path: Optional[Path] = None,
) -> CheckResult:
    """Check the selected configurations for dependencies with alternatives.

    Args:
        snapshot: The project's dependency snapshot.
        config: Checker configuration.
        configurations: Configuration names overriding ``config.configurations``.
        alternatives_path: Alternatives file overriding the configured ones.
        report_path: Report file overriding the default location.

    Returns:
        The check result.
    """
    path = report_path or default_report_path(
        Path(config.build_dir), ALTERNATIVES_REPORT_NAME
    )
    alternatives = resolve_alternatives(config, alternatives_path)
    selected = select_configurations(
        snapshot, configurations if configurations is not None else config.configurations
    )
    try:
        check_alternative_dependencies(snapshot.project, selected, alternatives, path)
    except PolicyViolationError as e:
        return _failed(ALTERNATIVE_DEPENDENCIES_CHECK, e, path)
    return CheckResult(name=ALTERNATIVE_DEPENDENCIES_CHECK, passed=True)


def run_jdk_test_matrix(
    config: CheckerConfig,
    jdks: Optional[list[str]] = None,
) -> CheckResult:
    """Run the configured test command on each available JDK.

    Args:
        config: Checker configuration with the test command and JDK homes.
        jdks: JDK names overriding ``config.jdks``.

    Returns:
        The check result; skipped when there is no test command or no JDK
        home is set.
    """
    if not config.test_command:
        return CheckResult(
            name=JDK_TESTS_CHECK,
            passed=True,
            skipped=True,
            message="No test command configured",
        )

    targets = discover_jdk_targets(jdks or config.jdks, config.jdk_homes)
    if not targets:
        return CheckResult(
            name=JDK_TESTS_CHECK,
            passed=True,
            skipped=True,
            message="No JDK home configured",
        )

    results = run_jdk_tests(config.test_command, targets, Path(config.build_dir))
    try:
        enforce_jdk_tests(results)
    except JdkTestError as e:
        return CheckResult(name=JDK_TESTS_CHECK, passed=False, message=str(e))
    return CheckResult(name=JDK_TESTS_CHECK, passed=True)


def run_checks(
    snapshot: DependencySnapshot,
    config: CheckerConfig,
    skip_tests: bool = False,
) -> CheckSummary:
    """Run every check against a project.

    All checks run even when an earlier one fails, so a single run reports
    every problem.

    Args:
        snapshot: The project's dependency snapshot.
        config: Checker configuration.
        skip_tests: Skip running the tests on each JDK.

    Returns:
        CheckSummary with one result per check.

    Raises:
        ConfigurationError: If any check cannot run.
    """
    results = [
        run_version_mapping(snapshot, config),
        run_incomplete_excludes(snapshot, config),
        run_alternative_dependencies(snapshot, config),
    ]
    if skip_tests:
        results.append(
            CheckResult(
                name=JDK_TESTS_CHECK,
                passed=True,
                skipped=True,
                message="Skipped on request",
            )
        )
    else:
        results.append(run_jdk_test_matrix(config))

    summary = CheckSummary(project=snapshot.project, results=results)
    log.info(
        "checks.finished",
        project=snapshot.project,
        failed=[r.name for r in summary.failed],
        problems=summary.total_problems,
    )
    return summary
