"""CLI entry point for platform-checker."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click
import structlog
from rich.console import Console
from rich.markup import escape

from platform_checker import __version__
from platform_checker.checker import (
    run_alternative_dependencies,
    run_checks,
    run_incomplete_excludes,
    run_jdk_test_matrix,
    run_version_mapping,
)
from platform_checker.config import load_config
from platform_checker.constants import EXIT_ERROR, EXIT_ISSUES, EXIT_SUCCESS
from platform_checker.exceptions import ConfigurationError, PlatformCheckerError
from platform_checker.models.problem import CheckResult, CheckSummary, Verbosity
from platform_checker.output.summary_json import SummaryJsonFormatter
from platform_checker.output.terminal import TerminalFormatter
from platform_checker.snapshot import load_snapshot

# Module-level console for consistent output
_console = Console()
# Separate console for error output (writes to stderr)
_error_console = Console(stderr=True)


def _stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    # Resolve sys.stderr on each use so redirected streams are honoured
    return structlog.PrintLogger(file=sys.stderr)


def _configure_logging(verbose: bool) -> None:
    """Route structured logs to stderr, showing debug events when verbose."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.WARNING
        ),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )


def _config_option(func: Any) -> Any:
    return click.option(
        "--config",
        "-c",
        "config_path",
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help="Path to configuration file.",
    )(func)


def _verbose_option(func: Any) -> Any:
    return click.option(
        "--verbose",
        "-v",
        "verbose_flag",
        is_flag=True,
        default=False,
        help="Show detailed problems and debug logging.",
    )(func)


def _snapshot_argument(func: Any) -> Any:
    return click.argument(
        "snapshot_path",
        metavar="SNAPSHOT",
        type=click.Path(exists=True, dir_okay=False),
    )(func)


def _configurations_option(func: Any) -> Any:
    return click.option(
        "--configuration",
        "configurations",
        multiple=True,
        help="Configuration to scan (repeatable). "
        "Defaults to all configurations not containing 'test'.",
    )(func)


def _report_option(func: Any) -> Any:
    return click.option(
        "--report",
        "report_path",
        type=click.Path(dir_okay=False),
        default=None,
        help="Report file to append problems to.",
    )(func)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Platform Checker - Validate dependencies against a managed platform.

    Checks a project's dependency graph, exported by its build tool as a
    YAML or JSON snapshot, against the platform's managed versions. Also
    flags incomplete exclusions and dependencies with preferred
    alternatives, and runs the project's tests on each configured JDK.

    \b
    Examples:
        platform-checker check build/dependencies.yaml
        platform-checker check build/dependencies.yaml --format json
        platform-checker versions build/dependencies.yaml --configuration runtime
        platform-checker excludes build/dependencies.yaml
        platform-checker alternatives build/dependencies.yaml
        platform-checker test --jdk jdk8
    """
    pass


@main.command()
@_snapshot_argument
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["terminal", "json"], case_sensitive=False),
    default="terminal",
    help="Output format for the summary (default: terminal).",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the JSON summary to file instead of stdout.",
)
@click.option(
    "--skip-tests",
    is_flag=True,
    default=False,
    help="Do not run the tests on each JDK.",
)
@_verbose_option
@click.option(
    "--quiet",
    "-q",
    "quiet_flag",
    is_flag=True,
    default=False,
    help="Show only the overall status and failed checks.",
)
@_config_option
def check(
    snapshot_path: str,
    output_format: str,
    output_path: str | None,
    skip_tests: bool,
    verbose_flag: bool,
    quiet_flag: bool,
    config_path: str | None,
) -> None:
    """Run all platform checks.

    Runs the dependency version mapping, incomplete exclusions and
    alternative dependencies checks, then the tests on each JDK. Every
    check runs even if an earlier one fails.

    \b
    Examples:
        platform-checker check build/dependencies.yaml
        platform-checker check build/dependencies.yaml --skip-tests
        platform-checker check build/dependencies.yaml --format json -o summary.json
    """
    if verbose_flag and quiet_flag:
        raise click.UsageError("--verbose and --quiet are mutually exclusive.")

    if quiet_flag:
        verbosity = Verbosity.QUIET
    elif verbose_flag:
        verbosity = Verbosity.VERBOSE
    else:
        verbosity = Verbosity.NORMAL

    format_value = output_format.lower()
    _configure_logging(verbose_flag)

    try:
        config = load_config(config_path)
        snapshot = load_snapshot(Path(snapshot_path))

        summary = run_checks(snapshot, config, skip_tests=skip_tests)
        _display_summary(summary, format_value, output_path, verbosity)

        if summary.has_failures:
            sys.exit(EXIT_ISSUES)
        sys.exit(EXIT_SUCCESS)

    except PlatformCheckerError as e:
        _display_error(e, format_value)
        sys.exit(EXIT_ERROR)


@main.command()
@_snapshot_argument
@click.option(
    "--configuration",
    default=None,
    help="Configuration to check (default: version_mapping_configuration, "
    "'runtime' unless configured).",
)
@click.option(
    "--managed-versions",
    "managed_versions_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Properties, YAML or JSON file with managed versions.",
)
@click.option(
    "--fail-on-unmapped-direct/--no-fail-on-unmapped-direct",
    default=None,
    help="Fail when a direct dependency has no managed version.",
)
@click.option(
    "--fail-on-unmapped-transitive/--no-fail-on-unmapped-transitive",
    default=None,
    help="Fail when a transitive dependency has no managed version.",
)
@click.option(
    "--before-resolve",
    is_flag=True,
    default=False,
    help="Check the modules requested during resolution instead of the "
    "resolved artifacts.",
)
@_verbose_option
@_config_option
def versions(
    snapshot_path: str,
    configuration: Optional[str],
    managed_versions_path: Optional[str],
    fail_on_unmapped_direct: Optional[bool],
    fail_on_unmapped_transitive: Optional[bool],
    before_resolve: bool,
    verbose_flag: bool,
    config_path: str | None,
) -> None:
    """Check dependencies against the managed versions.

    Direct dependencies without a managed version fail the check by
    default; transitive ones only when requested.

    \b
    Examples:
        platform-checker versions build/dependencies.yaml
        platform-checker versions build/dependencies.yaml --managed-versions platform.properties
        platform-checker versions build/dependencies.yaml --fail-on-unmapped-transitive
    """
    _configure_logging(verbose_flag)

    try:
        config = load_config(config_path)
        updates: dict[str, bool] = {}
        if fail_on_unmapped_direct is not None:
            updates["fail_on_unmapped_direct_dependency"] = fail_on_unmapped_direct
        if fail_on_unmapped_transitive is not None:
            updates["fail_on_unmapped_transitive_dependency"] = fail_on_unmapped_transitive
        config = config.model_copy(update=updates)

        snapshot = load_snapshot(Path(snapshot_path))
        result = run_version_mapping(
            snapshot,
            config,
            configuration=configuration,
            managed_versions_path=Path(managed_versions_path)
            if managed_versions_path
            else None,
            before_resolve=before_resolve,
        )
        _finish(result, verbose_flag)

    except PlatformCheckerError as e:
        _display_error(e, "terminal")
        sys.exit(EXIT_ERROR)


@main.command()
@_snapshot_argument
@_configurations_option
@_report_option
@_verbose_option
@_config_option
def excludes(
    snapshot_path: str,
    configurations: tuple[str, ...],
    report_path: Optional[str],
    verbose_flag: bool,
    config_path: str | None,
) -> None:
    """Check for incomplete dependency exclusions.

    An exclusion must name both a group and a module, otherwise it is
    dropped from generated POMs.

    \b
    Examples:
        platform-checker excludes build/dependencies.yaml
        platform-checker excludes build/dependencies.yaml --configuration compile
    """
    _configure_logging(verbose_flag)

    try:
        config = load_config(config_path)
        snapshot = load_snapshot(Path(snapshot_path))
        result = run_incomplete_excludes(
            snapshot,
            config,
            configurations=list(configurations) or None,
            report_path=Path(report_path) if report_path else None,
        )
        _finish(result, verbose_flag)

    except PlatformCheckerError as e:
        _display_error(e, "terminal")
        sys.exit(EXIT_ERROR)


@main.command()
@_snapshot_argument
@_configurations_option
@click.option(
    "--alternatives",
    "alternatives_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Properties, YAML or JSON file mapping banned group:name to the "
    "preferred alternative (default: bundled list).",
)
@_report_option
@_verbose_option
@_config_option
def alternatives(
    snapshot_path: str,
    configurations: tuple[str, ...],
    alternatives_path: Optional[str],
    report_path: Optional[str],
    verbose_flag: bool,
    config_path: str | None,
) -> None:
    """Check for dependencies that have a preferred alternative.

    \b
    Examples:
        platform-checker alternatives build/dependencies.yaml
        platform-checker alternatives build/dependencies.yaml --alternatives banned.properties
    """
    _configure_logging(verbose_flag)

    try:
        config = load_config(config_path)
        snapshot = load_snapshot(Path(snapshot_path))
        result = run_alternative_dependencies(
            snapshot,
            config,
            configurations=list(configurations) or None,
            alternatives_path=Path(alternatives_path) if alternatives_path else None,
            report_path=Path(report_path) if report_path else None,
        )
        _finish(result, verbose_flag)

    except PlatformCheckerError as e:
        _display_error(e, "terminal")
        sys.exit(EXIT_ERROR)


@main.command()
@click.option(
    "--jdk",
    "jdks",
    multiple=True,
    help="JDK to run the tests on (repeatable, default: configured jdks).",
)
@_verbose_option
@_config_option
def test(
    jdks: tuple[str, ...],
    verbose_flag: bool,
    config_path: str | None,
) -> None:
    """Run the project's tests on each configured JDK.

    A JDK is used when its home is set in the configuration's jdk_homes
    or through an environment variable such as JDK8_HOME.

    \b
    Examples:
        platform-checker test
        platform-checker test --jdk jdk8
    """
    _configure_logging(verbose_flag)

    try:
        config = load_config(config_path)
        result = run_jdk_test_matrix(config, list(jdks) or None)
        _finish(result, verbose_flag)

    except PlatformCheckerError as e:
        _display_error(e, "terminal")
        sys.exit(EXIT_ERROR)


def _finish(result: CheckResult, verbose: bool) -> None:
    """Display a single check result and exit with the matching code.

    Args:
        result: The check result.
        verbose: Whether to list every problem of a failed check.
    """
    if result.skipped:
        reason = escape(result.message or "")
        _console.print(f"[yellow]SKIPPED[/yellow] - {escape(result.name)}: {reason}")
        sys.exit(EXIT_SUCCESS)

    if result.passed:
        _console.print(f"[green]PASS[/green] - {result.name}")
        sys.exit(EXIT_SUCCESS)

    _error_console.print(f"[red bold]FAILED[/red bold] - {result.name}")
    _error_console.print(
        result.message or "", markup=False, highlight=False, soft_wrap=True
    )
    if verbose:
        for problem in result.problems:
            _error_console.print(
                f"  {problem.configuration}: {problem.dependency}: {problem.message}",
                markup=False,
                highlight=False,
                soft_wrap=True,
            )
    sys.exit(EXIT_ISSUES)


def _write_output_to_file(content: str, path: str) -> None:
    """Write report content to file.

    Args:
        content: The report content to write.
        path: The file path to write to.

    Raises:
        ConfigurationError: If file cannot be written.
    """
    file_path = Path(path)

    try:
        if file_path.exists():
            _console.print(
                f"[yellow]Warning: Overwriting existing file: {escape(path)}[/yellow]"
            )
        file_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot write to file '{path}': {e}") from e

    _console.print(f"[green]Summary written to {escape(path)}[/green]")


def _display_summary(
    summary: CheckSummary,
    format_type: str,
    output_path: str | None = None,
    verbosity: Verbosity = Verbosity.NORMAL,
) -> None:
    """Display a check summary in the specified format.

    Args:
        summary: The summary to display.
        format_type: Output format (terminal, json).
        output_path: Optional file path to write output to.
        verbosity: Output verbosity level.
    """
    if format_type == "terminal" and not output_path:
        TerminalFormatter(console=_console, verbosity=verbosity).format_summary(summary)
        return

    # Files always receive JSON
    content = SummaryJsonFormatter().format_summary(summary)
    if output_path:
        _write_output_to_file(content, output_path)
    else:
        click.echo(content)


def _display_error(error: PlatformCheckerError, format_type: str) -> None:
    """Display error message to user.

    All errors are written to stderr for consistent CI/CD behavior.

    Args:
        error: The exception that occurred.
        format_type: Output format type for styling.
    """
    error_type = type(error).__name__
    message = f"Error: {error_type}: {error}"

    if format_type == "terminal":
        _error_console.print(message, style="red bold", markup=False, soft_wrap=True)
    else:
        click.echo(message, err=True)


if __name__ == "__main__":
    main()
