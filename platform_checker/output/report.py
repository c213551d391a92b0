"""Plain text problem reports appended to log files under the build directory."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import structlog

from platform_checker.constants import REPORT_DIR_NAME
from platform_checker.exceptions import ConfigurationError

log = structlog.get_logger("platform_checker.report")

_INDENT = "    "


def default_report_path(build_dir: Path, report_name: str) -> Path:
    """Get the default location of a report.

    Args:
        build_dir: The project's build directory.
        report_name: File name of the report.

    Returns:
        Path of the report inside the build directory.
    """
    return build_dir / REPORT_DIR_NAME / report_name


def format_grouped_report(
    project: str, problems_by_configuration: Mapping[str, list[str]]
) -> list[str]:
    """Format problems grouped by configuration.

    Args:
        project: Project name, written as the header.
        problems_by_configuration: Problem messages by configuration name.

    Returns:
        Report lines.
    """
    lines = [project]
    for configuration, problems in problems_by_configuration.items():
        lines.append(f"{_INDENT}Configuration: {configuration}")
        lines.extend(f"{_INDENT * 2}{problem}" for problem in problems)
    return lines


def format_nested_report(
    project: str,
    problems_by_configuration: Mapping[str, Mapping[str, list[str]]],
) -> list[str]:
    """Format problems grouped by configuration, then by dependency.

    Args:
        project: Project name, written as the header.
        problems_by_configuration: Problem messages by dependency notation,
            by configuration name.

    Returns:
        Report lines.
    """
    lines = [project]
    for configuration, problems_by_dependency in problems_by_configuration.items():
        lines.append(f"{_INDENT}Configuration: {configuration}")
        for dependency, problems in problems_by_dependency.items():
            lines.append(f"{_INDENT * 2}{dependency}")
            lines.extend(f"{_INDENT * 3}{problem}" for problem in problems)
    return lines


class ReportWriter:
    """Append report text to a file.

    Reports accumulate across runs: the file is never truncated.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def append(self, lines: list[str]) -> None:
        """Append lines to the report, creating it if needed.

        Args:
            lines: Lines to write, without line terminators.

        Raises:
            ConfigurationError: If the report cannot be written.
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as report:
                for line in lines:
                    report.write(f"{line}\n")
        except OSError as e:
            raise ConfigurationError(
                f"Cannot write report '{self._path}': {e}"
            ) from e
        log.debug("report.appended", path=str(self._path), lines=len(lines))
