"""Tests for plain text problem reports."""
from pathlib import Path

import pytest

from platform_checker.exceptions import ConfigurationError
from platform_checker.output.report import (
    ReportWriter,
    default_report_path,
    format_grouped_report,
    format_nested_report,
)


class TestDefaultReportPath:
    """Tests for default_report_path."""

    def test_inside_build_dir(self) -> None:
        """Test that reports live in the platform-check directory."""
        path = default_report_path(Path("build"), "incomplete-excludes.log")

        assert path == Path("build") / "platform-check" / "incomplete-excludes.log"


class TestFormatReports:
    """Tests for report formatting."""

    def test_grouped(self) -> None:
        """Test grouping messages by configuration."""
        lines = format_grouped_report(
            "sample", {"compile": ["first", "second"], "runtime": ["third"]}
        )

        assert lines == [
            "sample",
            "    Configuration: compile",
            "        first",
            "        second",
            "    Configuration: runtime",
            "        third",
        ]

    def test_nested(self) -> None:
        """Test grouping messages by configuration and dependency."""
        lines = format_nested_report(
            "sample", {"compile": {"a:b:1.0": ["first"], "c:d": ["second"]}}
        )

        assert lines == [
            "sample",
            "    Configuration: compile",
            "        a:b:1.0",
            "            first",
            "        c:d",
            "            second",
        ]


class TestReportWriter:
    """Tests for ReportWriter."""

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        """Test that missing directories are created."""
        path = tmp_path / "build" / "platform-check" / "report.log"
        writer = ReportWriter(path)

        writer.append(["sample", "    Configuration: compile"])

        assert writer.path == path
        assert path.read_text(encoding="utf-8") == (
            "sample\n    Configuration: compile\n"
        )

    def test_appends(self, tmp_path: Path) -> None:
        """Test that existing content is kept."""
        path = tmp_path / "report.log"
        path.write_text("previous run\n", encoding="utf-8")

        ReportWriter(path).append(["sample"])

        assert path.read_text(encoding="utf-8") == "previous run\nsample\n"

    def test_unwritable(self, tmp_path: Path) -> None:
        """Test that write failures raise ConfigurationError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Cannot write report"):
            ReportWriter(blocker / "report.log").append(["sample"])
