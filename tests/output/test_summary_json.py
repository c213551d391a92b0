"""Tests for JSON summary output."""
import json

from platform_checker import __version__
from platform_checker.models.problem import CheckResult, CheckSummary, Problem
from platform_checker.output.summary_json import SummaryJsonFormatter


def _summary() -> CheckSummary:
    return CheckSummary(
        project="sample",
        results=[
            CheckResult(name="dependency-version-mapping", passed=True),
            CheckResult(
                name="incomplete-excludes",
                passed=False,
                message="Found incomplete dependency exclusions.",
                report_path="build/platform-check/incomplete-excludes.log",
                problems=[
                    Problem(
                        configuration="compile",
                        dependency="commons-logging:commons-logging:1.2",
                        message="Exclude for group log4j does not specify a module.",
                    )
                ],
            ),
            CheckResult(
                name="jdk-tests", passed=True, skipped=True, message="Skipped on request"
            ),
        ],
    )


class TestSummaryJsonFormatter:
    """Tests for SummaryJsonFormatter."""

    def test_valid_json(self) -> None:
        """Test that output parses as JSON with the expected sections."""
        data = json.loads(SummaryJsonFormatter().format_summary(_summary()))

        assert set(data) == {"metadata", "project", "summary", "checks"}
        assert data["metadata"]["tool_version"] == __version__
        assert data["metadata"]["generated_at"].endswith("Z")
        assert data["project"] == "sample"

    def test_summary_section(self) -> None:
        """Test the overall status."""
        data = json.loads(SummaryJsonFormatter().format_summary(_summary()))

        assert data["summary"] == {
            "status": "failed",
            "has_failures": True,
            "failed_checks": ["incomplete-excludes"],
            "total_problems": 1,
        }

    def test_check_statuses(self) -> None:
        """Test the status of each check."""
        data = json.loads(SummaryJsonFormatter().format_summary(_summary()))

        assert [c["status"] for c in data["checks"]] == ["pass", "failed", "skipped"]
        failed = data["checks"][1]
        assert failed["report_path"] == "build/platform-check/incomplete-excludes.log"
        assert failed["problems"][0]["configuration"] == "compile"

    def test_passing(self) -> None:
        """Test a summary without failures."""
        summary = CheckSummary(
            project="sample",
            results=[CheckResult(name="dependency-version-mapping", passed=True)],
        )

        data = json.loads(SummaryJsonFormatter().format_summary(summary))

        assert data["summary"]["status"] == "pass"
        assert data["summary"]["failed_checks"] == []
