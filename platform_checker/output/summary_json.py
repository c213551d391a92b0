"""JSON output formatter for check summaries."""
import json
from datetime import datetime, timezone
from typing import Any

from platform_checker import __version__
from platform_checker.models.problem import CheckResult, CheckSummary


class SummaryJsonFormatter:
    """Format check summaries as JSON for CI/CD integration."""

    def format_summary(self, summary: CheckSummary) -> str:
        """Format a check summary as a JSON string.

        Args:
            summary: The summary to format.

        Returns:
            JSON string representation of the summary.
        """
        return json.dumps(self._build_output(summary), indent=2)

    def _build_output(self, summary: CheckSummary) -> dict[str, Any]:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        return {
            "metadata": {
                "generated_at": timestamp,
                "tool_version": __version__,
            },
            "project": summary.project,
            "summary": {
                "status": "failed" if summary.has_failures else "pass",
                "has_failures": summary.has_failures,
                "failed_checks": [r.name for r in summary.failed],
                "total_problems": summary.total_problems,
            },
            "checks": [self._build_check(r) for r in summary.results],
        }

    def _build_check(self, result: CheckResult) -> dict[str, Any]:
        if result.skipped:
            status = "skipped"
        elif result.passed:
            status = "pass"
        else:
            status = "failed"
        return {
            "name": result.name,
            "status": status,
            "message": result.message,
            "report_path": result.report_path,
            "problems": [p.model_dump() for p in result.problems],
        }
