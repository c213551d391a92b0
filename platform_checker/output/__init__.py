"""Output formatters and report writers for platform-checker."""

from platform_checker.output.report import (
    ReportWriter,
    default_report_path,
    format_grouped_report,
    format_nested_report,
)
from platform_checker.output.summary_json import SummaryJsonFormatter
from platform_checker.output.terminal import TerminalFormatter

__all__ = [
    "ReportWriter",
    "SummaryJsonFormatter",
    "TerminalFormatter",
    "default_report_path",
    "format_grouped_report",
    "format_nested_report",
]
