"""Dependency policy checks for platform-checker."""
from platform_checker.analysis.alternatives import (
    check_alternative_dependencies,
    find_alternatives,
)
from platform_checker.analysis.excludes import (
    check_exclude_rule,
    check_incomplete_excludes,
    find_incomplete_excludes,
)
from platform_checker.analysis.filtering import select_configurations
from platform_checker.analysis.versions import (
    build_direct_index,
    check_requested_versions,
    check_version_mapping,
    classify_unmapped,
    enforce_version_mapping,
    format_version_mapping_message,
)

__all__ = [
    "build_direct_index",
    "check_alternative_dependencies",
    "check_exclude_rule",
    "check_incomplete_excludes",
    "check_requested_versions",
    "check_version_mapping",
    "classify_unmapped",
    "enforce_version_mapping",
    "find_alternatives",
    "find_incomplete_excludes",
    "format_version_mapping_message",
    "select_configurations",
]
