"""Custom exceptions for platform-checker."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from platform_checker.models.problem import Problem


class PlatformCheckerError(Exception):
    """Base exception for all platform-checker errors."""

    pass


class ConfigurationError(PlatformCheckerError):
    """Exception raised when required input or configuration is invalid."""

    pass


class PolicyViolationError(PlatformCheckerError):
    """Exception raised when dependencies violate a platform policy.

    Raised only after every dependency has been examined, so the message
    and ``problems`` cover all violations found by the check.
    """

    def __init__(self, message: str, problems: Optional[list[Problem]] = None) -> None:
        super().__init__(message)
        self.problems: list[Problem] = problems or []


class JdkTestError(PlatformCheckerError):
    """Exception raised when the test command fails on one or more JDKs."""

    pass
