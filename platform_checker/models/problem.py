"""Problem and check result models for platform-checker."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from platform_checker.models.dependency import DependencyId


class Problem(BaseModel):
    """A single finding of a check.

    Flattened form of a validator's grouped findings, used for summaries.
    """

    model_config = {"extra": "forbid"}

    configuration: str = Field(description="Configuration the problem was found in")
    dependency: str = Field(description="Dependency the problem relates to")
    message: str = Field(description="Human readable description of the problem")


class VersionMappingResult(BaseModel):
    """Classification of dependencies that are missing from the managed versions.

    Both lists preserve first-seen order and contain no duplicates.
    """

    model_config = {"extra": "forbid"}

    configuration: str = Field(description="Configuration that was checked")
    unmapped_direct: list[DependencyId] = Field(
        default_factory=list,
        description="Direct dependencies without a managed version",
    )
    unmapped_transitive: list[DependencyId] = Field(
        default_factory=list,
        description="Transitive dependencies without a managed version",
    )

    def to_problems(
        self,
        fail_on_unmapped_direct: bool = True,
        fail_on_unmapped_transitive: bool = False,
    ) -> list[Problem]:
        """Flatten the unmapped dependencies that the policy flags.

        Args:
            fail_on_unmapped_direct: Whether unmapped direct dependencies count.
            fail_on_unmapped_transitive: Whether unmapped transitive ones count.

        Returns:
            One Problem per flagged dependency.
        """
        problems: list[Problem] = []
        if fail_on_unmapped_direct:
            problems.extend(
                Problem(
                    configuration=self.configuration,
                    dependency=str(dep),
                    message="Direct dependency does not have a managed version",
                )
                for dep in self.unmapped_direct
            )
        if fail_on_unmapped_transitive:
            problems.extend(
                Problem(
                    configuration=self.configuration,
                    dependency=str(dep),
                    message="Transitive dependency does not have a managed version",
                )
                for dep in self.unmapped_transitive
            )
        return problems


class CheckResult(BaseModel):
    """Outcome of one check of the aggregate run."""

    model_config = {"extra": "forbid"}

    name: str = Field(description="Check name")
    passed: bool = Field(description="Whether the check passed")
    skipped: bool = Field(default=False, description="Whether the check was skipped")
    problems: list[Problem] = Field(
        default_factory=list,
        description="Problems found by the check",
    )
    message: Optional[str] = Field(
        default=None,
        description="Failure message, or the reason the check was skipped",
    )
    report_path: Optional[str] = Field(
        default=None,
        description="Report file written by the check, if any",
    )


class CheckSummary(BaseModel):
    """Results of all checks run against one project."""

    model_config = {"extra": "forbid"}

    project: str = Field(description="Project that was checked")
    results: list[CheckResult] = Field(
        default_factory=list,
        description="Result of each check, in execution order",
    )

    @property
    def has_failures(self) -> bool:
        """Check if any check failed.

        Returns:
            True if at least one non-skipped check did not pass.
        """
        return any(not r.passed and not r.skipped for r in self.results)

    @property
    def failed(self) -> list[CheckResult]:
        return [r for r in self.results if not r.passed and not r.skipped]

    @property
    def total_problems(self) -> int:
        return sum(len(r.problems) for r in self.results)


class Verbosity(Enum):
    """Output verbosity levels."""

    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"
