"""Pydantic data models for platform-checker."""

from platform_checker.models.config import CheckerConfig
from platform_checker.models.dependency import (
    ConfigurationView,
    DeclaredDependency,
    DependencyId,
    DependencySnapshot,
    ExcludeRule,
    ExternalModuleDependency,
    FileCollectionDependency,
    ProjectDependency,
    RequestedModule,
    ResolvedArtifact,
)
from platform_checker.models.problem import (
    CheckResult,
    CheckSummary,
    Problem,
    Verbosity,
    VersionMappingResult,
)

__all__ = [
    "CheckResult",
    "CheckSummary",
    "CheckerConfig",
    "ConfigurationView",
    "DeclaredDependency",
    "DependencyId",
    "DependencySnapshot",
    "ExcludeRule",
    "ExternalModuleDependency",
    "FileCollectionDependency",
    "Problem",
    "ProjectDependency",
    "RequestedModule",
    "ResolvedArtifact",
    "Verbosity",
    "VersionMappingResult",
]
