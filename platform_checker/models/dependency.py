"""Dependency graph models for platform-checker.

Represents the resolved dependency graph exported by the host build tool:
named configurations holding declared (direct) dependencies, the artifacts
they resolved to, and the module selectors requested during resolution.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from platform_checker.constants import TEST_CONFIGURATION_MARKER
from platform_checker.exceptions import ConfigurationError


class DependencyId(BaseModel):
    """A module identity, the join key between declarations and catalogs."""

    group: str = Field(description="Module group")
    name: str = Field(description="Module name (artifact)")

    model_config = {"extra": "forbid", "frozen": True}

    def __str__(self) -> str:
        return f"{self.group}:{self.name}"

    @classmethod
    def parse(cls, notation: str) -> DependencyId:
        """Parse a ``group:name`` notation.

        Args:
            notation: The colon separated identifier.

        Returns:
            The parsed DependencyId.

        Raises:
            ValueError: If the notation is not exactly ``group:name``.
        """
        parts = notation.strip().split(":")
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"Expected 'group:name', got '{notation}'")
        return cls(group=parts[0], name=parts[1])


class ExcludeRule(BaseModel):
    """An exclusion of a transitive module from a dependency's resolution."""

    group: Optional[str] = Field(default=None, description="Excluded group")
    module: Optional[str] = Field(default=None, description="Excluded module")

    model_config = {"extra": "forbid", "frozen": True}

    @property
    def is_complete(self) -> bool:
        """True if both group and module are specified."""
        return bool(self.group) and bool(self.module)


class ExternalModuleDependency(BaseModel):
    """A dependency on a module resolved from a repository."""

    kind: Literal["module"] = "module"
    group: str = Field(description="Module group")
    name: str = Field(description="Module name (artifact)")
    version: Optional[str] = Field(default=None, description="Requested version")
    excludes: list[ExcludeRule] = Field(
        default_factory=list,
        description="Exclusion rules declared on this dependency",
    )

    model_config = {"extra": "forbid", "frozen": True}

    @property
    def dependency_id(self) -> DependencyId:
        return DependencyId(group=self.group, name=self.name)

    @property
    def notation(self) -> str:
        """The ``group:name:version`` form used in reports."""
        if self.version is None:
            return f"{self.group}:{self.name}"
        return f"{self.group}:{self.name}:{self.version}"


class ProjectDependency(BaseModel):
    """A dependency on another project of the same build."""

    kind: Literal["project"] = "project"
    path: str = Field(description="Path of the referenced project")

    model_config = {"extra": "forbid", "frozen": True}


class FileCollectionDependency(BaseModel):
    """A dependency on local files, which have no module identity."""

    kind: Literal["files"] = "files"
    files: list[str] = Field(default_factory=list, description="Referenced files")

    model_config = {"extra": "forbid", "frozen": True}


DeclaredDependency = Annotated[
    Union[ExternalModuleDependency, ProjectDependency, FileCollectionDependency],
    Field(discriminator="kind"),
]


class ResolvedArtifact(BaseModel):
    """An artifact produced by resolving a configuration.

    Artifacts resolved from raw files carry no group or name.
    """

    group: Optional[str] = Field(default=None, description="Module group")
    name: Optional[str] = Field(default=None, description="Module name")
    version: Optional[str] = Field(default=None, description="Resolved version")

    model_config = {"extra": "forbid", "frozen": True}

    @property
    def dependency_id(self) -> Optional[DependencyId]:
        """The module identity, or None for artifacts without one."""
        if not self.group or not self.name:
            return None
        return DependencyId(group=self.group, name=self.name)


class RequestedModule(BaseModel):
    """A module selector requested while resolving a configuration."""

    group: str = Field(description="Requested group")
    name: str = Field(description="Requested module name")
    version: Optional[str] = Field(default=None, description="Requested version")

    model_config = {"extra": "forbid", "frozen": True}

    @property
    def dependency_id(self) -> DependencyId:
        return DependencyId(group=self.group, name=self.name)


class ConfigurationView(BaseModel):
    """A named configuration with its declared and resolved dependencies."""

    name: str = Field(description="Configuration name")
    extends_from: list[str] = Field(
        default_factory=list,
        description="Names of configurations whose declarations are inherited",
    )
    dependencies: list[DeclaredDependency] = Field(
        default_factory=list,
        description="Dependencies declared directly in this configuration",
    )
    resolved: list[ResolvedArtifact] = Field(
        default_factory=list,
        description="Artifacts the configuration resolved to",
    )
    requested: list[RequestedModule] = Field(
        default_factory=list,
        description="Module selectors requested during resolution",
    )
    managed_versions: Optional[dict[str, str]] = Field(
        default=None,
        description="Managed versions (group:name -> version) for this configuration",
    )

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("dependencies", mode="before")
    @classmethod
    def _default_dependency_kind(cls, value: Any) -> Any:
        # Module dependencies are the common case, so "kind" may be omitted
        if isinstance(value, list):
            return [
                {**item, "kind": "module"}
                if isinstance(item, dict) and "kind" not in item
                else item
                for item in value
            ]
        return value

    def module_dependencies(self) -> list[ExternalModuleDependency]:
        """Get the declared dependencies that are external modules."""
        return [
            dep for dep in self.dependencies if isinstance(dep, ExternalModuleDependency)
        ]

    @property
    def is_test(self) -> bool:
        """True if the name marks this as a test configuration."""
        return TEST_CONFIGURATION_MARKER in self.name.lower()


class DependencySnapshot(BaseModel):
    """The dependency graph of one project, as exported by the build tool."""

    project: str = Field(description="Project name, used as report header")
    configurations: list[ConfigurationView] = Field(
        default_factory=list,
        description="All configurations of the project",
    )

    model_config = {"extra": "forbid", "frozen": True}

    def find_configuration(self, name: str) -> Optional[ConfigurationView]:
        for configuration in self.configurations:
            if configuration.name == name:
                return configuration
        return None

    def get_configuration(self, name: str) -> ConfigurationView:
        """Get a configuration by name.

        Args:
            name: The configuration name.

        Returns:
            The matching ConfigurationView.

        Raises:
            ConfigurationError: If the project has no such configuration.
        """
        configuration = self.find_configuration(name)
        if configuration is None:
            known = ", ".join(c.name for c in self.configurations) or "none"
            raise ConfigurationError(
                f"Configuration '{name}' not found in project '{self.project}' "
                f"(known configurations: {known})"
            )
        return configuration

    def all_dependencies(self, name: str) -> list[DeclaredDependency]:
        """Get the dependencies declared in a configuration and its parents.

        Parents listed in ``extends_from`` are followed transitively; each
        configuration is visited once, so cyclic hierarchies terminate.

        Args:
            name: The configuration name.

        Returns:
            Declarations in visit order (own declarations first).

        Raises:
            ConfigurationError: If the configuration or a parent is unknown.
        """
        visited: set[str] = set()
        collected: list[DeclaredDependency] = []
        pending = [name]
        while pending:
            current = pending.pop(0)
            if current in visited:
                continue
            visited.add(current)
            configuration = self.get_configuration(current)
            collected.extend(configuration.dependencies)
            pending.extend(configuration.extends_from)
        return collected
