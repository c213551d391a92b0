"""Configuration Pydantic models for platform-checker."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class CheckerConfig(BaseModel):
    """Configuration for platform-checker.

    Every field has a default, so an empty or missing configuration file
    gives the standard policy: unmapped direct dependencies fail, unmapped
    transitive dependencies are tolerated, and every non-test configuration
    is scanned for exclusions and alternatives.
    """

    model_config = {"extra": "forbid"}

    fail_on_unmapped_direct_dependency: bool = Field(
        default=True,
        description="Fail when a direct dependency has no managed version.",
    )
    fail_on_unmapped_transitive_dependency: bool = Field(
        default=False,
        description="Fail when a transitive dependency has no managed version.",
    )
    configurations: Optional[List[str]] = Field(
        default=None,
        description="Configurations to scan for exclusions and alternatives. "
        "Defaults to every configuration whose name does not contain 'test'.",
    )
    version_mapping_configuration: str = Field(
        default="runtime",
        description="Configuration whose resolved graph is checked against "
        "the managed versions.",
    )
    managed_versions: Optional[Dict[str, str]] = Field(
        default=None,
        description="Managed versions (group:name -> version). Takes "
        "precedence over versions exported with the snapshot.",
    )
    managed_versions_file: Optional[str] = Field(
        default=None,
        description="Properties, YAML or JSON file with managed versions.",
    )
    alternatives: Optional[Dict[str, str]] = Field(
        default=None,
        description="Banned dependencies (group:name) mapped to the preferred "
        "alternative. Replaces the bundled list.",
    )
    alternatives_file: Optional[str] = Field(
        default=None,
        description="Properties file with alternatives. Replaces the bundled list.",
    )
    build_dir: str = Field(
        default="build",
        description="Directory reports and test results are written to.",
    )
    jdks: List[str] = Field(
        default_factory=lambda: ["jdk7", "jdk8"],
        description="JDKs to run the test command on, when their home is set.",
    )
    jdk_homes: Optional[Dict[str, str]] = Field(
        default=None,
        description="JDK home directories by JDK name. Environment variables "
        "such as JDK8_HOME are used for JDKs not listed here.",
    )
    test_command: Optional[List[str]] = Field(
        default=None,
        description="Command that runs the project's tests on each JDK.",
    )
