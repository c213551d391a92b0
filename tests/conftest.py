"""Shared fixtures for platform-checker tests."""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import structlog
import yaml
from click.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undo logging configuration applied by CLI invocations."""
    yield
    structlog.reset_defaults()


_SAMPLE_SNAPSHOT: dict[str, Any] = {
    "project": "sample",
    "configurations": [
        {
            "name": "compile",
            "dependencies": [
                {
                    "group": "org.springframework",
                    "name": "spring-core",
                    "version": "4.3.3.RELEASE",
                },
            ],
        },
        {
            "name": "runtime",
            "extends_from": ["compile"],
            "resolved": [
                {
                    "group": "org.springframework",
                    "name": "spring-core",
                    "version": "4.3.3.RELEASE",
                },
                {
                    "group": "commons-logging",
                    "name": "commons-logging",
                    "version": "1.2",
                },
            ],
            "managed_versions": {
                "org.springframework:spring-core": "4.3.3.RELEASE",
                "commons-logging:commons-logging": "1.2",
            },
        },
        {
            "name": "testCompile",
            "extends_from": ["compile"],
            "dependencies": [
                {"group": "junit", "name": "junit", "version": "4.12"},
            ],
        },
    ],
}


@pytest.fixture
def snapshot_data() -> dict[str, Any]:
    """A snapshot of a project that passes every check, as raw data."""
    return copy.deepcopy(_SAMPLE_SNAPSHOT)


@pytest.fixture
def write_snapshot(tmp_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Write snapshot data to a YAML file and return its path."""

    def _write(data: dict[str, Any], name: str = "dependencies.yaml") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write
