"""Running the project's tests on each configured JDK.

A JDK takes part when its home is set, either under ``jdk_homes`` in the
configuration or through an environment variable named after it
(``jdk8`` -> ``JDK8_HOME``). JDKs without a home are skipped.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from pathlib import Path
from typing import NamedTuple, Optional

import structlog

from platform_checker.constants import TEST_RESULTS_ENV_VAR
from platform_checker.exceptions import ConfigurationError, JdkTestError

log = structlog.get_logger("platform_checker.jdk")


class JdkTarget(NamedTuple):
    """A JDK the tests will run on.

    Attributes:
        name: JDK name as configured, e.g. "jdk8".
        home: JDK home directory.
        executable: The JDK's java executable.
    """

    name: str
    home: Path
    executable: Path


class JdkTestResult(NamedTuple):
    """Outcome of running the test command on one JDK."""

    jdk: str
    returncode: int
    results_dir: Path

    @property
    def passed(self) -> bool:
        return self.returncode == 0


def home_variable(jdk: str) -> str:
    """Name of the environment variable holding a JDK's home."""
    return f"{jdk.upper()}_HOME"


def is_windows() -> bool:
    return os.pathsep == ";"


def java_executable(home: Path, windows: Optional[bool] = None) -> Path:
    """Get the java executable inside a JDK home.

    Args:
        home: JDK home directory.
        windows: Whether to use the Windows executable name. Detected from
            the platform when None.

    Returns:
        Path to ``bin/java`` (``bin/java.exe`` on Windows).
    """
    if windows is None:
        windows = is_windows()
    return home / "bin" / ("java.exe" if windows else "java")


def discover_jdk_targets(
    jdks: list[str],
    jdk_homes: Optional[Mapping[str, str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    windows: Optional[bool] = None,
) -> list[JdkTarget]:
    """Find the JDKs the tests should run on.

    Args:
        jdks: JDK names, in run order.
        jdk_homes: Homes by JDK name, taking precedence over the environment.
        environ: Environment to read ``<NAME>_HOME`` variables from.
            Defaults to os.environ.
        windows: Whether to look for Windows executables.

    Returns:
        A target for each JDK whose home is set.

    Raises:
        ConfigurationError: If a home is set but contains no java executable.
    """
    homes = jdk_homes or {}
    env = os.environ if environ is None else environ
    targets: list[JdkTarget] = []
    for jdk in jdks:
        variable = home_variable(jdk)
        home = homes.get(jdk) or env.get(variable)
        if not home:
            log.debug("jdk.skipped", jdk=jdk, variable=variable)
            continue
        executable = java_executable(Path(home), windows)
        if not executable.exists():
            raise ConfigurationError(
                f"The path {executable} does not exist! Please provide a valid "
                f"JDK home using the {variable} environment variable or "
                f"jdk_homes.{jdk} in the configuration"
            )
        targets.append(JdkTarget(name=jdk, home=Path(home), executable=executable))
    return targets


def results_dir(build_dir: Path, jdk: str) -> Path:
    return build_dir / f"platform-check-{jdk.lower()}-test-results"


def run_jdk_tests(
    command: list[str],
    targets: list[JdkTarget],
    build_dir: Path,
    environ: Optional[Mapping[str, str]] = None,
) -> list[JdkTestResult]:
    """Run the test command once per JDK.

    The command runs with ``JAVA_HOME`` pointing at the JDK, the JDK's
    ``bin`` directory first on ``PATH`` and ``PLATFORM_CHECKER_TEST_RESULTS``
    naming a per-JDK results directory. All JDKs run even if one fails.

    Args:
        command: The test command and its arguments.
        targets: JDKs to run on.
        build_dir: Build directory holding the results directories.
        environ: Base environment. Defaults to os.environ.

    Returns:
        One result per target, in run order.

    Raises:
        ConfigurationError: If the command is empty or cannot be started.
    """
    if not command:
        raise ConfigurationError("The test command is empty")

    base_env = dict(os.environ if environ is None else environ)
    results: list[JdkTestResult] = []
    for target in targets:
        output_dir = results_dir(build_dir, target.name)
        env = dict(base_env)
        env["JAVA_HOME"] = str(target.home)
        env["PATH"] = os.pathsep.join(
            part for part in (str(target.home / "bin"), base_env.get("PATH")) if part
        )
        env[TEST_RESULTS_ENV_VAR] = str(output_dir)

        log.info("jdk.tests_started", jdk=target.name, command=command)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            completed = subprocess.run(command, env=env, check=False)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot run test command '{command[0]}' on {target.name}: {e}"
            ) from e

        result = JdkTestResult(
            jdk=target.name, returncode=completed.returncode, results_dir=output_dir
        )
        log.info("jdk.tests_finished", jdk=target.name, returncode=result.returncode)
        results.append(result)
    return results


def enforce_jdk_tests(results: list[JdkTestResult]) -> None:
    """Fail if the tests failed on any JDK.

    Raises:
        JdkTestError: Naming each failing JDK and its exit code.
    """
    failed = [r for r in results if not r.passed]
    if failed:
        details = ", ".join(f"{r.jdk} (exit code {r.returncode})" for r in failed)
        raise JdkTestError(f"Tests failed on {details}")
