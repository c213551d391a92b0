"""Tests for the CLI."""
import json
from pathlib import Path
from typing import Any, Callable

import pytest
from click.testing import CliRunner

from platform_checker import __version__
from platform_checker.cli import main


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run each command from tmp_path so reports land there."""
    monkeypatch.chdir(tmp_path)
    for variable in ("JDK7_HOME", "JDK8_HOME"):
        monkeypatch.delenv(variable, raising=False)


def _with_problems(data: dict[str, Any]) -> dict[str, Any]:
    data["configurations"][0]["dependencies"].append(
        {
            "group": "asm",
            "name": "asm",
            "version": "3.3.1",
            "excludes": [{"module": "commons-logging"}],
        }
    )
    data["configurations"][1]["resolved"].append(
        {"group": "asm", "name": "asm", "version": "3.3.1"}
    )
    return data


class TestMainGroup:
    """Tests for the command group."""

    def test_version(self, cli_runner: CliRunner) -> None:
        """Test --version output."""
        result = cli_runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, cli_runner: CliRunner) -> None:
        """Test that every command is listed in the help."""
        result = cli_runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        for command in ["check", "versions", "excludes", "alternatives", "test"]:
            assert command in result.output


class TestCheckCommand:
    """Tests for the check command."""

    def test_passing_project(
        self,
        cli_runner: CliRunner,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test that a passing project exits with 0."""
        result = cli_runner.invoke(main, ["check", str(write_snapshot(snapshot_data))])

        assert result.exit_code == 0
        assert "PASS" in result.output

    def test_failing_project(
        self,
        cli_runner: CliRunner,
        tmp_path: Path,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test that violations exit with 1 and write reports."""
        path = write_snapshot(_with_problems(snapshot_data))

        result = cli_runner.invoke(main, ["check", str(path), "--skip-tests"])

        assert result.exit_code == 1
        assert "FAILED" in result.output
        report_dir = tmp_path / "build" / "platform-check"
        assert (report_dir / "incomplete-excludes.log").exists()
        assert (report_dir / "alternative-dependencies.log").exists()

    def test_json_output(
        self,
        cli_runner: CliRunner,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test the JSON summary on stdout."""
        path = write_snapshot(_with_problems(snapshot_data))

        result = cli_runner.invoke(main, ["check", str(path), "--format", "json"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["project"] == "sample"
        assert data["summary"]["failed_checks"] == [
            "dependency-version-mapping",
            "incomplete-excludes",
            "alternative-dependencies",
        ]
        assert data["checks"][-1]["status"] == "skipped"

    def test_json_output_file(
        self,
        cli_runner: CliRunner,
        tmp_path: Path,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test writing the summary to a file."""
        path = write_snapshot(snapshot_data)
        output = tmp_path / "summary.json"

        result = cli_runner.invoke(main, ["check", str(path), "-o", str(output)])

        assert result.exit_code == 0
        assert "Summary written to" in result.output
        assert json.loads(output.read_text(encoding="utf-8"))["summary"]["status"] == (
            "pass"
        )

    def test_quiet(
        self,
        cli_runner: CliRunner,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test quiet output."""
        result = cli_runner.invoke(
            main, ["check", str(write_snapshot(snapshot_data)), "--quiet"]
        )

        assert result.exit_code == 0
        assert "satisfies all checks" in result.output

    def test_verbose_and_quiet_exclusive(
        self,
        cli_runner: CliRunner,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test that --verbose and --quiet cannot be combined."""
        result = cli_runner.invoke(
            main, ["check", str(write_snapshot(snapshot_data)), "-v", "-q"]
        )

        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_invalid_snapshot(
        self,
        cli_runner: CliRunner,
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test that an invalid snapshot exits with 2."""
        path = write_snapshot({"configurations": []})

        result = cli_runner.invoke(main, ["check", str(path)])

        assert result.exit_code == 2
        assert "ConfigurationError" in result.output

    def test_config_file(
        self,
        cli_runner: CliRunner,
        tmp_path: Path,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test that the configuration file changes the build directory."""
        config = tmp_path / "checker.yaml"
        config.write_text(f"build_dir: {tmp_path / 'out'}\n", encoding="utf-8")
        path = write_snapshot(_with_problems(snapshot_data))

        result = cli_runner.invoke(main, ["check", str(path), "-c", str(config)])

        assert result.exit_code == 1
        assert (tmp_path / "out" / "platform-check" / "incomplete-excludes.log").exists()


class TestVersionsCommand:
    """Tests for the versions command."""

    def test_passes(
        self,
        cli_runner: CliRunner,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test a fully managed configuration."""
        result = cli_runner.invoke(
            main, ["versions", str(write_snapshot(snapshot_data))]
        )

        assert result.exit_code == 0
        assert "PASS - dependency-version-mapping" in result.output

    def test_unmapped_direct(
        self,
        cli_runner: CliRunner,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test that an unmapped direct dependency exits with 1."""
        path = write_snapshot(_with_problems(snapshot_data))

        result = cli_runner.invoke(main, ["versions", str(path)])

        assert result.exit_code == 1
        assert "asm:asm" in result.output

    def test_no_fail_on_unmapped_direct(
        self,
        cli_runner: CliRunner,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test relaxing the direct dependency policy."""
        path = write_snapshot(_with_problems(snapshot_data))

        result = cli_runner.invoke(
            main, ["versions", str(path), "--no-fail-on-unmapped-direct"]
        )

        assert result.exit_code == 0

    def test_fail_on_unmapped_transitive(
        self,
        cli_runner: CliRunner,
        tmp_path: Path,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test the transitive policy with an explicit managed versions file."""
        managed = tmp_path / "platform.properties"
        managed.write_text(
            "org.springframework\\:spring-core=4.3.3.RELEASE\n", encoding="utf-8"
        )
        path = write_snapshot(snapshot_data)

        result = cli_runner.invoke(
            main,
            [
                "versions",
                str(path),
                "--managed-versions",
                str(managed),
                "--fail-on-unmapped-transitive",
            ],
        )

        assert result.exit_code == 1
        assert "commons-logging:commons-logging" in result.output

    def test_unknown_configuration(
        self,
        cli_runner: CliRunner,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test that an unknown configuration exits with 2."""
        result = cli_runner.invoke(
            main,
            ["versions", str(write_snapshot(snapshot_data)), "--configuration", "x"],
        )

        assert result.exit_code == 2
        assert "not found" in result.output


class TestExcludesCommand:
    """Tests for the excludes command."""

    def test_passes(
        self,
        cli_runner: CliRunner,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test a project without incomplete exclusions."""
        result = cli_runner.invoke(
            main, ["excludes", str(write_snapshot(snapshot_data))]
        )

        assert result.exit_code == 0
        assert "PASS - incomplete-excludes" in result.output

    def test_custom_report(
        self,
        cli_runner: CliRunner,
        tmp_path: Path,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test writing the report to a chosen file."""
        report = tmp_path / "excludes.log"
        path = write_snapshot(_with_problems(snapshot_data))

        result = cli_runner.invoke(
            main, ["excludes", str(path), "--report", str(report), "-v"]
        )

        assert result.exit_code == 1
        assert "Exclude for module commons-logging" in report.read_text(
            encoding="utf-8"
        )
        assert "asm:asm:3.3.1" in result.output


class TestAlternativesCommand:
    """Tests for the alternatives command."""

    def test_bundled_alternatives(
        self,
        cli_runner: CliRunner,
        tmp_path: Path,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test that the bundled list flags asm:asm."""
        path = write_snapshot(_with_problems(snapshot_data))

        result = cli_runner.invoke(main, ["alternatives", str(path)])

        assert result.exit_code == 1
        report = tmp_path / "build" / "platform-check" / "alternative-dependencies.log"
        assert "instead of asm:asm" in report.read_text(encoding="utf-8")

    def test_custom_alternatives(
        self,
        cli_runner: CliRunner,
        tmp_path: Path,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test that an alternatives file replaces the bundled list."""
        alternatives = tmp_path / "banned.properties"
        alternatives.write_text("junit\\:junit=org.junit:junit-bom\n", encoding="utf-8")
        path = write_snapshot(_with_problems(snapshot_data))

        result = cli_runner.invoke(
            main,
            [
                "alternatives",
                str(path),
                "--alternatives",
                str(alternatives),
                "--configuration",
                "testCompile",
            ],
        )

        assert result.exit_code == 1
        assert "PASS" not in result.output


class TestTestCommand:
    """Tests for the test command."""

    def test_skipped_without_command(self, cli_runner: CliRunner) -> None:
        """Test that the run is skipped when no test command is configured."""
        result = cli_runner.invoke(main, ["test"])

        assert result.exit_code == 0
        assert "SKIPPED" in result.output
        assert "No test command configured" in result.output


class TestErrorOutput:
    """Tests for error reporting."""

    def test_malformed_snapshot_with_brackets(
        self, cli_runner: CliRunner, tmp_path: Path
    ) -> None:
        """Test that YAML errors quoting bracketed source exit with 2."""
        path = tmp_path / "dependencies.yaml"
        path.write_text("project: sample\nconfigurations: [/libs/a\n", encoding="utf-8")

        result = cli_runner.invoke(main, ["check", str(path)])

        assert result.exit_code == 2
        assert "Error: ConfigurationError: Invalid YAML syntax" in result.output
        assert "[/libs/a" in result.output

    def test_alternative_text_with_brackets(
        self,
        cli_runner: CliRunner,
        tmp_path: Path,
        snapshot_data: dict[str, Any],
        write_snapshot: Callable[..., Path],
    ) -> None:
        """Test that bracketed alternative text is shown in verbose output."""
        alternatives = tmp_path / "banned.yaml"
        alternatives.write_text(
            "'asm:asm': 'org.ow2.asm:asm[/docs]'\n", encoding="utf-8"
        )
        config = tmp_path / "checker.yaml"
        config.write_text(f"alternatives_file: {alternatives}\n", encoding="utf-8")
        path = write_snapshot(_with_problems(snapshot_data))

        result = cli_runner.invoke(
            main, ["check", str(path), "-c", str(config), "-v", "--skip-tests"]
        )

        assert result.exit_code == 1
        assert "org.ow2.asm:asm[/docs]" in result.output
