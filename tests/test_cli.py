from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Tuple
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from dotnet_outdated.cli import cli, main
from dotnet_outdated.models.project import ProjectItem, RawProject
from dotnet_outdated.models.version import NuGetVersion
from dotnet_outdated.utils.logger import disable_logging
from dotnet_outdated.utils.console import reconfigure_console


class FakeRegistry:
    def __init__(self, versions: Dict[str, List[str]]) -> None:
        self.versions = versions
        self.calls: List[Tuple[str, bool]] = []

    async def get_latest_version(
        self, package_name: str, include_prerelease: bool
    ) -> Optional[NuGetVersion]:
        self.calls.append((package_name, include_prerelease))
        candidates = [
            NuGetVersion.parse(x)
            for x in self.versions.get(package_name, [])
            if include_prerelease or "-" not in x
        ]
        return max(candidates) if candidates else None


RAW_PROJECT = RawProject(
    name="App",
    path=Path("/src/App/App.csproj"),
    target_frameworks=("net8.0",),
    items=(
        ProjectItem("PackageReference", "Newtonsoft.Json", "[12.0.1, )"),
        ProjectItem("PackageReference", "Serilog", "3.1.1"),
        ProjectItem("PackageReference", "Microsoft.NET.ILLink.Tasks", "8.0.0", is_imported=True),
    ),
)

VERSIONS = {
    "Newtonsoft.Json": ["12.0.1", "13.0.3", "14.0.0-beta1"],
    "Serilog": ["3.1.1"],
}


@pytest.fixture(autouse=True)
def isolated_cli(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Run each CLI invocation in an empty directory with a plain console."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setenv("COLUMNS", "200")
    monkeypatch.delenv("DOTNET_OUTDATED_CONFIG", raising=False)
    monkeypatch.delenv("DOTNET_OUTDATED_COLOR", raising=False)
    reconfigure_console()
    yield tmp_path
    disable_logging()
    reconfigure_console()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    (tmp_path / "App.csproj").write_text("<Project />", encoding="utf-8")
    return tmp_path


@pytest.fixture
def registry() -> Generator[FakeRegistry, None, None]:
    fake = FakeRegistry(VERSIONS)
    with patch("dotnet_outdated.cli.NuGetRegistryClient", return_value=fake):
        yield fake


@pytest.fixture
def analysis() -> Generator[MagicMock, None, None]:
    with patch("dotnet_outdated.cli.ProjectAnalysisService") as service_cls:
        service_cls.return_value.analyze_project.return_value = [RAW_PROJECT]
        yield service_cls.return_value


def run(*args: str) -> int:
    return main(["--no-color", *args])


@pytest.mark.integration
class TestCliRun:
    """End-to-end runs with the toolchain and registry replaced."""

    def test_table_output(
        self,
        project_dir: Path,
        registry: FakeRegistry,
        analysis: MagicMock,
        capsys: pytest.CaptureFixture,
    ) -> None:
        exit_code = run(str(project_dir))

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Newtonsoft.Json" in out
        assert "13.0.3" in out
        assert "Microsoft.NET.ILLink.Tasks" not in out
        assert analysis.analyze_project.call_args[0][0].name == "App.csproj"

    def test_json_output(
        self,
        project_dir: Path,
        registry: FakeRegistry,
        analysis: MagicMock,
        capsys: pytest.CaptureFixture,
    ) -> None:
        exit_code = run("--format", "json", str(project_dir))

        assert exit_code == 0
        data: List[Dict[str, Any]] = json.loads(capsys.readouterr().out)
        deps = data[0]["target_frameworks"][0]["dependencies"]
        assert [d["name"] for d in deps] == ["Newtonsoft.Json", "Serilog"]
        assert deps[0]["latest_version"] == "13.0.3"
        assert deps[0]["outdated"] is True
        assert deps[1]["outdated"] is False

    def test_defaults_to_current_directory(
        self,
        project_dir: Path,
        registry: FakeRegistry,
        analysis: MagicMock,
    ) -> None:
        assert run() == 0
        assert analysis.analyze_project.call_args[0][0] == (project_dir / "App.csproj").resolve()

    def test_pre_release_option(
        self,
        project_dir: Path,
        registry: FakeRegistry,
        analysis: MagicMock,
        capsys: pytest.CaptureFixture,
    ) -> None:
        exit_code = run("--pre-release", "ALWAYS", "-f", "json")

        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert data[0]["target_frameworks"][0]["dependencies"][0]["latest_version"] == (
            "14.0.0-beta1"
        )
        assert all(include for _, include in registry.calls)

    def test_config_file_policy_and_cli_override(
        self,
        project_dir: Path,
        registry: FakeRegistry,
        analysis: MagicMock,
    ) -> None:
        (project_dir / "dotnet-outdated.toml").write_text(
            '[dotnet-outdated]\nprerelease = "always"\n', encoding="utf-8"
        )

        assert run() == 0
        assert all(include for _, include in registry.calls)

        registry.calls.clear()
        assert run("-pr", "never") == 0
        assert not any(include for _, include in registry.calls)

    def test_no_projects_with_package_references(
        self,
        project_dir: Path,
        registry: FakeRegistry,
        analysis: MagicMock,
        capsys: pytest.CaptureFixture,
    ) -> None:
        analysis.analyze_project.return_value = []

        assert run() == 0
        assert "No projects with package references" in capsys.readouterr().out
        assert registry.calls == []


@pytest.mark.unit
class TestCliErrors:
    """Exit codes for failing runs."""

    def test_no_project_found(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        assert run(str(tmp_path)) == 1
        assert "does not contain any solutions or projects" in capsys.readouterr().out

    def test_ambiguous_directory(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        (tmp_path / "A.csproj").write_text("", encoding="utf-8")
        (tmp_path / "B.csproj").write_text("", encoding="utf-8")

        assert run(str(tmp_path)) == 1
        assert "multiple projects" in capsys.readouterr().out

    def test_invalid_config(
        self, project_dir: Path, capsys: pytest.CaptureFixture
    ) -> None:
        (project_dir / "dotnet-outdated.toml").write_text(
            "[dotnet-outdated]\nspeed = 11\n", encoding="utf-8"
        )

        assert run() == 1
        assert "Unknown configuration keys: speed" in capsys.readouterr().out

    def test_usage_error(self, capsys: pytest.CaptureFixture) -> None:
        assert run("--format", "xml") == 2
        assert "xml" in capsys.readouterr().err

    def test_interrupted(self, project_dir: Path, analysis: MagicMock) -> None:
        analysis.analyze_project.side_effect = KeyboardInterrupt

        assert run() == 130

    def test_unexpected_error(
        self, project_dir: Path, analysis: MagicMock, capsys: pytest.CaptureFixture
    ) -> None:
        analysis.analyze_project.side_effect = RuntimeError("kaboom")

        assert run() == 1
        assert "Unexpected error: kaboom" in capsys.readouterr().out

    def test_version(self, capsys: pytest.CaptureFixture) -> None:
        assert main(["--version"]) == 0
        assert "dotnet-outdated 0.1.0" in capsys.readouterr().out


@pytest.mark.unit
class TestCliCommand:
    """Option parsing through click's runner."""

    def test_help_lists_options(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        for option in ("--pre-release", "--format", "--config", "--verbose"):
            assert option in result.output

    def test_pre_release_choice_is_validated(self) -> None:
        result = CliRunner().invoke(cli, ["--pre-release", "sometimes"])

        assert result.exit_code == 2
        assert "sometimes" in result.output

    def test_missing_config_file(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(cli, ["--config", str(tmp_path / "nope.toml")])

        assert result.exit_code == 2
