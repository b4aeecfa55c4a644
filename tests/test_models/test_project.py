from __future__ import annotations

from pathlib import Path

import pytest

from dotnet_outdated.models.project import (
    Dependency,
    Project,
    ProjectItem,
    TargetFramework,
    normalize_package_id,
)


@pytest.mark.unit
class TestProjectModels:
    def test_normalize_package_id(self) -> None:
        assert normalize_package_id("  Newtonsoft.Json ") == "newtonsoft.json"

    def test_package_reference_detection(self) -> None:
        assert ProjectItem("PackageReference", "Serilog").is_package_reference
        assert not ProjectItem("ProjectReference", "../Lib/Lib.csproj").is_package_reference

    def test_dependency_key_is_case_insensitive(self) -> None:
        assert Dependency("Serilog", "1.0").key == Dependency("SERILOG", "2.0").key

    def test_get_dependency(self) -> None:
        framework = TargetFramework(
            "net8.0",
            (Dependency("Serilog", "3.0"), Dependency("Polly", "8.0")),
        )

        assert framework.get_dependency("polly") == Dependency("Polly", "8.0")
        assert framework.get_dependency("Missing") is None

    def test_dependency_count(self) -> None:
        project = Project(
            "App",
            Path("App.csproj"),
            (
                TargetFramework("net6.0", (Dependency("A", "1.0"),)),
                TargetFramework("net8.0", (Dependency("A", "1.0"), Dependency("B", "2.0"))),
            ),
        )

        assert project.dependency_count == 3
