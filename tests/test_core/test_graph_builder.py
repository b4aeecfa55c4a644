from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from dotnet_outdated.core.graph_builder import DependencyGraphBuilder
from dotnet_outdated.exceptions import ProjectStructureError
from dotnet_outdated.models.project import Dependency, ProjectItem, RawProject


def package(
    name: str,
    version: str | None = "1.0.0",
    *,
    imported: bool = False,
    framework: str | None = None,
) -> ProjectItem:
    return ProjectItem(
        item_type="PackageReference",
        include=name,
        version=version,
        is_imported=imported,
        target_framework=framework,
    )


def raw(*items: ProjectItem, frameworks: tuple = ("net8.0",), name: str = "App") -> RawProject:
    return RawProject(
        name=name,
        path=Path(f"/src/{name}/{name}.csproj"),
        target_frameworks=frameworks,
        items=items,
    )


@pytest.fixture
def builder() -> DependencyGraphBuilder:
    return DependencyGraphBuilder()


@pytest.mark.unit
class TestBuildProject:
    """Tests for DependencyGraphBuilder.build_project."""

    def test_direct_references_only(self, builder: DependencyGraphBuilder) -> None:
        project = builder.build_project(
            raw(
                package("Serilog", "3.1.1"),
                package("Microsoft.NET.ILLink.Tasks", "8.0.0", imported=True),
                ProjectItem("ProjectReference", "../Lib/Lib.csproj"),
                package("Polly", "8.2.0"),
                package("Implicit.Sdk", "1.0.0", imported=True),
            )
        )

        (framework,) = project.target_frameworks
        assert [d.name for d in framework.dependencies] == ["Serilog", "Polly"]

    def test_declaration_order_preserved(self, builder: DependencyGraphBuilder) -> None:
        names = ["Zeta", "Alpha", "Mid", "Beta"]
        project = builder.build_project(raw(*(package(n) for n in names)))

        assert [d.name for d in project.target_frameworks[0].dependencies] == names

    def test_unscoped_items_apply_to_every_framework(
        self, builder: DependencyGraphBuilder
    ) -> None:
        project = builder.build_project(
            raw(package("Serilog"), frameworks=("net6.0", "net8.0"))
        )

        assert [tf.name for tf in project.target_frameworks] == ["net6.0", "net8.0"]
        for framework in project.target_frameworks:
            assert framework.dependencies == (Dependency("Serilog", "1.0.0"),)

    def test_scoped_items_apply_to_their_framework(
        self, builder: DependencyGraphBuilder
    ) -> None:
        project = builder.build_project(
            raw(
                package("Common"),
                package("Legacy", framework="net472"),
                package("Modern", framework="NET8.0"),
                frameworks=("net472", "net8.0"),
            )
        )

        net472, net8 = project.target_frameworks
        assert [d.name for d in net472.dependencies] == ["Common", "Legacy"]
        assert [d.name for d in net8.dependencies] == ["Common", "Modern"]

    def test_item_for_undeclared_framework_is_skipped(
        self, builder: DependencyGraphBuilder
    ) -> None:
        with patch("dotnet_outdated.core.graph_builder.logger") as mock_logger:
            project = builder.build_project(
                raw(package("Orphan", framework="net9.0"), package("Kept"))
            )

        assert [d.name for d in project.target_frameworks[0].dependencies] == ["Kept"]
        assert "undeclared framework" in mock_logger.warning.call_args[0][0]

    def test_duplicates_keep_first_position_and_last_version(
        self, builder: DependencyGraphBuilder
    ) -> None:
        project = builder.build_project(
            raw(
                package("Serilog", "2.0.0"),
                package("Polly", "8.0.0"),
                package("serilog", "3.0.0"),
            )
        )

        deps = project.target_frameworks[0].dependencies
        assert [d.key for d in deps] == ["serilog", "polly"]
        assert deps[0].range_spec == "3.0.0"

    def test_missing_version_is_kept(self, builder: DependencyGraphBuilder) -> None:
        project = builder.build_project(raw(package("NoVersion", None)))

        assert project.target_frameworks[0].dependencies == (Dependency("NoVersion", None),)

    def test_blank_include_is_ignored(self, builder: DependencyGraphBuilder) -> None:
        project = builder.build_project(raw(package("   ")))

        assert project.target_frameworks[0].dependencies == ()

    def test_duplicate_monikers_collapse(self, builder: DependencyGraphBuilder) -> None:
        project = builder.build_project(raw(frameworks=("net8.0", "NET8.0", " net8.0 ")))

        assert [tf.name for tf in project.target_frameworks] == ["net8.0"]

    def test_no_frameworks_raises(self, builder: DependencyGraphBuilder) -> None:
        with pytest.raises(ProjectStructureError) as exc_info:
            builder.build_project(raw(package("Serilog"), frameworks=()))

        assert exc_info.value.project_name == "App"
        assert exc_info.value.project_path.endswith("App.csproj")

    def test_project_metadata(self, builder: DependencyGraphBuilder) -> None:
        project = builder.build_project(raw(name="Web"))

        assert project.name == "Web"
        assert project.path == Path("/src/Web/Web.csproj")


@pytest.mark.unit
class TestBuild:
    def test_build_many(self) -> None:
        projects = DependencyGraphBuilder().build(
            [raw(package("A"), name="One"), raw(package("B"), name="Two")]
        )

        assert [p.name for p in projects] == ["One", "Two"]

    def test_counts_direct_and_imported(self) -> None:
        direct = [package(f"Direct{i}") for i in range(4)]
        imported = [package(f"Implicit{i}", imported=True) for i in range(3)]

        project = DependencyGraphBuilder().build_project(raw(*direct, *imported))

        assert project.dependency_count == 4
