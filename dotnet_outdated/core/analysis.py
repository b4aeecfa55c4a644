"""Build-graph extraction for dotnet-outdated.

MSBuild can describe everything NuGet restore would see for a solution or
project through the ``GenerateRestoreGraphFile`` target. The resulting
*dgspec* JSON looks like this (trimmed)::

    {
      "format": 1,
      "restore": {"/src/App/App.csproj": {}},
      "projects": {
        "/src/App/App.csproj": {
          "restore": {
            "projectName": "App",
            "projectPath": "/src/App/App.csproj",
            "projectStyle": "PackageReference"
          },
          "frameworks": {
            "net8.0": {
              "dependencies": {
                "Newtonsoft.Json": {"target": "Package", "version": "[13.0.1, )"},
                "Microsoft.NET.ILLink.Tasks": {
                  "target": "Package", "version": "[8.0.0, )", "autoReferenced": true
                }
              }
            }
          }
        }
      }
    }

:class:`ProjectAnalysisService` runs the target through
:class:`DotNetRunner` and converts each ``PackageReference`` style project
into a :class:`~dotnet_outdated.models.project.RawProject`. Filtering of
implicit references is left to the graph builder.
"""

from __future__ import annotations

import json
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from dotnet_outdated.constants import (
    DEPENDENCY_GRAPH_FILE,
    DOTNET_EXECUTABLE,
    PACKAGE_REFERENCE_ITEM,
    PACKAGE_REFERENCE_STYLE,
)
from dotnet_outdated.exceptions import FileOperationError, ProjectAnalysisError
from dotnet_outdated.models.project import ProjectItem, RawProject
from dotnet_outdated.utils.filesystem import safe_read_file
from dotnet_outdated.utils.logger import get_logger

logger = get_logger("analysis")

# dgspec dependency "target" -> MSBuild item type
_TARGET_ITEM_TYPES = {
    "package": PACKAGE_REFERENCE_ITEM,
    "project": "ProjectReference",
    "reference": "Reference",
}


@dataclass(frozen=True)
class RunStatus:
    """Outcome of a ``dotnet`` invocation."""

    output: str
    errors: str
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class DotNetRunner:
    """Thin wrapper around the ``dotnet`` executable.

    Args:
        executable: Name or path of the ``dotnet`` host.
        timeout: Seconds to wait for a command, ``None`` for no limit.
    """

    def __init__(
        self,
        executable: str = DOTNET_EXECUTABLE,
        timeout: Optional[float] = None,
    ) -> None:
        self.executable = executable
        self.timeout = timeout

    def run(self, working_directory: Path, arguments: Sequence[str]) -> RunStatus:
        """Run ``dotnet <arguments>`` in *working_directory*.

        Raises:
            ProjectAnalysisError: The executable is missing or timed out.
        """
        command = [self.executable, *arguments]
        logger.debug("Running %s in %s", " ".join(command), working_directory)

        try:
            completed = subprocess.run(
                command,
                cwd=str(working_directory),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ProjectAnalysisError(
                f"Could not run '{self.executable}'; is the .NET SDK installed?",
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ProjectAnalysisError(
                f"'{' '.join(command)}' timed out after {self.timeout}s",
            ) from exc

        return RunStatus(
            output=completed.stdout or "",
            errors=completed.stderr or "",
            exit_code=completed.returncode,
        )


class ProjectAnalysisService:
    """Produces raw dependency declarations for a solution or project."""

    def __init__(self, runner: Optional[DotNetRunner] = None) -> None:
        self.runner = runner or DotNetRunner()

    def analyze_project(self, project_path: Path) -> List[RawProject]:
        """Generate and read the dependency graph of *project_path*.

        Args:
            project_path: Solution or project file.

        Returns:
            One :class:`RawProject` per ``PackageReference`` style project.

        Raises:
            ProjectAnalysisError: MSBuild failed or produced an unreadable graph.
        """
        project_path = Path(project_path)
        with tempfile.TemporaryDirectory(prefix="dotnet-outdated-") as tmp:
            graph_file = Path(tmp) / DEPENDENCY_GRAPH_FILE
            status = self.runner.run(
                project_path.parent,
                [
                    "msbuild",
                    str(project_path),
                    "/t:GenerateRestoreGraphFile",
                    f"/p:RestoreGraphOutputPath={graph_file}",
                ],
            )

            if not status.succeeded or not graph_file.is_file():
                raise ProjectAnalysisError(
                    f"Unable to create dependency graph file for {project_path.name}",
                    project_path=str(project_path),
                    output=status.output + status.errors,
                )

            try:
                data = json.loads(safe_read_file(graph_file))
            except (FileOperationError, ValueError) as exc:
                raise ProjectAnalysisError(
                    f"Unable to read dependency graph for {project_path.name}: {exc}",
                    project_path=str(project_path),
                ) from exc

        projects = parse_dependency_graph(data)
        logger.info("Found %d project(s) in %s", len(projects), project_path.name)
        return projects


def parse_dependency_graph(data: Dict[str, Any]) -> List[RawProject]:
    """Convert a parsed dgspec document into raw projects.

    Projects whose restore style is not ``PackageReference`` (for example
    ``packages.config`` projects) are skipped.

    Raises:
        ProjectAnalysisError: The document does not have a ``projects`` map.
    """
    projects = data.get("projects") if isinstance(data, dict) else None
    if not isinstance(projects, dict):
        raise ProjectAnalysisError("Dependency graph has no 'projects' section")

    result: List[RawProject] = []
    for key, spec in projects.items():
        if not isinstance(spec, dict):
            continue
        restore = spec.get("restore") or {}
        style = restore.get("projectStyle", PACKAGE_REFERENCE_STYLE)
        if style != PACKAGE_REFERENCE_STYLE:
            logger.debug("Skipping %s (project style %s)", key, style)
            continue
        result.append(_raw_project(key, restore, spec.get("frameworks") or {}))

    return result


def _raw_project(key: str, restore: Dict[str, Any], frameworks: Dict[str, Any]) -> RawProject:
    path = Path(restore.get("projectPath") or key)
    name = restore.get("projectName") or path.stem

    items: List[ProjectItem] = []
    for moniker, framework in frameworks.items():
        dependencies = (framework or {}).get("dependencies") or {}
        for package_id, declaration in dependencies.items():
            items.append(_project_item(package_id, declaration, moniker))

    return RawProject(
        name=name,
        path=path,
        target_frameworks=tuple(frameworks),
        items=tuple(items),
    )


def _project_item(package_id: str, declaration: Any, moniker: str) -> ProjectItem:
    # Old dgspec files store the bare range string instead of an object
    if isinstance(declaration, str):
        declaration = {"version": declaration}
    elif not isinstance(declaration, dict):
        declaration = {}

    target = str(declaration.get("target", "Package")).lower()
    return ProjectItem(
        item_type=_TARGET_ITEM_TYPES.get(target, target),
        include=package_id,
        version=declaration.get("version"),
        is_imported=bool(declaration.get("autoReferenced", False)),
        target_framework=moniker,
    )
